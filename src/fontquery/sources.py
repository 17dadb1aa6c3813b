"""Fetch font source payloads from local files or remote URLs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from pathlib import Path
import re
import ssl
from typing import Any
import urllib.error
from urllib.parse import unquote, urlparse
import urllib.request

import certifi


logger = logging.getLogger(__name__)

_CSS_URL_RE = re.compile(r"""^url\(\s*(?P<quote>['"]?)(?P<target>.*?)(?P=quote)\s*\)$""", re.I)
_REMOTE_SCHEMES = frozenset({"http", "https"})


class TLSCertificateError(RuntimeError):
    """Raised when TLS certificate verification fails during downloads."""


@dataclass(frozen=True, slots=True)
class FontSource:
    """Resolved location of a font payload."""

    target: str
    remote: bool

    @property
    def path(self) -> Path:
        if self.remote:
            raise ValueError(f"'{self.target}' is a remote source")
        return Path(self.target)


def _tls_help(url: str) -> str:
    return (
        "TLS certificate verification failed while downloading "
        f"'{url}'. Install or upgrade 'certifi', check the system date/time, "
        "and any proxy or corporate SSL inspection."
    )


def _ssl_context() -> ssl.SSLContext:
    return ssl.create_default_context(cafile=certifi.where())


def _is_cert_error(error: urllib.error.URLError) -> bool:
    reason = getattr(error, "reason", None)
    return isinstance(reason, ssl.SSLCertVerificationError)


def parse_source(source: str) -> FontSource:
    """Resolve a ``url(...)`` wrapper, path, ``file://`` or ``http(s)://`` source."""
    text = source.strip()
    match = _CSS_URL_RE.match(text)
    if match:
        text = match.group("target").strip()
    if not text:
        raise ValueError(f"Empty font source: {source!r}")

    parsed = urlparse(text)
    scheme = parsed.scheme.lower()
    if scheme in _REMOTE_SCHEMES:
        return FontSource(target=text, remote=True)
    if scheme == "file":
        return FontSource(target=unquote(parsed.path), remote=False)
    if scheme and len(scheme) > 1:
        raise ValueError(f"Unsupported font source scheme '{scheme}' in {source!r}")
    # Single letter schemes are Windows drive letters.
    return FontSource(target=text, remote=False)


def open_url(
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    timeout: float | None = None,
) -> Any:
    """Open a URL with a certifi SSL context and cert guidance on failure."""
    request = urllib.request.Request(url, headers=dict(headers or {}))
    try:
        return urllib.request.urlopen(request, timeout=timeout, context=_ssl_context())
    except urllib.error.URLError as exc:
        if _is_cert_error(exc):
            raise TLSCertificateError(_tls_help(url)) from exc
        raise


def fetch_source(source: str, *, timeout: float | None = None) -> bytes:
    """Return the raw bytes behind ``source``; the payload is never inspected."""
    resolved = parse_source(source)
    if resolved.remote:
        logger.debug("Downloading font source %s", resolved.target)
        with open_url(resolved.target, timeout=timeout) as response:
            data = response.read()
    else:
        logger.debug("Reading font source %s", resolved.target)
        data = resolved.path.expanduser().read_bytes()
    if not data:
        raise ValueError(f"Font source '{source}' is empty")
    return data


__all__ = ["FontSource", "TLSCertificateError", "fetch_source", "open_url", "parse_source"]
