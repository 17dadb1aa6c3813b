"""Structured events reported while resolving and loading fonts.

The resolver reports ``font_matched`` when a request reuses a registered face
and ``font_registered`` when it adds one. The registry reports ``font_loaded``
and ``font_load_failed`` from its worker threads. Every payload carries the
``family`` and the request ``descriptor``; registration adds the ``source``,
loads add the payload ``size`` and failures the ``error`` text.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)

FONT_MATCHED = "font_matched"
FONT_REGISTERED = "font_registered"
FONT_LOADED = "font_loaded"
FONT_LOAD_FAILED = "font_load_failed"


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Receiver for font resolution events."""

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class LoggingEmitter:
    """Default emitter writing font events to the ``logging`` module.

    Load failures are logged as warnings, other known events at info level.
    """

    def __init__(self, *, logger_obj: logging.Logger | None = None) -> None:
        self._logger = logger_obj or logger

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message is None:
            self._logger.debug("Unhandled font event %s: %s", name, dict(payload))
        elif name == FONT_LOAD_FAILED:
            self._logger.warning(message)
        else:
            self._logger.info(message)


def _describe(payload: Mapping[str, Any]) -> str:
    family = payload.get("family") or "?"
    descriptor = payload.get("descriptor")
    if isinstance(descriptor, Mapping) and descriptor:
        details = " ".join(str(value) for value in descriptor.values() if value)
        if details:
            return f"'{family} {details}'"
    return f"'{family}'"


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a one-line summary of a font event, or None for unknown events."""
    data = dict(payload)

    if name == FONT_MATCHED:
        return f"Reusing registered font {_describe(data)}"
    if name == FONT_REGISTERED:
        source = data.get("source")
        suffix = f" from {source}" if source else ""
        return f"Registered font {_describe(data)}{suffix}"
    if name == FONT_LOADED:
        size = data.get("size")
        suffix = f" ({size} bytes)" if isinstance(size, int) else ""
        return f"Loaded font {_describe(data)}{suffix}"
    if name == FONT_LOAD_FAILED:
        reason = data.get("error")
        suffix = f": {reason}" if reason else ""
        return f"Failed to load font {_describe(data)}{suffix}"
    return None


__all__ = [
    "FONT_LOADED",
    "FONT_LOAD_FAILED",
    "FONT_MATCHED",
    "FONT_REGISTERED",
    "DiagnosticEmitter",
    "LoggingEmitter",
    "format_event_message",
]
