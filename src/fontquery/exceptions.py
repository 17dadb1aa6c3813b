"""Exception hierarchy shared by the parser, matcher, and registry."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from fontquery.descriptors import DescriptorField, FontDescriptor
    from fontquery.registry import FontFaceEntry


class FontQueryError(RuntimeError):
    """Base exception for font resolution failures."""


class GrammarError(FontQueryError, ValueError):
    """Raised when a style, weight, or stretch shorthand does not parse."""

    def __init__(self, field: DescriptorField, raw: str) -> None:
        self.field = field
        self.raw = raw
        super().__init__(f"invalid font {field} '{raw}'")


class FontNotFoundError(FontQueryError, LookupError):
    """Raised when a required font has no registered match."""

    def __init__(
        self, family: str, descriptor: FontDescriptor | Mapping[str, Any] | None = None
    ) -> None:
        self.family = family
        self.descriptor = descriptor
        values: list[str] = []
        if descriptor is not None:
            values = [str(value) for _key, value in descriptor.items() if value]
        font = " ".join([family, *values]).strip()
        super().__init__(f"missing required font '{font}'")


class FontLoadError(FontQueryError):
    """Raised through a load future when fetching a font source fails."""

    def __init__(self, entry: FontFaceEntry, cause: BaseException) -> None:
        self.entry = entry
        self.cause = cause
        super().__init__(f"failed to load font '{entry.family}' from '{entry.source}': {cause}")


class FontNotRegisteredError(FontQueryError, ValueError):
    """Raised when a registry is asked to load a face it does not hold."""

    def __init__(self, entry: FontFaceEntry) -> None:
        self.entry = entry
        super().__init__(f"Font face '{entry.family}' is not registered")


class ManifestError(FontQueryError):
    """Raised when a font manifest cannot be read or validated."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "FontLoadError",
    "FontNotFoundError",
    "FontNotRegisteredError",
    "FontQueryError",
    "GrammarError",
    "ManifestError",
    "exception_hint",
    "exception_messages",
]
