"""Find registered fonts before loading new ones."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from concurrent.futures import Future
import logging
from typing import Any

from fontquery.descriptors import FontDescriptor
from fontquery.diagnostics import (
    FONT_MATCHED,
    FONT_REGISTERED,
    DiagnosticEmitter,
    LoggingEmitter,
)
from fontquery.exceptions import FontNotFoundError, FontNotRegisteredError
from fontquery.matcher import build_query, match_entry
from fontquery.registry import FontFaceEntry, FontRegistry


logger = logging.getLogger(__name__)

DescriptorLike = FontDescriptor | Mapping[str, Any] | None


def query_entries(
    family: str, descriptor: DescriptorLike, entries: Iterable[FontFaceEntry]
) -> FontFaceEntry | None:
    """Return the first of ``entries`` matching ``family`` and ``descriptor``."""
    return match_entry(build_query(family, descriptor), entries)


class FontResolver:
    """Resolve font requests against a registry, registering faces on demand."""

    def __init__(self, registry: FontRegistry, *, emitter: DiagnosticEmitter | None = None) -> None:
        self.registry = registry
        self._emitter = emitter or LoggingEmitter()

    def query(self, family: str, descriptor: DescriptorLike = None) -> FontFaceEntry | None:
        """Return an already registered face satisfying the request, if any.

        Raises:
            GrammarError: the request, or a registered face consulted while
                matching, carries malformed shorthand.
        """
        desc = FontDescriptor.coerce(descriptor)
        entry = query_entries(family, desc, self.registry.entries())
        if entry is None:
            logger.debug("No registered font matches '%s' %s", family, desc.present())
        return entry

    def require(self, family: str, descriptor: DescriptorLike = None) -> FontFaceEntry:
        """Like :meth:`query` but raise :class:`FontNotFoundError` on a miss."""
        desc = FontDescriptor.coerce(descriptor)
        entry = self.query(family, desc)
        if entry is None:
            raise FontNotFoundError(family, desc)
        return entry

    def load(
        self, family: str, source: str, descriptor: DescriptorLike = None
    ) -> Future[FontFaceEntry]:
        """Load a matching face, registering a new one from ``source`` when none exists.

        The returned future resolves to the loaded entry or raises
        :class:`~fontquery.exceptions.FontLoadError`. Concurrent calls that both
        miss may each register a face; no in-flight deduplication is attempted.
        A matched face removed by another thread before its load starts is
        treated as a miss.
        """
        desc = FontDescriptor.coerce(descriptor)
        payload = {"family": family, "descriptor": desc.present()}
        entry = self.query(family, desc)
        if entry is not None:
            try:
                future = self.registry.load(entry)
            except FontNotRegisteredError:
                logger.debug("Matched font '%s' was removed before loading", family)
            else:
                self._emitter.event(FONT_MATCHED, payload)
                return future

        entry = self.registry.add(FontFaceEntry.from_descriptor(family, source, desc))
        self._emitter.event(FONT_REGISTERED, {**payload, "source": source})
        return self.registry.load(entry)

    def load_existing(self, family: str, descriptor: DescriptorLike = None) -> Future[FontFaceEntry]:
        """Wait for a face that must already be registered."""
        return self.registry.load(self.require(family, descriptor))


__all__ = ["DescriptorLike", "FontResolver", "query_entries"]
