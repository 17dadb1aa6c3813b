"""Registered font faces and a thread-safe in-memory registry that loads them."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
import functools
import logging
from threading import RLock
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from fontquery.descriptors import FontDescriptor
from fontquery.diagnostics import (
    FONT_LOAD_FAILED,
    FONT_LOADED,
    DiagnosticEmitter,
    LoggingEmitter,
)
from fontquery.exceptions import FontLoadError, FontNotRegisteredError
from fontquery.sources import fetch_source


logger = logging.getLogger(__name__)

DEFAULT_DESCRIPTOR = "normal"
DEFAULT_UNICODE_RANGE = "U+0-10FFFF"

# Fields unrelated to family/style/weight/stretch; a face is only reused when
# every one of them still holds its default.
STRUCTURAL_DEFAULTS: Mapping[str, str] = MappingProxyType(
    {
        "ascent_override": DEFAULT_DESCRIPTOR,
        "descent_override": DEFAULT_DESCRIPTOR,
        "feature_settings": DEFAULT_DESCRIPTOR,
        "line_gap_override": DEFAULT_DESCRIPTOR,
        "unicode_range": DEFAULT_UNICODE_RANGE,
    }
)

Fetcher = Callable[[str], bytes]


class FontLoadStatus(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"

    def __str__(self) -> str:
        return self.value


@dataclass(slots=True, eq=False)
class FontFaceEntry:
    """A font face known to a registry.

    Descriptors are stored as shorthand strings in the same grammar accepted by
    queries. Entries compare by identity: two registrations with the same fields
    are still two faces.
    """

    family: str
    source: str
    style: str = DEFAULT_DESCRIPTOR
    weight: str = DEFAULT_DESCRIPTOR
    stretch: str = DEFAULT_DESCRIPTOR
    ascent_override: str = DEFAULT_DESCRIPTOR
    descent_override: str = DEFAULT_DESCRIPTOR
    feature_settings: str = DEFAULT_DESCRIPTOR
    line_gap_override: str = DEFAULT_DESCRIPTOR
    unicode_range: str = DEFAULT_UNICODE_RANGE
    status: FontLoadStatus = FontLoadStatus.UNLOADED
    payload: bytes | None = field(default=None, repr=False)
    error: BaseException | None = field(default=None, repr=False)

    @classmethod
    def from_descriptor(
        cls,
        family: str,
        source: str,
        descriptor: FontDescriptor | Mapping[str, str | None] | None = None,
    ) -> FontFaceEntry:
        """Create an entry, filling absent descriptors with ``normal``."""
        desc = FontDescriptor.coerce(descriptor)
        return cls(
            family=family,
            source=source,
            style=desc.style or DEFAULT_DESCRIPTOR,
            weight=desc.weight or DEFAULT_DESCRIPTOR,
            stretch=desc.stretch or DEFAULT_DESCRIPTOR,
        )

    @property
    def descriptor(self) -> FontDescriptor:
        return FontDescriptor(style=self.style, weight=self.weight, stretch=self.stretch)

    @property
    def loaded(self) -> bool:
        return self.status is FontLoadStatus.LOADED

    def structural_overrides(self) -> dict[str, str]:
        """Return structural fields whose value differs from the default."""
        return {
            name: getattr(self, name)
            for name, default in STRUCTURAL_DEFAULTS.items()
            if getattr(self, name) != default
        }


@runtime_checkable
class FontRegistry(Protocol):
    """Collaborator owning registered faces.

    ``load`` raises :class:`~fontquery.exceptions.FontNotRegisteredError` for an
    entry it does not hold, such as one removed after ``entries()`` returned it.
    """

    def entries(self) -> tuple[FontFaceEntry, ...]: ...

    def add(self, entry: FontFaceEntry) -> FontFaceEntry: ...

    def load(self, entry: FontFaceEntry) -> Future[FontFaceEntry]: ...


def _completed(entry: FontFaceEntry) -> Future[FontFaceEntry]:
    future: Future[FontFaceEntry] = Future()
    future.set_result(entry)
    return future


class FontFaceRegistry:
    """In-memory registry fetching font payloads on a worker pool.

    Iteration order is registration order. ``entries()`` returns a snapshot, so
    queries never observe a half-applied mutation. Loading is idempotent per
    entry: a loaded entry yields a completed future and an entry being loaded
    yields its in-flight future.
    """

    def __init__(
        self,
        entries: Iterable[FontFaceEntry] = (),
        *,
        fetcher: Fetcher | None = None,
        max_workers: int = 4,
        fetch_timeout: float | None = None,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        if fetcher is None:
            fetcher = functools.partial(fetch_source, timeout=fetch_timeout)
        self._fetcher = fetcher
        self._max_workers = max_workers
        self._emitter = emitter or LoggingEmitter()
        self._lock = RLock()
        self._entries: list[FontFaceEntry] = []
        self._pending: dict[FontFaceEntry, Future[FontFaceEntry]] = {}
        self._executor: ThreadPoolExecutor | None = None
        for entry in entries:
            self.add(entry)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __iter__(self) -> Iterator[FontFaceEntry]:
        return iter(self.entries())

    def __contains__(self, entry: object) -> bool:
        with self._lock:
            return any(item is entry for item in self._entries)

    def __enter__(self) -> FontFaceRegistry:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.shutdown()

    def entries(self) -> tuple[FontFaceEntry, ...]:
        """Return the registered entries in registration order."""
        with self._lock:
            return tuple(self._entries)

    def add(self, entry: FontFaceEntry) -> FontFaceEntry:
        """Register ``entry``; registering the same object twice is a no-op."""
        with self._lock:
            if entry not in self:
                self._entries.append(entry)
                logger.debug("Registered font face %s", entry.family)
        return entry

    def remove(self, entry: FontFaceEntry) -> bool:
        with self._lock:
            for index, item in enumerate(self._entries):
                if item is entry:
                    del self._entries[index]
                    self._pending.pop(entry, None)
                    return True
        return False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._pending.clear()

    def load(self, entry: FontFaceEntry) -> Future[FontFaceEntry]:
        """Start loading ``entry`` unless it is already loaded or loading."""
        with self._lock:
            if entry not in self:
                raise FontNotRegisteredError(entry)
            if entry.status is FontLoadStatus.LOADED:
                return _completed(entry)
            pending = self._pending.get(entry)
            if pending is not None:
                return pending
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="fontquery-load"
                )
            entry.status = FontLoadStatus.LOADING
            future = self._executor.submit(self._load_entry, entry)
            self._pending[entry] = future
            return future

    def _load_entry(self, entry: FontFaceEntry) -> FontFaceEntry:
        payload = {"family": entry.family, "descriptor": entry.descriptor.present()}
        try:
            data = self._fetcher(entry.source)
        except Exception as exc:
            entry.status = FontLoadStatus.ERROR
            entry.error = exc
            self._emitter.event(FONT_LOAD_FAILED, {**payload, "error": str(exc)})
            raise FontLoadError(entry, exc) from exc

        entry.payload = data
        entry.error = None
        entry.status = FontLoadStatus.LOADED
        with self._lock:
            self._pending.pop(entry, None)
        self._emitter.event(FONT_LOADED, {**payload, "size": len(data)})
        return entry

    def shutdown(self, *, wait: bool = True) -> None:
        """Stop the worker pool; pending loads finish when ``wait`` is true."""
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=wait)


__all__ = [
    "DEFAULT_UNICODE_RANGE",
    "STRUCTURAL_DEFAULTS",
    "FontFaceEntry",
    "FontFaceRegistry",
    "FontLoadStatus",
    "FontRegistry",
]
