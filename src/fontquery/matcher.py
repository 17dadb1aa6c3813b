"""First-match search of registered font faces against a parsed request."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

from fontquery.descriptors import (
    FontDescriptor,
    FontStyle,
    parse_font_stretch,
    parse_font_style,
    parse_font_weight,
)
from fontquery.ranges import NumericRange, range_contains
from fontquery.registry import FontFaceEntry
from fontquery.utils import normalize_family


@dataclass(frozen=True, slots=True)
class FontQuery:
    """Normalised family plus the parsed descriptors a request constrains."""

    family: str
    style: FontStyle | None = None
    weight: NumericRange | None = None
    stretch: NumericRange | None = None


def build_query(
    family: str, descriptor: FontDescriptor | Mapping[str, Any] | None = None
) -> FontQuery:
    """Normalise ``family`` and parse every descriptor present in the request."""
    desc = FontDescriptor.coerce(descriptor)
    return FontQuery(
        family=normalize_family(family),
        style=parse_font_style(desc.style) if desc.style else None,
        weight=parse_font_weight(desc.weight) if desc.weight else None,
        stretch=parse_font_stretch(desc.stretch) if desc.stretch else None,
    )


def is_eligible(entry: FontFaceEntry) -> bool:
    """Return True when every structural field of ``entry`` holds its default."""
    return not entry.structural_overrides()


def _covers(available: NumericRange, requested: NumericRange) -> bool:
    if requested.is_inverted:
        return False
    return range_contains(available, requested)


def _style_matches(requested: FontStyle, declared: str) -> bool:
    entry_style = parse_font_style(declared)
    if entry_style.keyword is not requested.keyword:
        return False
    if not requested.angle_specified:
        return True
    if requested.oblique_angle is None or entry_style.oblique_angle is None:
        return False
    return _covers(entry_style.oblique_angle, requested.oblique_angle)


def entry_matches(query: FontQuery, entry: FontFaceEntry) -> bool:
    """Return True when ``entry`` satisfies ``query``.

    Shorthand declared by the entry is parsed only for descriptors the query
    constrains; a malformed entry raises :class:`~fontquery.exceptions.GrammarError`.
    """
    if normalize_family(entry.family) != query.family:
        return False
    if not is_eligible(entry):
        return False
    if query.style is not None and not _style_matches(query.style, entry.style):
        return False
    if query.weight is not None and not _covers(parse_font_weight(entry.weight), query.weight):
        return False
    if query.stretch is not None and not _covers(
        parse_font_stretch(entry.stretch), query.stretch
    ):
        return False
    return True


def match_entry(query: FontQuery, entries: Iterable[FontFaceEntry]) -> FontFaceEntry | None:
    """Return the first entry, in iteration order, that satisfies ``query``."""
    for entry in entries:
        if entry_matches(query, entry):
            return entry
    return None


__all__ = ["FontQuery", "build_query", "entry_matches", "is_eligible", "match_entry"]
