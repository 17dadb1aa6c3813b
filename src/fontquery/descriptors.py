"""Parse CSS-like font descriptor shorthand into comparable values.

Three descriptors are understood, each with its own small grammar:

`style`
: ``normal``, ``italic``, or ``oblique`` optionally followed by one or two
  angles such as ``oblique 10deg`` or ``oblique -20deg 20deg``. Angles lie in
  ``[-90, 90]`` and a bare ``oblique`` means ``14deg``.

`weight`
: one or two tokens, each a plain number in ``[1, 1000]`` or one of the
  keywords ``normal`` (400) and ``bold`` (700).

`stretch`
: one or two tokens, each a percentage in ``[1%, 200%]`` or one of the nine
  width keywords from ``ultra-condensed`` (50%) to ``ultra-expanded`` (200%).

Numeric literals are always tried before the keyword tables. Two tokens become
a range kept in the order written, so ``"100 900"`` describes a variable font
axis while ``"900 100"`` is an inverted range that never matches a request.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, fields
from enum import Enum
import re
from types import MappingProxyType
from typing import Any

from fontquery.exceptions import GrammarError
from fontquery.ranges import NumericRange
from fontquery.utils import split_tokens


class DescriptorField(str, Enum):
    """Descriptor being parsed, reported by grammar errors."""

    STYLE = "style"
    WEIGHT = "weight"
    STRETCH = "stretch"

    def __str__(self) -> str:
        return self.value


class StyleKeyword(str, Enum):
    NORMAL = "normal"
    ITALIC = "italic"
    OBLIQUE = "oblique"

    def __str__(self) -> str:
        return self.value


DEFAULT_OBLIQUE_ANGLE = 14.0
OBLIQUE_ANGLE_BOUNDS = (-90.0, 90.0)
WEIGHT_BOUNDS = (1.0, 1000.0)
STRETCH_BOUNDS = (1.0, 200.0)

WEIGHT_KEYWORDS: Mapping[str, float] = MappingProxyType({"normal": 400.0, "bold": 700.0})

STRETCH_KEYWORDS: Mapping[str, float] = MappingProxyType(
    {
        "ultra-condensed": 50.0,
        "extra-condensed": 62.5,
        "condensed": 75.0,
        "semi-condensed": 87.5,
        "normal": 100.0,
        "semi-expanded": 112.5,
        "expanded": 125.0,
        "extra-expanded": 150.0,
        "ultra-expanded": 200.0,
    }
)

_NUMBER = r"(?:[0-9]+(?:\.[0-9]+)?|\.[0-9]+)"
_ANGLE_RE = re.compile(rf"^(-?{_NUMBER})deg$")
_WEIGHT_RE = re.compile(rf"^({_NUMBER})$")
_PERCENT_RE = re.compile(rf"^({_NUMBER})%$")


def _shorthand(name: str, value: Any) -> str | None:
    # Decoded YAML or JSON often carries weights as bare numbers.
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"{value:g}"
    raise TypeError(f"Font descriptor '{name}' must be a string, not {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class FontDescriptor:
    """Raw descriptor shorthand attached to a font request.

    Each field is optional. A missing or empty field means the request does not
    care about that descriptor; it is never read as ``normal``.
    """

    style: str | None = None
    weight: str | None = None
    stretch: str | None = None

    @classmethod
    def coerce(cls, value: FontDescriptor | Mapping[str, Any] | None) -> FontDescriptor:
        """Build a descriptor from ``None``, a mapping, or an existing descriptor.

        Numeric mapping values are rendered as shorthand (``700`` becomes ``"700"``);
        any other non-string value raises ``TypeError``.
        """
        if value is None:
            return cls()
        if isinstance(value, FontDescriptor):
            return value
        if isinstance(value, Mapping):
            allowed = {item.name for item in fields(cls)}
            unknown = sorted(set(value) - allowed)
            if unknown:
                raise TypeError(f"Unknown font descriptor keys: {', '.join(unknown)}")
            return cls(**{key: _shorthand(key, value.get(key)) for key in allowed})
        raise TypeError(f"Unsupported font descriptor type: {type(value)!r}")

    def items(self) -> Iterator[tuple[str, str | None]]:
        """Yield ``(name, shorthand)`` pairs in declaration order."""
        for item in fields(self):
            yield item.name, getattr(self, item.name)

    def present(self) -> dict[str, str]:
        """Return only the descriptors the request actually constrains."""
        return {name: value for name, value in self.items() if value}


@dataclass(frozen=True, slots=True)
class FontStyle:
    """Parsed ``style`` descriptor."""

    keyword: StyleKeyword
    oblique_angle: NumericRange | None = None
    angle_specified: bool = False


def _parse_number(pattern: re.Pattern[str], token: str) -> float | None:
    match = pattern.match(token)
    if match is None:
        return None
    return float(match.group(1))


def _parse_scalar_range(
    raw: str,
    field: DescriptorField,
    pattern: re.Pattern[str],
    keywords: Mapping[str, float],
    bounds: tuple[float, float],
) -> NumericRange:
    parts = split_tokens(raw)
    if len(parts) not in (1, 2):
        raise GrammarError(field, raw)

    values: list[float] = []
    for part in parts:
        value = _parse_number(pattern, part)
        if value is None:
            value = keywords.get(part)
        if value is None:
            raise GrammarError(field, raw)
        values.append(value)

    result = NumericRange(values[0], values[-1])
    if not result.within(*bounds):
        raise GrammarError(field, raw)
    return result


def parse_font_style(raw: str) -> FontStyle:
    """Parse a ``style`` shorthand such as ``"oblique 10deg 20deg"``."""
    parts = split_tokens(raw)
    if not parts:
        raise GrammarError(DescriptorField.STYLE, raw)
    try:
        keyword = StyleKeyword(parts[0])
    except ValueError:
        raise GrammarError(DescriptorField.STYLE, raw) from None

    angles = parts[1:]
    if keyword is not StyleKeyword.OBLIQUE:
        if angles:
            raise GrammarError(DescriptorField.STYLE, raw)
        return FontStyle(keyword)
    if len(angles) > 2:
        raise GrammarError(DescriptorField.STYLE, raw)
    if not angles:
        return FontStyle(keyword, NumericRange.single(DEFAULT_OBLIQUE_ANGLE))

    values: list[float] = []
    for token in angles:
        angle = _parse_number(_ANGLE_RE, token)
        if angle is None:
            raise GrammarError(DescriptorField.STYLE, raw)
        values.append(angle)
    oblique = NumericRange(values[0], values[-1])
    if not oblique.within(*OBLIQUE_ANGLE_BOUNDS):
        raise GrammarError(DescriptorField.STYLE, raw)
    return FontStyle(keyword, oblique, angle_specified=True)


def parse_font_weight(raw: str) -> NumericRange:
    """Parse a ``weight`` shorthand such as ``"bold"`` or ``"100 900"``."""
    return _parse_scalar_range(raw, DescriptorField.WEIGHT, _WEIGHT_RE, WEIGHT_KEYWORDS, WEIGHT_BOUNDS)


def parse_font_stretch(raw: str) -> NumericRange:
    """Parse a ``stretch`` shorthand such as ``"condensed"`` or ``"50% 200%"``."""
    return _parse_scalar_range(
        raw, DescriptorField.STRETCH, _PERCENT_RE, STRETCH_KEYWORDS, STRETCH_BOUNDS
    )


def parse_descriptor(field: DescriptorField | str, raw: str) -> FontStyle | NumericRange:
    """Dispatch ``raw`` to the parser for ``field``."""
    field = DescriptorField(field)
    if field is DescriptorField.STYLE:
        return parse_font_style(raw)
    if field is DescriptorField.WEIGHT:
        return parse_font_weight(raw)
    return parse_font_stretch(raw)


def _format_number(value: float) -> str:
    return f"{value:g}"


def format_range(value: NumericRange, *, suffix: str = "") -> str:
    """Render a range back to shorthand, collapsing single values."""
    low = f"{_format_number(value.low)}{suffix}"
    if value.low == value.high:
        return low
    return f"{low} {_format_number(value.high)}{suffix}"


def format_font_style(style: FontStyle) -> str:
    """Render a parsed style back to canonical shorthand."""
    if style.oblique_angle is None:
        return str(style.keyword)
    return f"{style.keyword} {format_range(style.oblique_angle, suffix='deg')}"


__all__ = [
    "DEFAULT_OBLIQUE_ANGLE",
    "STRETCH_KEYWORDS",
    "WEIGHT_KEYWORDS",
    "DescriptorField",
    "FontDescriptor",
    "FontStyle",
    "StyleKeyword",
    "format_font_style",
    "format_range",
    "parse_descriptor",
    "parse_font_stretch",
    "parse_font_style",
    "parse_font_weight",
]
