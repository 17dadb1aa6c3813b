"""Closed numeric ranges used for weight, stretch, and oblique angles."""

from __future__ import annotations

from typing import NamedTuple


class NumericRange(NamedTuple):
    """Closed interval ``[low, high]`` kept in the order it was written."""

    low: float
    high: float

    @classmethod
    def single(cls, value: float) -> NumericRange:
        return cls(value, value)

    @property
    def is_inverted(self) -> bool:
        """Return True when ``low > high``; such a range never matches a request."""
        return self.low > self.high

    def within(self, lower: float, upper: float) -> bool:
        """Return True when both bounds lie inside ``[lower, upper]``."""
        return lower <= self.low <= upper and lower <= self.high <= upper


def range_contains(outer: tuple[float, float], inner: tuple[float, float]) -> bool:
    """Return True when ``outer`` covers ``inner`` on both sides."""
    return outer[0] <= inner[0] and outer[1] >= inner[1]


__all__ = ["NumericRange", "range_contains"]
