"""Shared helpers for font handling."""

from __future__ import annotations


def normalize_family(name: str) -> str:
    """Return a normalised font family key suitable for comparisons.

    Surrounding whitespace is trimmed and the name lower-cased. A name wrapped in
    a single pair of double quotes, as CSS serialises family names containing
    spaces, is unwrapped and trimmed again.
    """
    normalized = name.strip().lower()
    if len(normalized) >= 2 and normalized.startswith('"') and normalized.endswith('"'):
        normalized = normalized[1:-1].strip()
    return normalized


def families_equal(left: str, right: str) -> bool:
    """Return True when two family names refer to the same family."""
    return normalize_family(left) == normalize_family(right)


def split_tokens(value: str) -> list[str]:
    """Split a descriptor shorthand into lower-cased whitespace-separated tokens."""
    return value.strip().lower().split()


__all__ = ["families_equal", "normalize_family", "split_tokens"]
