"""Resolve CSS-like font requests against registered font faces.

A request is a family name plus optional ``style``/``weight``/``stretch``
shorthand. Before a new face is loaded, `FontResolver` checks whether an already
registered face covers the request, so that ``"bold"`` and ``"700"`` or a single
weight inside a variable font's ``"100 900"`` range reuse the same face.

Layers
: `fontquery.descriptors` parses shorthand into `FontStyle`/`NumericRange`.
: `fontquery.matcher` runs a first-match scan over registry entries using
  `range_contains`.
: `fontquery.resolver` exposes `query`, `require`, `load`, and `load_existing`.
: `fontquery.registry` provides `FontFaceRegistry`, a thread-safe registry that
  fetches sources on a worker pool; any object following `FontRegistry` works.
"""

from __future__ import annotations

from fontquery.config import FontFaceConfig, FontManifest, load_manifest
from fontquery.descriptors import (
    DescriptorField,
    FontDescriptor,
    FontStyle,
    StyleKeyword,
    parse_font_stretch,
    parse_font_style,
    parse_font_weight,
)
from fontquery.diagnostics import DiagnosticEmitter, LoggingEmitter
from fontquery.exceptions import (
    FontLoadError,
    FontNotFoundError,
    FontNotRegisteredError,
    FontQueryError,
    GrammarError,
    ManifestError,
)
from fontquery.matcher import FontQuery, build_query, match_entry
from fontquery.ranges import NumericRange, range_contains
from fontquery.registry import FontFaceEntry, FontFaceRegistry, FontLoadStatus, FontRegistry
from fontquery.resolver import FontResolver, query_entries
from fontquery.utils import normalize_family
from fontquery.version import get_version


__version__ = get_version()

__all__ = [
    "DescriptorField",
    "DiagnosticEmitter",
    "FontDescriptor",
    "FontFaceConfig",
    "FontFaceEntry",
    "FontFaceRegistry",
    "FontLoadError",
    "FontLoadStatus",
    "FontManifest",
    "FontNotFoundError",
    "FontNotRegisteredError",
    "FontQuery",
    "FontQueryError",
    "FontRegistry",
    "FontResolver",
    "FontStyle",
    "GrammarError",
    "LoggingEmitter",
    "ManifestError",
    "NumericRange",
    "StyleKeyword",
    "__version__",
    "build_query",
    "get_version",
    "load_manifest",
    "match_entry",
    "normalize_family",
    "parse_font_stretch",
    "parse_font_style",
    "parse_font_weight",
    "query_entries",
    "range_contains",
]
