from __future__ import annotations

import pytest

from fontquery.descriptors import FontDescriptor
from fontquery.exceptions import GrammarError
from fontquery.matcher import build_query, entry_matches, is_eligible, match_entry
from fontquery.registry import FontFaceEntry


def _entry(family: str = "Font Awesome", **kwargs: str) -> FontFaceEntry:
    return FontFaceEntry(family=family, source=kwargs.pop("source", "fa.woff2"), **kwargs)


def test_build_query_normalises_and_parses() -> None:
    query = build_query('"Roboto Flex"', {"weight": "bold", "stretch": "condensed"})
    assert query.family == "roboto flex"
    assert query.weight == (700, 700)
    assert query.stretch == (75, 75)
    assert query.style is None


def test_build_query_treats_empty_fields_as_absent() -> None:
    query = build_query("Inter", FontDescriptor(style="", weight=None))
    assert query.style is None
    assert query.weight is None


def test_build_query_raises_for_malformed_request() -> None:
    with pytest.raises(GrammarError):
        build_query("Inter", {"weight": "1500"})


def test_font_awesome_scenario() -> None:
    entry = _entry(weight="900", style="normal")
    entries = [entry]

    assert match_entry(build_query("Font Awesome", {"weight": "900"}), entries) is entry
    assert match_entry(build_query("Font Awesome", {"weight": "400"}), entries) is None
    assert match_entry(build_query("font awesome", {}), entries) is entry


def test_family_matching_ignores_case_and_quotes() -> None:
    entry = _entry(family='"roboto flex"', weight="100 1000", stretch="25% 151%")
    query = build_query("Roboto Flex", {"style": "normal", "weight": "100 1000", "stretch": "25% 151%"})
    assert match_entry(query, [entry]) is entry


def test_variable_font_range_covers_single_requests() -> None:
    entry = _entry(family="Roboto Flex", weight="100 1000", stretch="25% 151%")
    assert match_entry(build_query("Roboto Flex", {"weight": "bold"}), [entry]) is entry
    assert match_entry(build_query("Roboto Flex", {"weight": "300 700"}), [entry]) is entry
    assert match_entry(build_query("Roboto Flex", {"stretch": "condensed"}), [entry]) is entry
    assert match_entry(build_query("Roboto Flex", {"stretch": "ultra-expanded"}), [entry]) is None


def test_spelling_variants_resolve_to_the_same_entry() -> None:
    entry = _entry(family="Inter", weight="bold", stretch="normal")
    assert match_entry(build_query("Inter", {"weight": "700"}), [entry]) is entry
    assert match_entry(build_query("Inter", {"stretch": "100%"}), [entry]) is entry


@pytest.mark.parametrize(
    "descriptor",
    [
        {"style": "italic", "weight": "bold", "stretch": "condensed"},
        {"style": "oblique 10deg 20deg", "weight": "100 900", "stretch": "50% 200%"},
        {"style": "oblique"},
        {"weight": "normal"},
    ],
)
def test_exact_descriptors_always_match(descriptor: dict[str, str]) -> None:
    entry = FontFaceEntry.from_descriptor("Inter", "inter.woff2", descriptor)
    assert match_entry(build_query("Inter", descriptor), [entry]) is entry


@pytest.mark.parametrize(
    "field",
    ["ascent_override", "descent_override", "feature_settings", "line_gap_override"],
)
def test_non_default_structural_field_is_never_returned(field: str) -> None:
    entry = _entry(**{field: "90%" if field != "feature_settings" else '"liga" 0'})
    assert not is_eligible(entry)
    assert match_entry(build_query("Font Awesome", {}), [entry]) is None


def test_custom_unicode_range_is_never_returned() -> None:
    entry = _entry(unicode_range="U+0000-00FF")
    exact = build_query("Font Awesome", {"style": "normal", "weight": "normal", "stretch": "normal"})
    assert match_entry(exact, [entry]) is None


def test_first_match_wins_in_iteration_order() -> None:
    wide = _entry(family="Inter", weight="100 900", source="wide.woff2")
    exact = _entry(family="Inter", weight="400", source="exact.woff2")
    query = build_query("Inter", {"weight": "400"})
    assert match_entry(query, [wide, exact]) is wide
    assert match_entry(query, [exact, wide]) is exact


def test_ineligible_entries_are_skipped_for_later_ones() -> None:
    subset = _entry(family="Inter", unicode_range="U+0-7F", source="latin.woff2")
    full = _entry(family="Inter", source="full.woff2")
    assert match_entry(build_query("Inter"), [subset, full]) is full


def test_style_keyword_must_match() -> None:
    italic = _entry(family="Inter", style="italic")
    assert match_entry(build_query("Inter", {"style": "italic"}), [italic]) is italic
    assert match_entry(build_query("Inter", {"style": "normal"}), [italic]) is None
    assert match_entry(build_query("Inter", {"style": "oblique"}), [italic]) is None


def test_oblique_angle_containment() -> None:
    slanted = _entry(family="Inter", style="oblique -20deg 20deg")
    assert match_entry(build_query("Inter", {"style": "oblique 10deg"}), [slanted]) is slanted
    assert match_entry(build_query("Inter", {"style": "oblique -20deg 0deg"}), [slanted]) is slanted
    assert match_entry(build_query("Inter", {"style": "oblique 30deg"}), [slanted]) is None


def test_bare_oblique_request_skips_angle_check() -> None:
    narrow = _entry(family="Inter", style="oblique 5deg")
    assert match_entry(build_query("Inter", {"style": "oblique"}), [narrow]) is narrow
    assert match_entry(build_query("Inter", {"style": "oblique 14deg"}), [narrow]) is None


def test_inverted_request_range_never_matches() -> None:
    entry = _entry(family="Inter", weight="1 1000", style="oblique -90deg 90deg")
    assert match_entry(build_query("Inter", {"weight": "900 100"}), [entry]) is None
    assert match_entry(build_query("Inter", {"style": "oblique 20deg -20deg"}), [entry]) is None


def test_absent_descriptors_are_not_compared() -> None:
    entry = _entry(family="Inter", style="italic", weight="900", stretch="condensed")
    assert entry_matches(build_query("Inter", {"weight": "900"}), entry)
    assert entry_matches(build_query("Inter"), entry)


def test_malformed_entry_shorthand_raises() -> None:
    broken = _entry(family="Inter", weight="heavy")
    with pytest.raises(GrammarError) as excinfo:
        match_entry(build_query("Inter", {"weight": "400"}), [broken])
    assert excinfo.value.raw == "heavy"


def test_malformed_entry_shorthand_is_ignored_when_not_requested() -> None:
    broken = _entry(family="Inter", weight="heavy")
    assert match_entry(build_query("Inter", {"style": "normal"}), [broken]) is broken


def test_family_is_checked_before_entry_shorthand() -> None:
    broken = _entry(family="Other", weight="heavy")
    assert match_entry(build_query("Inter", {"weight": "400"}), [broken]) is None
