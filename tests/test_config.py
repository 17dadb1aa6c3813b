from __future__ import annotations

from pathlib import Path

import pytest

from fontquery.config import (
    MANIFEST_ENV,
    FontFaceConfig,
    default_manifest_path,
    load_manifest,
    parse_manifest,
)
from fontquery.exceptions import ManifestError
from fontquery.registry import FontFaceRegistry
from fontquery.resolver import FontResolver


MANIFEST = """\
max_workers: 2
fetch_timeout: 10
fonts:
  - family: Roboto Flex
    source: fonts/RobotoFlex.woff2
    weight: 100 1000
    stretch: 25% 151%
  - family: Font Awesome
    source: url('fonts/fa-solid-900.woff2')
    weight: 900
  - family: Font Awesome
    source: https://example.com/fa-latin.woff2
    weight: 900
    unicode_range: U+0-7F
"""


def test_load_manifest_builds_ordered_registry(tmp_path: Path) -> None:
    path = tmp_path / "fonts.yaml"
    path.write_text(MANIFEST, encoding="utf-8")

    manifest = load_manifest(path)
    assert manifest.max_workers == 2
    assert manifest.fetch_timeout == 10
    assert manifest.base_dir == tmp_path

    registry = manifest.build_registry()
    assert isinstance(registry, FontFaceRegistry)
    entries = registry.entries()
    assert [entry.family for entry in entries] == ["Roboto Flex", "Font Awesome", "Font Awesome"]
    assert entries[0].source == str(tmp_path / "fonts/RobotoFlex.woff2")
    assert entries[1].weight == "900"
    assert entries[1].source == str(tmp_path / "fonts/fa-solid-900.woff2")
    assert entries[2].source == "https://example.com/fa-latin.woff2"
    assert entries[2].unicode_range == "U+0-7F"

    resolver = FontResolver(registry)
    assert resolver.query("roboto flex", {"weight": "bold", "stretch": "condensed"}) is entries[0]
    assert resolver.query("Font Awesome", {"weight": "900"}) is entries[1]


def test_bare_list_manifest() -> None:
    manifest = parse_manifest([{"family": "Inter", "source": "/fonts/inter.woff2"}])
    assert len(manifest.fonts) == 1
    assert manifest.fonts[0].style == "normal"
    assert manifest.base_dir is None


def test_empty_manifest_is_valid() -> None:
    assert parse_manifest(None).fonts == []


def test_invalid_descriptor_is_rejected() -> None:
    with pytest.raises(ManifestError, match="weight"):
        parse_manifest([{"family": "Inter", "source": "a.woff2", "weight": "1500"}])


def test_unknown_keys_are_rejected() -> None:
    with pytest.raises(ManifestError):
        parse_manifest([{"family": "Inter", "source": "a.woff2", "size": "12px"}])


def test_unsupported_manifest_type() -> None:
    with pytest.raises(ManifestError, match="Unsupported"):
        parse_manifest("fonts")


def test_malformed_yaml(tmp_path: Path) -> None:
    path = tmp_path / "fonts.yaml"
    path.write_text("fonts: [unclosed", encoding="utf-8")
    with pytest.raises(ManifestError, match="Malformed"):
        load_manifest(path)


def test_missing_manifest(tmp_path: Path) -> None:
    with pytest.raises(ManifestError, match="Unable to read"):
        load_manifest(tmp_path / "missing.yaml")


def test_face_config_to_entry_keeps_absolute_sources(tmp_path: Path) -> None:
    config = FontFaceConfig(family="Inter", source="/srv/fonts/inter.woff2", style="oblique 10deg")
    entry = config.to_entry(tmp_path)
    assert entry.source == "/srv/fonts/inter.woff2"
    assert entry.style == "oblique 10deg"


def test_wrapped_relative_source_loads_from_manifest_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    fonts = tmp_path / "fonts"
    fonts.mkdir()
    (fonts / "a.woff2").write_bytes(b"wrapped")
    path = tmp_path / "fonts.yaml"
    path.write_text(
        "fonts:\n  - family: A\n    source: url('fonts/a.woff2')\n", encoding="utf-8"
    )
    elsewhere = tmp_path / "elsewhere"
    elsewhere.mkdir()
    monkeypatch.chdir(elsewhere)

    with load_manifest(path).build_registry() as registry:
        entry = FontResolver(registry).load("A", "unused.woff2").result(timeout=5)

    assert entry.source == str(fonts / "a.woff2")
    assert entry.payload == b"wrapped"


def test_face_config_rejects_unsupported_scheme() -> None:
    with pytest.raises(ManifestError, match="Unsupported font source scheme"):
        parse_manifest([{"family": "A", "source": "ftp://example.com/a.woff2"}])


def test_default_manifest_path(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.delenv(MANIFEST_ENV, raising=False)
    assert default_manifest_path() is None
    monkeypatch.setenv(MANIFEST_ENV, str(tmp_path / "fonts.yaml"))
    assert default_manifest_path() == tmp_path / "fonts.yaml"
