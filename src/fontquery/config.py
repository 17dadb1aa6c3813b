"""Font manifest models loaded from YAML.

FontManifest

`fonts` (`list[FontFaceConfig]`)
: Faces to register, in order. Order matters: queries return the first
  matching face.

`max_workers` (`int`)
: Size of the worker pool fetching font sources.

`fetch_timeout` (`float | None`)
: Timeout in seconds applied to remote downloads.

FontFaceConfig

`family` (`str`)
: Family name exactly as it should be registered.

`source` (`str`)
: Path, ``file://``/``http(s)://`` URL, or CSS ``url(...)`` wrapper.

`style`, `weight`, `stretch` (`str`)
: Descriptor shorthand, validated with the descriptor grammar. Defaults to
  ``normal``.

`ascent_override`, `descent_override`, `feature_settings`, `line_gap_override`,
`unicode_range` (`str`)
: Structural fields. Faces that customise any of them are registered but never
  reused by queries.
"""

from __future__ import annotations

import os
from pathlib import Path, PureWindowsPath
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, ValidationError, field_validator
import yaml

from fontquery.descriptors import parse_font_stretch, parse_font_style, parse_font_weight
from fontquery.diagnostics import DiagnosticEmitter
from fontquery.exceptions import ManifestError
from fontquery.registry import DEFAULT_UNICODE_RANGE, FontFaceEntry, FontFaceRegistry
from fontquery.sources import parse_source


MANIFEST_ENV = "FONTQUERY_MANIFEST"


class FontFaceConfig(BaseModel):
    """One registered face declared in a manifest."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    family: str = Field(min_length=1)
    source: str = Field(min_length=1)
    style: str = "normal"
    weight: str = "normal"
    stretch: str = "normal"
    ascent_override: str = "normal"
    descent_override: str = "normal"
    feature_settings: str = "normal"
    line_gap_override: str = "normal"
    unicode_range: str = DEFAULT_UNICODE_RANGE

    @field_validator("style")
    @classmethod
    def _check_style(cls, value: str) -> str:
        parse_font_style(value)
        return value

    @field_validator("weight", mode="before")
    @classmethod
    def _check_weight(cls, value: Any) -> str:
        # YAML reads ``weight: 700`` as an integer.
        text = str(value)
        parse_font_weight(text)
        return text

    @field_validator("stretch")
    @classmethod
    def _check_stretch(cls, value: str) -> str:
        parse_font_stretch(value)
        return value

    @field_validator("source")
    @classmethod
    def _check_source(cls, value: str) -> str:
        parse_source(value)
        return value

    def to_entry(self, base_dir: Path | None = None) -> FontFaceEntry:
        """Create a registry entry, resolving relative local paths against ``base_dir``.

        A relative target inside ``url(...)`` is unwrapped and resolved too.
        """
        source = self.source
        location = parse_source(source)
        if base_dir is not None and not location.remote:
            path = location.path.expanduser()
            if not path.is_absolute() and not PureWindowsPath(location.target).drive:
                source = str(base_dir / path)
        return FontFaceEntry(**self.model_dump(exclude={"source"}), source=source)


class FontManifest(BaseModel):
    """Top-level manifest payload."""

    model_config = ConfigDict(extra="forbid")

    fonts: list[FontFaceConfig] = Field(default_factory=list)
    max_workers: int = Field(default=4, ge=1)
    fetch_timeout: float | None = Field(default=None, gt=0)
    _base_dir: Path | None = PrivateAttr(default=None)

    @property
    def base_dir(self) -> Path | None:
        """Directory relative sources resolve against (the manifest folder)."""
        return self._base_dir

    def entries(self) -> list[FontFaceEntry]:
        return [face.to_entry(self.base_dir) for face in self.fonts]

    def build_registry(self, *, emitter: DiagnosticEmitter | None = None) -> FontFaceRegistry:
        """Register every declared face, in file order, in a new registry."""
        return FontFaceRegistry(
            self.entries(),
            max_workers=self.max_workers,
            fetch_timeout=self.fetch_timeout,
            emitter=emitter,
        )


def parse_manifest(raw: Any, *, base_dir: Path | None = None) -> FontManifest:
    """Validate a decoded manifest; a bare list is read as the ``fonts`` list."""
    if raw is None:
        raw = {}
    if isinstance(raw, list):
        raw = {"fonts": raw}
    if not isinstance(raw, dict):
        raise ManifestError(f"Unsupported manifest type: {type(raw).__name__}")
    try:
        manifest = FontManifest.model_validate(raw)
    except ValidationError as exc:
        raise ManifestError(f"Invalid font manifest: {exc}") from exc
    manifest._base_dir = base_dir
    return manifest


def load_manifest(path: str | Path) -> FontManifest:
    """Read and validate a YAML font manifest."""
    manifest_path = Path(path).expanduser()
    try:
        raw = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestError(f"Unable to read font manifest '{manifest_path}': {exc}") from exc
    except yaml.YAMLError as exc:
        raise ManifestError(f"Malformed font manifest '{manifest_path}': {exc}") from exc
    return parse_manifest(raw, base_dir=manifest_path.parent)


def default_manifest_path() -> Path | None:
    """Return the manifest named by ``FONTQUERY_MANIFEST``, if set."""
    value = os.environ.get(MANIFEST_ENV)
    if not value:
        return None
    return Path(value).expanduser()


__all__ = [
    "MANIFEST_ENV",
    "FontFaceConfig",
    "FontManifest",
    "default_manifest_path",
    "load_manifest",
    "parse_manifest",
]
