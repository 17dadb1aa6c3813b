"""Typer application wiring for the fontquery CLI."""

from __future__ import annotations

from collections.abc import Sequence
import logging
from pathlib import Path
from typing import Annotated

import typer

from fontquery.config import default_manifest_path, load_manifest
from fontquery.descriptors import (
    DescriptorField,
    FontDescriptor,
    FontStyle,
    format_font_style,
    format_range,
    parse_descriptor,
)
from fontquery.exceptions import FontLoadError, FontQueryError, exception_hint
from fontquery.matcher import is_eligible
from fontquery.registry import FontFaceEntry, FontFaceRegistry
from fontquery.resolver import FontResolver
from fontquery.version import get_version

from .diagnostics import CliEmitter, collect_events
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


DIAGNOSTICS_PANEL = "Diagnostics"
DESCRIPTOR_PANEL = "Descriptors"

app = typer.Typer(
    help="Resolve font requests against registered font faces.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)

ManifestOption = Annotated[
    Path | None,
    typer.Option(
        "--manifest",
        "-m",
        help="YAML manifest of registered faces (defaults to $FONTQUERY_MANIFEST).",
        exists=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]
StyleOption = Annotated[
    str | None,
    typer.Option("--style", help="Style shorthand, e.g. 'oblique 10deg'.", rich_help_panel=DESCRIPTOR_PANEL),
]
WeightOption = Annotated[
    str | None,
    typer.Option("--weight", help="Weight shorthand, e.g. 'bold' or '100 900'.", rich_help_panel=DESCRIPTOR_PANEL),
]
StretchOption = Annotated[
    str | None,
    typer.Option("--stretch", help="Stretch shorthand, e.g. 'condensed' or '75%'.", rich_help_panel=DESCRIPTOR_PANEL),
]


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit()


@app.callback()
def _main(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            count=True,
            help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Show full tracebacks when an unexpected error occurs.",
            rich_help_panel=DIAGNOSTICS_PANEL,
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the fontquery version and exit.",
        ),
    ] = False,
) -> None:
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    if state.verbosity >= 2:
        from rich.logging import RichHandler

        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=state.err_console, show_path=False)],
        )


def _registry_from(
    manifest: Path | None, emitter: CliEmitter, *, required: bool
) -> FontFaceRegistry:
    path = manifest or default_manifest_path()
    if path is None:
        if required:
            emit_error("No font manifest given; pass --manifest or set FONTQUERY_MANIFEST.")
            raise typer.Exit(code=1)
        return FontFaceRegistry(emitter=emitter)
    try:
        return load_manifest(path).build_registry(emitter=emitter)
    except FontQueryError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


def _descriptor(style: str | None, weight: str | None, stretch: str | None) -> FontDescriptor:
    return FontDescriptor(style=style, weight=weight, stretch=stretch)


def _print_entries(title: str, entries: Sequence[FontFaceEntry]) -> None:
    from rich import box
    from rich.table import Table

    table = Table(title=title, box=box.SQUARE, header_style="bold cyan")
    for column in ("Family", "Style", "Weight", "Stretch", "Status", "Eligible", "Source"):
        table.add_column(column)
    for entry in entries:
        table.add_row(
            entry.family,
            entry.style,
            entry.weight,
            entry.stretch,
            str(entry.status),
            "yes" if is_eligible(entry) else "no",
            entry.source,
        )
    get_cli_state().console.print(table)


@app.command("parse")
def parse_command(
    field: Annotated[DescriptorField, typer.Argument(help="Descriptor to parse.")],
    value: Annotated[str, typer.Argument(help="Shorthand value, quoted when it has spaces.")],
) -> None:
    """Print the normalised form of a descriptor shorthand."""
    try:
        parsed = parse_descriptor(field, value)
    except FontQueryError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if isinstance(parsed, FontStyle):
        typer.echo(format_font_style(parsed))
        if parsed.oblique_angle is not None:
            typer.echo(f"angle: [{parsed.oblique_angle.low:g}, {parsed.oblique_angle.high:g}]")
        return
    suffix = "%" if field is DescriptorField.STRETCH else ""
    typer.echo(format_range(parsed, suffix=suffix))
    typer.echo(f"range: [{parsed.low:g}, {parsed.high:g}]")


@app.command("find")
def find_command(
    family: Annotated[str, typer.Argument(help="Font family name.")],
    manifest: ManifestOption = None,
    style: StyleOption = None,
    weight: WeightOption = None,
    stretch: StretchOption = None,
) -> None:
    """Show the first registered face matching a request."""
    with (
        collect_events() as emitter,
        _registry_from(manifest, emitter, required=True) as registry,
    ):
        resolver = FontResolver(registry, emitter=emitter)
        desc = _descriptor(style, weight, stretch)
        try:
            entry = resolver.require(family, desc)
        except FontQueryError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc
        _print_entries("Matching font", [entry])


@app.command("load")
def load_command(
    family: Annotated[str, typer.Argument(help="Font family name.")],
    source: Annotated[str, typer.Argument(help="Path, URL, or url(...) of the font file.")],
    manifest: ManifestOption = None,
    style: StyleOption = None,
    weight: WeightOption = None,
    stretch: StretchOption = None,
) -> None:
    """Load a matching face, registering SOURCE when nothing matches."""
    with (
        collect_events() as emitter,
        _registry_from(manifest, emitter, required=False) as registry,
    ):
        resolver = FontResolver(registry, emitter=emitter)
        desc = _descriptor(style, weight, stretch)
        try:
            entry = resolver.load(family, source, desc).result()
        except FontLoadError as exc:
            emit_error(str(exc), exception=exc.cause)
            raise typer.Exit(code=1) from exc
        except FontQueryError as exc:
            emit_error(str(exc), exception=exc)
            raise typer.Exit(code=1) from exc
        size = len(entry.payload or b"")
        typer.echo(f"Loaded '{entry.family}' from {entry.source} ({size} bytes)")


@app.command("list")
def list_command(manifest: ManifestOption = None) -> None:
    """List the faces declared in a manifest."""
    with (
        collect_events() as emitter,
        _registry_from(manifest, emitter, required=True) as registry,
    ):
        _print_entries("Registered fonts", registry.entries())


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(exception_hint(exc) or str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
