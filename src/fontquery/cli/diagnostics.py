"""Collect font events during a command and print them when it ends."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from fontquery.diagnostics import FONT_LOAD_FAILED, format_event_message

from .state import CLIState, get_cli_state


class CliEmitter:
    """Record font events on the CLI state instead of printing them mid-command."""

    def __init__(self, state: CLIState | None = None) -> None:
        self._state = state or get_cli_state()

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self._state.record_event(name, payload)


def report_events(state: CLIState | None = None) -> None:
    """Print the recorded events to stderr when ``-v`` was given."""
    from rich.text import Text

    state = state or get_cli_state()
    events = state.drain_events()
    if state.verbosity < 1:
        return
    for name, payload in events:
        message = format_event_message(name, payload)
        if message is None:
            continue
        style = "yellow" if name == FONT_LOAD_FAILED else "dim"
        state.err_console.print(Text(message, style=style))


@contextmanager
def collect_events() -> Iterator[CliEmitter]:
    """Yield an emitter for one command and report its events on exit."""
    state = get_cli_state()
    emitter = CliEmitter(state)
    try:
        yield emitter
    finally:
        report_events(state)


__all__ = ["CliEmitter", "collect_events", "report_events"]
