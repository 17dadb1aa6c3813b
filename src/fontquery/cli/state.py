"""Per-invocation CLI state: verbosity, traceback display and recorded events."""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from threading import Lock
from typing import TYPE_CHECKING, Any

import click

from fontquery.exceptions import exception_messages


if TYPE_CHECKING:
    from rich.console import Console


@dataclass(slots=True)
class CLIState:
    """Options shared by every command of one invocation.

    Font events arrive from registry worker threads, so ``record_event`` and
    ``drain_events`` share a lock.
    """

    verbosity: int = 0
    show_tracebacks: bool = False
    _events: list[tuple[str, dict[str, Any]]] = field(default_factory=list, init=False, repr=False)
    _lock: Lock = field(default_factory=Lock, init=False, repr=False)
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        """Console bound to the current ``sys.stdout``."""
        from rich.console import Console

        if self._console is None or self._console.file is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        """Console bound to the current ``sys.stderr``."""
        from rich.console import Console

        if self._err_console is None or self._err_console.file is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console

    def record_event(self, name: str, payload: Mapping[str, Any]) -> None:
        with self._lock:
            self._events.append((name, dict(payload)))

    def drain_events(self) -> list[tuple[str, dict[str, Any]]]:
        """Return the recorded events in arrival order and forget them."""
        with self._lock:
            events, self._events = self._events, []
        return events


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("fontquery_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None) -> CLIState:
    """Return the state attached to the active click context.

    Outside a click context (``main()`` error handling, library callers) the
    state of the last invocation is reused, or a fresh one is created.
    """
    if ctx is None:
        ctx = click.get_current_context(silent=True)
    if ctx is not None:
        state = ctx.ensure_object(CLIState)
        _STATE_VAR.set(state)
        return state

    state = _STATE_VAR.get()
    if state is None:
        state = CLIState()
        _STATE_VAR.set(state)
    return state


def set_cli_state(
    *,
    ctx: click.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Apply the global options to the invocation state."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    """Print ``message`` to stderr; ``-v`` adds the exception type and its causes."""
    from rich.text import Text

    state = get_cli_state()
    text = Text.assemble(("error: ", "bold red"), (message, "red"))
    if exception is not None and state.verbosity >= 1:
        details = [f"type: {type(exception).__name__}"]
        details.extend(
            f"caused by: {line}"
            for line in exception_messages(exception)[1:]
            if line not in message
        )
        text.append("\n" + "\n".join(details), style="red")
    state.err_console.print(text)


def debug_enabled() -> bool:
    """Return whether the last invocation asked for full tracebacks."""
    state = _STATE_VAR.get()
    return state is not None and state.show_tracebacks


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "get_cli_state",
    "set_cli_state",
]
