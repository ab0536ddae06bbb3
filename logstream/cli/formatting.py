"""Display helpers for rendering log events."""

from __future__ import annotations

import logging

from rich.logging import RichHandler
from rich.markup import escape

from ..core.events import LogEvent
from .state import console, err_console
from .theme import THEME


def _markup(text: str, color: str) -> str:
    """Wrap text in Rich markup with the given color, escaping special chars."""
    return f"[{color}]{escape(text)}[/{color}]"


def _target_label(target: str) -> str:
    return target or "default container"


def configure_logging(verbose: bool) -> None:
    """Route library logging through Rich on stderr when --verbose is set."""
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
        force=True,
    )


def render_event(event: LogEvent) -> None:
    """Print one session event to the console."""
    if event.type == "line":
        # Log text is printed verbatim, never interpreted as markup
        console.print(event.text, markup=False, highlight=False, soft_wrap=True)
        return
    if event.type == "completed":
        console.print(_markup(f"Stream for {_target_label(event.target)} ended", THEME.success))
        return
    if event.type == "cancelled":
        console.print(_markup(f"Stopped streaming {_target_label(event.target)}", THEME.muted))
        return
    if event.type == "errored":
        console.print(
            _markup(
                f"Log stream for {_target_label(event.target)} failed: {event.reason}",
                THEME.error,
            )
        )
