"""CLI package for logstream."""

import sys

from .errors import (
    CliUsageError,
    ConfigLoadError,
    InvalidEntriesError,
    MissingDaemonUrlError,
)
from .formatting import render_event
from .state import app

# Import subcommand modules so their @app.command() decorators register
from . import tail as _tail  # noqa: F401
from . import watch as _watch  # noqa: F401

from .tail import run_snapshot, run_tail
from .watch import WatchSession, run_watch


def cli() -> None:
    """CLI entrypoint with `tail` as the default command."""
    args = sys.argv[1:]
    subcommands = {"tail", "watch"}

    if not args or args[0] not in subcommands:
        args = ["tail", *args]

    app(args=args, prog_name="logstream")


__all__ = [
    "CliUsageError",
    "ConfigLoadError",
    "InvalidEntriesError",
    "MissingDaemonUrlError",
    "WatchSession",
    "app",
    "cli",
    "render_event",
    "run_snapshot",
    "run_tail",
    "run_watch",
]


if __name__ == "__main__":
    cli()
