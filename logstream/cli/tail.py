"""Tail command: stream one container until the stream ends or Ctrl+C."""

from __future__ import annotations

import asyncio
import platform
import signal
from typing import Annotated

import typer
from dotenv import load_dotenv

load_dotenv()

from ..config import StreamConfig
from ..core.errors import StreamError
from ..core.events import LogEvent, SessionStatus
from ..core.manager import SessionManager
from .connection import build_transport, resolve_config
from .errors import CliUsageError
from .formatting import _markup, configure_logging, render_event
from .state import app, console
from .theme import THEME


async def run_tail(config: StreamConfig, target: str) -> SessionStatus:
    """Stream ``target`` and return the session's terminal status."""
    loop = asyncio.get_running_loop()
    cancelling: list[asyncio.Task[None]] = []

    async with build_transport(config) as transport:
        async with SessionManager(
            transport.open, render_event, errors=config.stream.decode_errors
        ) as manager:
            session = await manager.set_target(target)
            if session is None:
                return SessionStatus.CANCELLED

            def on_cancel() -> None:
                if cancelling:
                    return
                console.print(f"\n{_markup('Cancelling...', THEME.warning)}")
                cancelling.append(loop.create_task(session.cancel()))

            if platform.system() != "Windows":
                loop.add_signal_handler(signal.SIGINT, on_cancel)
            try:
                return await session.wait()
            finally:
                if platform.system() != "Windows":
                    loop.remove_signal_handler(signal.SIGINT)
                if cancelling:
                    await asyncio.gather(*cancelling)


async def run_snapshot(config: StreamConfig, target: str) -> SessionStatus:
    """Print the most recent entries for ``target`` once, without following."""
    async with build_transport(config) as transport:
        try:
            lines = await transport.fetch(target)
        except StreamError as exc:
            render_event(
                LogEvent(type=SessionStatus.ERRORED.value, target=target, error=exc, reason=str(exc))
            )
            return SessionStatus.ERRORED

    for sequence, text in enumerate(lines):
        render_event(LogEvent(type="line", target=target, sequence=sequence, text=text))
    return SessionStatus.COMPLETED


@app.command()
def tail(
    container: Annotated[
        str,
        typer.Argument(
            metavar="CONTAINER",
            help="Container to stream (omit for the default container)",
        ),
    ] = "",
    entries: Annotated[
        int | None,
        typer.Option("--entries", "-n", help="Number of past log entries to replay"),
    ] = None,
    follow: Annotated[
        bool,
        typer.Option(
            "--follow/--no-follow",
            help="Keep streaming new entries, or print the latest entries once and exit",
        ),
    ] = True,
    config_path: Annotated[
        str | None,
        typer.Option("--config", "-c", help="Path to logstream config YAML"),
    ] = None,
    url: Annotated[
        str | None,
        typer.Option("--url", help="Daemon base URL (overrides config)"),
    ] = None,
    token: Annotated[
        str | None,
        typer.Option("--token", help="Daemon API token (overrides config)"),
    ] = None,
    insecure: Annotated[
        bool,
        typer.Option("--insecure", "-k", help="Skip TLS certificate verification"),
    ] = False,
    replace_invalid: Annotated[
        bool,
        typer.Option(
            "--replace-invalid",
            help="Replace undecodable bytes with U+FFFD instead of failing the stream",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log session activity to stderr"),
    ] = False,
) -> None:
    """Stream logs for one container until the stream ends or Ctrl+C.

    With --no-follow, print the latest entries once and exit.
    """
    configure_logging(verbose)
    try:
        config = resolve_config(
            config_path,
            url=url,
            token=token,
            insecure=insecure,
            entries=entries,
            replace_invalid=replace_invalid,
        )
    except CliUsageError as exc:
        console.print(_markup(str(exc), THEME.error))
        raise typer.Exit(1) from exc

    runner = run_tail if follow else run_snapshot
    status = asyncio.run(runner(config, container))
    if status == SessionStatus.ERRORED:
        raise typer.Exit(1)
