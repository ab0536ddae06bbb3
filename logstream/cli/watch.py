"""Watch command: interactive prompt that switches the streamed container."""

from __future__ import annotations

import asyncio
import html
from typing import Annotated

import typer
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.patch_stdout import patch_stdout
from rich.panel import Panel

from ..config import StreamConfig
from ..core.manager import SessionManager
from .connection import build_transport, resolve_config
from .errors import CliUsageError
from .formatting import _markup, configure_logging, render_event
from .state import app, console, settings
from .theme import THEME


class WatchSession:
    """Command loop that maps typed container names onto ``set_target``."""

    def __init__(self, manager: SessionManager) -> None:
        self.manager = manager

    async def handle(self, raw: str) -> bool:
        """Apply one command line; returns False when the loop should exit."""
        command = raw.strip()
        if command in ("quit", "exit", "q"):
            return False
        if command in ("help", "h", "?"):
            self._print_help()
            return True
        if command == "stop":
            await self.manager.stop()
            return True
        if command == "status":
            self._print_status()
            return True
        if command == "retry":
            target = self.manager.current_target
            if target is None:
                console.print(_markup("Nothing to retry", THEME.warning))
                return True
            await self.manager.set_target(target)
            return True

        # Blank line or "default" streams the default container
        target = "" if command in ("", "default") else command
        await self.manager.set_target(target)
        return True

    def _print_status(self) -> None:
        session = self.manager.active_session
        if session is None:
            console.print(_markup("Not streaming", THEME.muted))
            return
        label = session.target or "default container"
        console.print(
            _markup(
                f"{label}: {session.status} ({session.lines_emitted} lines)",
                THEME.accent,
            )
        )

    @staticmethod
    def _print_help() -> None:
        console.print(
            "[bold]Commands[/bold]\n"
            "  <container>   stream logs for a container\n"
            "  default       stream the default container (or press Enter)\n"
            "  retry         restart the stream for the current container\n"
            "  status        show the active stream\n"
            "  stop          stop streaming\n"
            "  quit          exit"
        )


async def run_watch(config: StreamConfig) -> None:
    """Run the interactive watch loop until the user quits."""
    prompt_session: PromptSession[str] = PromptSession()
    console.print(
        Panel(
            f"[bold]{_markup('logstream watch', THEME.primary)}[/bold]\n"
            f"Daemon: {_markup(config.daemon.url, THEME.muted)}\n"
            "Type a container name to stream it, [bold]help[/bold] for commands.",
            border_style=THEME.border,
        )
    )

    async with build_transport(config) as transport:
        async with SessionManager(
            transport.open, render_event, errors=config.stream.decode_errors
        ) as manager:
            commands = WatchSession(manager)
            with patch_stdout():
                while True:
                    try:
                        raw = await prompt_session.prompt_async(
                            HTML(f"<style fg='{THEME.prompt}'>{html.escape(settings.prompt)}</style>")
                        )
                    except (EOFError, KeyboardInterrupt):
                        break
                    if not await commands.handle(raw):
                        break


@app.command()
def watch(
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
    entries: Annotated[
        int | None,
        typer.Option("--entries", "-n", help="Number of past log entries to replay"),
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
    """Interactively switch between container log streams."""
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

    asyncio.run(run_watch(config))
