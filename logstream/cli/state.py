"""Shared CLI state: console, app, settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

import typer
from rich.console import Console

# Rich console for all output
console = Console()
# Diagnostics (--verbose logging) go to stderr so piped log output stays clean
err_console = Console(stderr=True)


@dataclass
class Settings:
    """Mutable CLI settings adjusted at startup."""

    prompt: str = field(default_factory=lambda: os.getenv("LOGSTREAM_PROMPT", "logs> "))


settings = Settings()

# Typer app
app = typer.Typer(
    name="logstream",
    help="Stream live container logs from a deployment daemon.",
    epilog=(
        "Examples:\n"
        "  logstream\n"
        "  logstream web\n"
        "  logstream tail web --entries 100\n"
        "  logstream watch --url https://daemon.example.com:4303"
    ),
    add_completion=False,
)
