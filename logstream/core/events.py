"""Event types delivered to log sinks."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from .errors import StreamError


class SessionStatus(StrEnum):
    """Lifecycle state of a stream session."""

    PENDING = "pending"
    STREAMING = "streaming"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ERRORED = "errored"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset(
    {SessionStatus.COMPLETED, SessionStatus.CANCELLED, SessionStatus.ERRORED}
)


@dataclass(frozen=True)
class LogEvent:
    """Event emitted by a StreamSession.

    A session emits zero or more ``line`` events followed by exactly one
    terminal event whose ``type`` is ``completed``, ``cancelled`` or
    ``errored``. ``sequence`` numbers line events from 0 within a session.
    """

    type: str  # line, completed, cancelled, errored
    target: str
    sequence: int | None = None
    text: str | None = None
    error: StreamError | None = None
    reason: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.type != "line"


# Sinks may be plain callables or coroutine functions
LogSink = Callable[[LogEvent], None | Awaitable[None]]


async def deliver(sink: LogSink, event: LogEvent) -> None:
    """Invoke a sink and await its result when it returns an awaitable."""
    result = sink(event)
    if inspect.isawaitable(result):
        await result
