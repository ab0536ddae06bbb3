"""Keep at most one live log stream per consumer."""

from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from ..transport.protocol import RequestFn
from .events import LogSink
from .session import StreamSession

logger = logging.getLogger(__name__)


class SessionManager:
    """Swap stream sessions as the observed target changes.

    The previous session is always fully cancelled, reader released, before
    the next one is constructed, so two readers are never attached at once.
    ``set_target`` and ``stop`` are serialized by an internal lock; a call
    that is overtaken by a newer one while waiting for the lock does nothing.

    Errored sessions are not retried. A consumer retries by calling
    ``set_target`` again with the same target.
    """

    def __init__(
        self,
        request_fn: RequestFn,
        sink: LogSink,
        *,
        errors: str = "strict",
    ) -> None:
        self._request_fn = request_fn
        self._sink = sink
        self._errors = errors
        self._lock = asyncio.Lock()
        self._generation = 0
        self._active: StreamSession | None = None
        self._current_target: str | None = None

    @property
    def active_session(self) -> StreamSession | None:
        return self._active

    @property
    def current_target(self) -> str | None:
        """Last requested target; ``""`` is the default target, None means stopped."""
        return self._current_target

    async def set_target(self, target: str) -> StreamSession | None:
        """Stream ``target``, replacing the active session.

        Returns the session now streaming ``target``, or None when a newer
        ``set_target``/``stop`` call superseded this one. Asking again for the
        target that is already live returns that session unchanged.
        """
        self._generation += 1
        generation = self._generation

        async with self._lock:
            if generation != self._generation:
                logger.debug("Switch to %r superseded before it started", target)
                return None

            active = self._active
            if (
                active is not None
                and active.target == target
                and not active.status.is_terminal
            ):
                return active

            await self._cancel_active()
            session = StreamSession(
                target, self._request_fn, self._sink, errors=self._errors
            )
            self._active = session
            self._current_target = target
            logger.debug("Streaming logs for %r", target)
            return session.start()

    async def stop(self) -> None:
        """Cancel the active session and clear the current target."""
        self._generation += 1
        async with self._lock:
            await self._cancel_active()
            self._current_target = None

    async def _cancel_active(self) -> None:
        session = self._active
        if session is not None:
            await session.cancel()
        self._active = None

    async def __aenter__(self) -> SessionManager:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.stop()
