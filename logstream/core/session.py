"""A single live log stream against one target."""

from __future__ import annotations

import asyncio
import logging

from ..transport.protocol import LogStream, RequestFn
from .decoder import LineDecoder
from .errors import RequestError, StreamError, StreamInterrupted
from .events import LogEvent, LogSink, SessionStatus, deliver

logger = logging.getLogger(__name__)


class StreamSession:
    """Own one streaming request/response lifecycle end to end.

    The session runs an iterative pull loop in its own task: read a chunk,
    decode it, emit the completed lines to the sink, read again. Every
    session ends in exactly one terminal status and emits exactly one
    terminal event, after its reader has been released.

    - **Errors** never escape the task. A failed or non-2xx request, a dropped
      connection, undecodable bytes and sink failures all end the session as
      ``errored`` with the cause in :attr:`error`.
    - **Cancellation** aborts the in-flight request or read. :meth:`cancel`
      returns only once the reader is closed.

    Usage::

        session = StreamSession("web", transport.open, on_event).start()
        ...
        await session.cancel()
    """

    def __init__(
        self,
        target: str,
        request_fn: RequestFn,
        sink: LogSink,
        *,
        errors: str = "strict",
    ) -> None:
        self._target = target
        self._request_fn = request_fn
        self._sink = sink
        self._decoder = LineDecoder(errors=errors)
        self._status = SessionStatus.PENDING
        self._error: StreamError | None = None
        self._sequence = 0
        self._stream: LogStream | None = None
        self._task: asyncio.Task[None] | None = None
        self._closing = False
        self._done = asyncio.Event()

    @property
    def target(self) -> str:
        return self._target

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def error(self) -> StreamError | None:
        """The failure that errored the session, if any."""
        return self._error

    @property
    def lines_emitted(self) -> int:
        return self._sequence

    def start(self) -> StreamSession:
        """Spawn the read loop and return immediately.

        The request is issued from the session's task so that a caller can
        supersede a session whose request has not resolved yet.
        """
        if self._task is not None or self._status.is_terminal:
            raise RuntimeError(f"Session for '{self._target}' was already started")
        self._task = asyncio.create_task(
            self._run(), name=f"logstream:{self._target or '<default>'}"
        )
        return self

    async def cancel(self) -> None:
        """Stop the stream and wait until its reader is released (idempotent)."""
        if self._status.is_terminal:
            return
        if self._task is None:
            await self._finish(SessionStatus.CANCELLED)
            return

        # Once the loop has exited the task is only releasing and reporting
        if not self._closing and not self._task.cancelling():
            self._task.cancel()
        await asyncio.wait({self._task})

        if not self._status.is_terminal:
            # Cancelled before the task's first step ran
            await self._finish(SessionStatus.CANCELLED)

    async def wait(self) -> SessionStatus:
        """Wait for the session to reach a terminal status."""
        await self._done.wait()
        return self._status

    async def _run(self) -> None:
        status = SessionStatus.COMPLETED
        try:
            await self._pull()
        except asyncio.CancelledError:
            status = SessionStatus.CANCELLED
        except StreamError as exc:
            if exc.target is None:
                exc.target = self._target
            self._error = exc
            status = SessionStatus.ERRORED
        except Exception as exc:
            logger.warning("Log sink failed for %s", self._label, exc_info=True)
            self._error = StreamError(f"Log sink failed: {exc}", target=self._target)
            status = SessionStatus.ERRORED

        self._closing = True
        await self._release()
        await self._finish(status)

    async def _pull(self) -> None:
        try:
            stream = await self._request_fn(self._target)
        except StreamError:
            raise
        except Exception as exc:
            raise RequestError(
                f"Failed to open log stream: {exc}", target=self._target
            ) from exc
        self._stream = stream

        status_code = stream.status_code
        if not 200 <= status_code < 300:
            raise RequestError(
                f"Log stream request failed with status {status_code}",
                target=self._target,
                status_code=status_code,
            )
        self._set_status(SessionStatus.STREAMING)

        while True:
            try:
                chunk = await stream.read()
            except StreamError:
                raise
            except Exception as exc:
                raise StreamInterrupted(
                    f"Log stream interrupted: {exc}", target=self._target
                ) from exc
            if chunk is None:
                break
            for line in self._decoder.feed(chunk):
                await self._emit(line)

        tail = self._decoder.flush()
        if tail is not None:
            await self._emit(tail)

    async def _emit(self, text: str) -> None:
        event = LogEvent(type="line", target=self._target, sequence=self._sequence, text=text)
        self._sequence += 1
        await deliver(self._sink, event)

    async def _release(self) -> None:
        stream, self._stream = self._stream, None
        if stream is None:
            return
        try:
            await stream.aclose()
        except Exception:
            logger.warning("Failed to close log stream for %s", self._label, exc_info=True)

    async def _finish(self, status: SessionStatus) -> None:
        if self._status.is_terminal:
            return
        self._set_status(status)

        reason = None
        if status == SessionStatus.CANCELLED:
            reason = "cancelled by caller"
        elif self._error is not None:
            reason = str(self._error)
            logger.warning("Log stream for %s failed: %s", self._label, reason)

        event = LogEvent(type=status.value, target=self._target, error=self._error, reason=reason)
        try:
            await deliver(self._sink, event)
        except Exception:
            logger.warning("Log sink failed on %s event for %s", status, self._label, exc_info=True)
        finally:
            self._done.set()

    def _set_status(self, status: SessionStatus) -> None:
        logger.debug("Session %s: %s -> %s", self._label, self._status, status)
        self._status = status

    @property
    def _label(self) -> str:
        return self._target or "<default>"
