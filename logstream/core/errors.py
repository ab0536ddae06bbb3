"""Error types raised and reported by log-stream sessions."""

from __future__ import annotations


class StreamError(Exception):
    """Base class for failures that end a session in the ``errored`` state."""

    def __init__(self, message: str, *, target: str | None = None) -> None:
        super().__init__(message)
        self.target = target


class RequestError(StreamError):
    """Raised when the stream could not be opened or answered with a non-2xx status.

    No bytes have been streamed when this is raised, so no lines were emitted.
    """

    def __init__(
        self,
        message: str,
        *,
        target: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, target=target)
        self.status_code = status_code


class StreamInterrupted(StreamError):
    """Raised when the connection drops after streaming started.

    Lines emitted before the drop remain valid.
    """


class DecodeError(StreamInterrupted):
    """Raised when bytes are invalid even after split-codepoint carryover."""


class DecoderClosedError(RuntimeError):
    """Raised when a LineDecoder is used after ``flush()``."""

    def __init__(self, operation: str) -> None:
        super().__init__(f"LineDecoder.{operation}() called after flush()")
