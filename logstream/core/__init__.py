"""Core log-stream engine: line decoding, sessions, and session management."""

from .decoder import LineDecoder
from .errors import (
    DecodeError,
    DecoderClosedError,
    RequestError,
    StreamError,
    StreamInterrupted,
)
from .events import LogEvent, LogSink, SessionStatus
from .manager import SessionManager
from .session import StreamSession

__all__ = [
    "DecodeError",
    "DecoderClosedError",
    "LineDecoder",
    "LogEvent",
    "LogSink",
    "RequestError",
    "SessionManager",
    "SessionStatus",
    "StreamError",
    "StreamInterrupted",
    "StreamSession",
]
