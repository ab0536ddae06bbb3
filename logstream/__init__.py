"""logstream: live container log streaming with clean session switching."""

__version__ = "0.1.0"

from .config import DaemonConfig, StreamConfig, StreamOptions
from .core import (
    DecodeError,
    DecoderClosedError,
    LineDecoder,
    LogEvent,
    LogSink,
    RequestError,
    SessionManager,
    SessionStatus,
    StreamError,
    StreamInterrupted,
    StreamSession,
)
from .transport.http import HttpLogStream, HttpLogTransport
from .transport.protocol import LogStream, RequestFn

__all__ = [
    "__version__",
    "DaemonConfig",
    "StreamConfig",
    "StreamOptions",
    "LineDecoder",
    "StreamSession",
    "SessionManager",
    "SessionStatus",
    "LogEvent",
    "LogSink",
    "LogStream",
    "RequestFn",
    "HttpLogStream",
    "HttpLogTransport",
    "StreamError",
    "RequestError",
    "StreamInterrupted",
    "DecodeError",
    "DecoderClosedError",
]
