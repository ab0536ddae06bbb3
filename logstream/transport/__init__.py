"""Transports that open streaming log responses.

The httpx transport is imported lazily so the core can depend on the
protocols without pulling in configuration and httpx.
"""

from __future__ import annotations

from .protocol import LogStream, RequestFn


def __getattr__(name: str):  # noqa: N807
    """Lazy imports for the httpx transport."""
    if name in ("HttpLogStream", "HttpLogTransport"):
        from . import http as _http
        return getattr(_http, name)
    raise AttributeError(f"module 'logstream.transport' has no attribute {name!r}")


__all__ = [
    "HttpLogStream",
    "HttpLogTransport",
    "LogStream",
    "RequestFn",
]
