"""Transport protocols consumed by stream sessions."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Protocol


class LogStream(Protocol):
    """An opened streaming response for one target."""

    @property
    def status_code(self) -> int:
        """HTTP status of the response."""
        ...

    async def read(self) -> bytes | None:
        """Return the next chunk of body bytes, or None at end of stream."""
        ...

    async def aclose(self) -> None:
        """Abort the response and release the underlying connection."""
        ...


# Opens a stream for a target; the empty string selects the default target
RequestFn = Callable[[str], Awaitable[LogStream]]
