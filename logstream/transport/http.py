"""httpx-backed transport for the daemon's ``/logs`` streaming endpoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from types import TracebackType

import httpx

from ..config import DaemonConfig, StreamOptions
from ..core.errors import RequestError

logger = logging.getLogger(__name__)

LOGS_ENDPOINT = "/logs"


class HttpLogStream:
    """LogStream over a streamed ``httpx.Response``."""

    def __init__(self, response: httpx.Response) -> None:
        self._response = response
        self._chunks: AsyncIterator[bytes] | None = None

    @property
    def status_code(self) -> int:
        return self._response.status_code

    @property
    def response(self) -> httpx.Response:
        return self._response

    async def read(self) -> bytes | None:
        """Return the next body chunk, or None once the body is exhausted."""
        if self._chunks is None:
            self._chunks = self._response.aiter_bytes()
        try:
            return await anext(self._chunks)
        except StopAsyncIteration:
            return None

    async def aclose(self) -> None:
        await self._response.aclose()


class HttpLogTransport:
    """Open log streams against a daemon.

    :meth:`open` is the ``request_fn`` handed to sessions. The underlying
    ``httpx.AsyncClient`` is shared by every stream so cookies set by the
    daemon are sent back on later requests.

    Usage::

        async with HttpLogTransport(config.daemon, config.stream) as transport:
            manager = SessionManager(transport.open, on_event)
    """

    def __init__(
        self,
        daemon: DaemonConfig,
        options: StreamOptions | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not daemon.url:
            raise ValueError("Daemon URL is not configured")
        self._daemon = daemon
        self._options = options or StreamOptions()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            verify=daemon.verify_ssl,
            timeout=httpx.Timeout(None, connect=daemon.connect_timeout),
        )

    def container_for(self, target: str) -> str:
        """Resolve a target; empty selects the configured default container."""
        return target or self._options.default_container

    def build_request(self, target: str, *, stream: bool = True) -> httpx.Request:
        """Build the ``/logs`` request; ``stream=False`` asks for a one-shot snapshot."""
        params: dict[str, str] = {"container": self.container_for(target)}
        if stream:
            params["stream"] = "true"
        if self._options.entries > 0:
            params["entries"] = str(self._options.entries)

        headers = {
            "Content-Type": "application/json",
            "Accept": "text/plain" if stream else "application/json",
        }
        if self._daemon.token:
            headers["Authorization"] = f"Bearer {self._daemon.token}"

        url = self._daemon.url.rstrip("/") + LOGS_ENDPOINT
        return self._client.build_request("GET", url, params=params, headers=headers)

    async def open(self, target: str) -> HttpLogStream:
        """Send the streaming request; the body is read lazily by the session."""
        request = self.build_request(target)
        logger.debug("Opening log stream: %s", request.url)
        response = await self._client.send(request, stream=True)
        logger.debug("Log stream %s answered %d", request.url, response.status_code)
        return HttpLogStream(response)

    async def fetch(self, target: str) -> list[str]:
        """Fetch the most recent log entries for ``target`` without following.

        The daemon answers a non-streaming request with its JSON envelope,
        ``{"code": ..., "message": ..., "data": {"logs": [...]}}``.

        Raises:
            RequestError: The request failed, returned a non-2xx status, or
                the body was not a log envelope.
        """
        request = self.build_request(target, stream=False)
        logger.debug("Fetching log snapshot: %s", request.url)
        try:
            response = await self._client.send(request)
        except httpx.HTTPError as exc:
            raise RequestError(f"Failed to fetch logs: {exc}", target=target) from exc

        try:
            payload = response.json()
        except ValueError:
            payload = None
        if not isinstance(payload, dict):
            payload = {}

        if not response.is_success:
            detail = payload.get("error") or payload.get("message") or response.reason_phrase
            raise RequestError(
                f"Log request failed with status {response.status_code}: {detail}",
                target=target,
                status_code=response.status_code,
            )

        logs = (payload.get("data") or {}).get("logs")
        if not isinstance(logs, list):
            raise RequestError("Malformed log response: missing data.logs", target=target)
        # The daemon splits on "\n", leaving an empty entry after the last line
        if logs and logs[-1] == "":
            logs = logs[:-1]
        return [str(line) for line in logs]

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> HttpLogTransport:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
