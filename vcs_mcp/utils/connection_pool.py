"""
Pooled HTTP client for REST providers.

Each provider owns exactly one pool. The underlying ``httpx.AsyncClient`` is
created on the first request (or on ``initialize``) and shared by every call
the provider makes until ``close``.

Example:
    >>> pool = HTTPConnectionPool("https://gitea.example.com/api/v1", headers={"Authorization": "token abc"})
    >>> response = await pool.get("/user")
    >>> await pool.close()
"""

import asyncio
import time
from typing import Any

import httpx
import structlog

log = structlog.get_logger(__name__)

KEEPALIVE_EXPIRY = 30.0


class HTTPConnectionPool:
    """Lazily opened ``httpx.AsyncClient`` bound to one API base URL.

    Attributes:
        base_url: Prefix for every request path
        timeout: Per-request timeout in seconds
        headers: Headers sent with every request (authentication, content type)
    """

    def __init__(
        self,
        base_url: str,
        max_connections: int = 10,
        max_keepalive_connections: int = 5,
        timeout: float = 30.0,
        headers: dict[str, str] | None = None,
    ) -> None:
        self.base_url = base_url
        self.max_connections = max_connections
        self.max_keepalive_connections = max_keepalive_connections
        self.timeout = timeout
        self.headers = dict(headers or {})
        self._client: httpx.AsyncClient | None = None
        self._lock = asyncio.Lock()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    async def initialize(self) -> None:
        """Open the client if it is not open yet."""
        async with self._lock:
            if self._client is not None:
                return
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                http2=True,
                limits=httpx.Limits(
                    max_connections=self.max_connections,
                    max_keepalive_connections=self.max_keepalive_connections,
                    keepalive_expiry=KEEPALIVE_EXPIRY,
                ),
            )
            log.debug("http_pool_opened", base_url=self.base_url, max_connections=self.max_connections)

    async def close(self) -> None:
        """Close the client. Safe to call more than once."""
        async with self._lock:
            client, self._client = self._client, None
        if client is not None:
            await client.aclose()
            log.debug("http_pool_closed", base_url=self.base_url)

    async def request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Send one request relative to ``base_url``.

        Status codes are not checked here; callers decide with
        ``raise_for_status``.

        Raises:
            httpx.RequestError: On network failure or timeout
        """
        if self._client is None:
            await self.initialize()
        assert self._client is not None

        started = time.monotonic()
        response = await self._client.request(method, path, **kwargs)
        log.debug(
            "http_request",
            method=method,
            path=path,
            status=response.status_code,
            elapsed_ms=round((time.monotonic() - started) * 1000),
        )
        return response

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> httpx.Response:
        return await self.request("DELETE", path, **kwargs)

    async def __aenter__(self) -> "HTTPConnectionPool":
        await self.initialize()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()
