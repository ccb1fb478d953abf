"""
HTTP transport for the lexoffice client.

``RequestExecutor`` is the only capability the client needs from a
transport. ``HttpxRequestExecutor`` implements it on top of
``httpx.AsyncClient`` and applies the optional rate limiter.
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Protocol

import httpx

from .connection import ConnectionConfig
from .errors import RequestTimeoutError, TransportError
from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class RequestExecutor(Protocol):
    """Sends one HTTP request and returns the raw response.

    Implementations raise ``RequestTimeoutError`` when the deadline
    expires and ``TransportError`` for any other network failure. HTTP
    error statuses are returned, not raised.
    """

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        ...

    async def aclose(self) -> None:
        ...


class HttpxRequestExecutor:
    """RequestExecutor backed by httpx.AsyncClient."""

    def __init__(
        self,
        config: ConnectionConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.config = config
        self._limiter = RateLimiter(config.rate_limit) if config.rate_limit else None

        client_kwargs: Dict[str, Any] = {
            "base_url": config.api_url,
            "timeout": httpx.Timeout(config.timeout_seconds),
            "follow_redirects": True,
            "headers": {"Accept": "application/json"},
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        elif config.proxy is not None:
            client_kwargs["proxy"] = httpx.Proxy(
                config.proxy.url, auth=config.proxy.credentials
            )
            logger.info(f"Using proxy {config.proxy.url}")

        self._client = httpx.AsyncClient(**client_kwargs)

    @property
    def limiter(self) -> Optional[RateLimiter]:
        return self._limiter

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    async def send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        files: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Response:
        """Send a request; ``timeout`` (seconds) bounds the whole call.

        The deadline covers waiting for the rate limiter as well as
        every phase of the HTTP exchange.
        """
        deadline = timeout if timeout is not None else self.config.timeout_seconds
        try:
            return await asyncio.wait_for(
                self._send(
                    method,
                    url,
                    headers=headers,
                    params=params,
                    json=json,
                    files=files,
                    data=data,
                    timeout=deadline,
                ),
                deadline,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"lexoffice request deadline of {deadline}s expired: {method} {url}")
            raise RequestTimeoutError(f"{method} {url} timed out") from e

    async def _send(
        self,
        method: str,
        url: str,
        *,
        headers: Optional[Dict[str, str]],
        params: Optional[Dict[str, Any]],
        json: Any,
        files: Optional[Dict[str, Any]],
        data: Optional[Dict[str, Any]],
        timeout: float,
    ) -> httpx.Response:
        if self._limiter is not None:
            await self._limiter.acquire()

        try:
            return await self._client.request(
                method,
                url,
                headers=headers,
                params=params,
                json=json,
                files=files,
                data=data,
                timeout=httpx.Timeout(timeout),
            )
        except httpx.TimeoutException as e:
            logger.warning(f"lexoffice request timeout: {method} {url}")
            raise RequestTimeoutError(f"{method} {url} timed out") from e
        except httpx.HTTPError as e:
            logger.error(f"lexoffice request failed: {method} {url}: {e}")
            raise TransportError(f"{method} {url} failed: {e}") from e

    async def aclose(self) -> None:
        await self._client.aclose()
