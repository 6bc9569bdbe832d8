"""
HTTP session for transports.

Executes prepared requests on a pooled aiohttp session and hands back the
reply unread, so the caller decides how to decode it and when to release
the connection.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional, Any

import aiohttp

from ..api.config import ClientConfig
from ..exceptions import TransportError, MissingLocationError
from ..logging import get_logger
from .body import AiohttpBody


REDIRECT_STATUSES = (301, 302, 303, 307, 308)


@dataclass(frozen=True)
class PreparedRequest:
    """
    A fully built request.

    Attributes:
        method: HTTP method
        url: Absolute URL on the already resolved domain
        params: Query parameters
        data: Encoded body (bytes, str or aiohttp.FormData)
        json: JSON body, used when data is not set
        headers: Per-request headers
        allow_redirects: Follow 3xx replies
    """
    method: str
    url: str
    params: Optional[Dict[str, Any]] = None
    data: Any = None
    json: Any = None
    headers: Optional[Dict[str, str]] = None
    allow_redirects: bool = True


class HTTPSession:
    """
    Pooled aiohttp session for Transport implementations.

    Example:
        >>> async with HTTPSession(ClientConfig.default()) as http:
        ...     body = await http.send(PreparedRequest('GET', 'https://login.wx.qq.com/jslogin'))
    """

    def __init__(self, config: Optional[ClientConfig] = None):
        """
        Initialize HTTP session.

        Args:
            config: Client configuration (uses defaults if not provided)
        """
        self._config = config or ClientConfig.default()
        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None
        self._logger = get_logger('wxwebpy.transport')
        if not logging.getLogger().handlers:
            self._logger.setLevel(self._config.log_level)

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> 'HTTPSession':
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure session is created and open."""
        if self._session is None or self._session.closed:
            self._connector = aiohttp.TCPConnector(
                **self._config.get_connector_kwargs()
            )
            # Login cookies set on the redirect are needed by later calls
            self._session = aiohttp.ClientSession(
                connector=self._connector,
                cookie_jar=aiohttp.CookieJar(unsafe=True),
                **self._config.get_session_kwargs()
            )
        return self._session

    async def close(self):
        """Close session and release resources."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

        if self._connector and not self._connector.closed:
            await self._connector.close()
            self._connector = None

    async def send(self, request: PreparedRequest) -> AiohttpBody:
        """
        Send a prepared request.

        Args:
            request: Request to send

        Returns:
            Unread reply body

        Raises:
            MissingLocationError: If a redirect reply has no Location header
            TransportError: On network failure or HTTP error status
        """
        session = await self._ensure_session()
        proxy = self._config.proxy.to_aiohttp_proxy() if self._config.proxy else None

        self._logger.debug(f"{request.method} {request.url}")

        try:
            response = await session.request(
                request.method,
                request.url,
                params=request.params,
                data=request.data,
                json=request.json if request.data is None else None,
                headers=request.headers,
                allow_redirects=request.allow_redirects,
                proxy=proxy
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._logger.error(f"Network error: {e}")
            raise TransportError(f"Network error: {e}") from e

        if response.status in REDIRECT_STATUSES and 'Location' not in response.headers:
            response.release()
            raise MissingLocationError(
                f"{response.status} redirect without Location header: {request.url}"
            )

        if response.status >= 400:
            response.release()
            raise TransportError(f"HTTP {response.status}: {request.url}")

        return AiohttpBody(response)
