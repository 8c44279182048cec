"""
HTTP transport for the Kraken REST API.

The dispatcher only depends on the Transport protocol; AiohttpTransport is
the production implementation.
"""

import asyncio
import json
from typing import Any, Dict, Optional, Protocol

import aiohttp

from kraken_client.core.exceptions import (
    RequestTimeoutError,
    ResponseParseError,
    TransportError,
    wrap_exception,
)
from kraken_client.core.logger import get_logger
from kraken_client.models.request import RequestOptions

logger = get_logger(__name__)


class Transport(Protocol):
    """Performs one HTTP exchange and returns the parsed JSON object"""

    async def send(self, options: RequestOptions, body: Optional[str] = None) -> Dict[str, Any]:
        ...

    async def close(self) -> None:
        ...


class AiohttpTransport:
    """
    aiohttp based transport.

    One session is created lazily and reused by every call. The deadline
    from ``RequestOptions.timeout`` covers the whole exchange, with no
    retries.
    """

    def __init__(self, session: Optional[aiohttp.ClientSession] = None):
        self.session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession()
            self._owns_session = True
        return self.session

    async def close(self) -> None:
        """Close the session if this transport created it"""
        if self._owns_session and self.session and not self.session.closed:
            await self.session.close()

    async def __aenter__(self) -> "AiohttpTransport":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def send(self, options: RequestOptions, body: Optional[str] = None) -> Dict[str, Any]:
        """
        Send the request and parse the JSON response body.

        Args:
            options: target, method, headers and deadline
            body: form-encoded body for POST requests

        Returns:
            Parsed response object, whatever its HTTP status

        Raises:
            RequestTimeoutError: deadline expired
            ResponseParseError: body is not a JSON object
            TransportError: connection or protocol failure
        """
        session = await self._ensure_session()
        timeout = aiohttp.ClientTimeout(total=options.timeout)

        try:
            async with session.request(
                options.method.value,
                options.url,
                headers=options.headers,
                data=body.encode("utf-8") if body is not None else None,
                timeout=timeout,
            ) as response:
                status = response.status
                raw = await response.read()

        except asyncio.TimeoutError as e:
            raise wrap_exception(
                e,
                RequestTimeoutError,
                f"Request timed out after {options.timeout}s",
                path=options.path,
            )
        except aiohttp.ClientError as e:
            raise wrap_exception(
                e,
                TransportError,
                f"Connection failed: {e}",
                path=options.path,
            )

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, ValueError) as e:
            raise wrap_exception(
                e,
                ResponseParseError,
                "Response is not valid JSON",
                path=options.path,
                status=status,
            )

        if not isinstance(data, dict):
            raise ResponseParseError(
                "Response is not a JSON object",
                details={"path": options.path, "status": status},
            )

        if status >= 400:
            logger.debug(f"HTTP {status} with parseable body from {options.path}")

        return data
