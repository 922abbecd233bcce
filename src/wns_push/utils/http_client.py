"""HTTPS transport for token and notification requests.

This module provides the aiohttp implementation of the HTTPClient protocol.
It performs a single POST per call with no retry of its own: the only retry
in the system is the token refresh performed by the notification dispatcher
after a 401 answer.
"""

import asyncio
import logging
from typing import Final, Self

import aiohttp

from wns_push.types.aliases import HeaderMap
from wns_push.types.models import Response
from wns_push.utils.sanitization import sanitize_url

# Exceptions raised by the transport for connection-level failures and malformed URLs
TRANSPORT_ERRORS: Final[tuple[type[BaseException], ...]] = (
    aiohttp.ClientError,
    TimeoutError,
    OSError,
    ValueError,
)


class AIOHTTPClient:
    """Async HTTPS client implementing the HTTPClient protocol.

    Example:
        >>> async with AIOHTTPClient(default_timeout_seconds=30.0) as client:
        ...     response = await client.post(
        ...         "https://db5.notify.windows.com/?token=...",
        ...         b"<badge value=\"1\"/>",
        ...         headers={"X-WNS-Type": "wns/badge"},
        ...     )
    """

    def __init__(self, *, default_timeout_seconds: float = 60.0) -> None:
        """Initialize HTTP client.

        Args:
            default_timeout_seconds: Total timeout applied by aiohttp to each request
        """
        self._default_timeout_seconds: float = default_timeout_seconds

        # aiohttp session (created in __aenter__)
        self._session: aiohttp.ClientSession | None = None

        self._logger: logging.Logger = logging.getLogger(__name__)

    async def __aenter__(self) -> Self:
        """Enter async context manager and create aiohttp session."""
        timeout = aiohttp.ClientTimeout(total=self._default_timeout_seconds)
        self._session = aiohttp.ClientSession(timeout=timeout)
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager and close the aiohttp session."""
        await self.close()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None

    async def post(
        self,
        url: str,
        body: bytes,
        *,
        headers: HeaderMap,
    ) -> Response:
        """Send HTTP POST request.

        Args:
            url: Target URL for the POST request
            body: Encoded request body
            headers: Request headers (keyword-only)

        Returns:
            HTTP response with status, text body, and lower-cased headers

        Raises:
            RuntimeError: If the session has not been opened
            ValueError: If URL is malformed
            aiohttp.ClientError: For connection issues
            TimeoutError: If the request exceeds the configured timeout
        """
        if self._session is None:
            msg = "HTTP client session not initialized. Use 'async with' context manager."
            raise RuntimeError(msg)

        self._logger.debug("Initiating POST request to %s", sanitize_url(url))

        try:
            async with self._session.post(url, data=body, headers=dict(headers)) as response:
                text = await response.text(errors="replace")
                return Response(
                    status=response.status,
                    body=text,
                    headers={name.lower(): value for name, value in response.headers.items()},
                )
        except asyncio.TimeoutError:
            self._logger.warning("Request to %s timed out after %.1fs", sanitize_url(url), self._default_timeout_seconds)
            raise
        except aiohttp.InvalidURL as exc:
            self._logger.error("Invalid URL: %s", sanitize_url(url))
            raise ValueError(f"Malformed URL: {sanitize_url(url)}") from exc
        except aiohttp.ClientError as exc:
            self._logger.warning("Client error for %s: %s", sanitize_url(url), exc)
            raise
