"""Protocol definitions for component interfaces."""

from typing import Protocol, runtime_checkable

from wns_push.types.aliases import HeaderMap
from wns_push.types.models import Response


@runtime_checkable
class HTTPClient(Protocol):
    """Protocol for the HTTPS transport used by the broker and dispatcher.

    Implementations raise aiohttp.ClientError, TimeoutError or OSError for
    connection-level failures; any received response is returned regardless
    of its status code.
    """

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
        """
        ...


class SendCallback(Protocol):
    """Completion callback invoked once per send as (error, result)."""

    def __call__(self, error: Exception | None, result: object | None, /) -> object: ...
