"""Access token broker with per-credential request coalescing.

The broker owns the table of pending sends keyed by credential. A queue for
a key exists exactly while a token request for that key is in flight, so
registering a send either joins the in-flight request or starts the only
one. Both enqueue and release run synchronously on the event loop thread,
which is what guarantees a single outstanding token request per key.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Callable, Mapping
from urllib.parse import urlencode

from wns_push.config.models import DEFAULT_SCOPE, DEFAULT_TOKEN_URL
from wns_push.errors import (
    TokenAcquisitionError,
    TransportError,
    WNSError,
    WNSErrorType,
)
from wns_push.notifications.context import SendContext
from wns_push.types import AccessToken, Credential, CredentialKey, HTTPClient, Response
from wns_push.utils.http_client import TRANSPORT_ERRORS
from wns_push.utils.logging import get_logger, log_with_context, set_correlation_id
from wns_push.utils.sanitization import sanitize_exception

__all__ = ["AccessTokenBroker"]

type TokenReceiver = Callable[[SendContext], None]


def _closed_error() -> WNSError:
    return WNSError(
        "WNS client closed before an access token was obtained",
        error_type=WNSErrorType.CLOSED,
    )


class AccessTokenBroker:
    """Obtain access tokens on behalf of queued sends."""

    def __init__(
        self,
        http_client: HTTPClient,
        *,
        on_token: TokenReceiver,
        token_url: str = DEFAULT_TOKEN_URL,
        scope: str = DEFAULT_SCOPE,
        logger_obj: logging.Logger | None = None,
    ) -> None:
        """Initialize the broker.

        Args:
            http_client: Transport used for token requests
            on_token: Receives each queued send once its new token is attached
            token_url: OAuth token endpoint
            scope: OAuth scope requested
            logger_obj: Optional logger override
        """
        self._http_client: HTTPClient = http_client
        self._on_token: TokenReceiver = on_token
        self._token_url: str = token_url
        self._scope: str = scope
        self._logger: logging.Logger = logger_obj or get_logger(__name__)

        self._pending: dict[CredentialKey, list[SendContext]] = {}
        self._requests: set[asyncio.Task[None]] = set()

    def has_pending(self, key: CredentialKey) -> bool:
        """Return True while a token request for ``key`` is in flight."""
        return key in self._pending

    def pending_count(self, key: CredentialKey) -> int:
        return len(self._pending.get(key, ()))

    def enqueue_if_pending(self, context: SendContext) -> bool:
        """Queue ``context`` behind an in-flight token request, if there is one.

        Returns:
            True if the context was queued, False if no request is in flight
        """
        queue = self._pending.get(context.key)
        if queue is None:
            return False
        queue.append(context)
        self._log_queued(context, len(queue))
        return True

    def request_token(self, context: SendContext) -> None:
        """Register ``context`` to receive a new access token.

        Joins the in-flight request for the context's credential, or starts
        one if there is none. Must be called from the running event loop.
        """
        if self.enqueue_if_pending(context):
            return

        key = context.key
        self._pending[key] = [context]
        log_with_context(
            self._logger,
            logging.DEBUG,
            "Requesting WNS access token",
            extra={"client_id": context.credential.client_id, "endpoint": self._token_url},
        )
        task = asyncio.get_running_loop().create_task(
            self._acquire(key, context.credential, context.correlation_id),
            name=f"wns-token-{context.credential.client_id}",
        )
        self._requests.add(task)
        task.add_done_callback(self._requests.discard)

    async def aclose(self) -> None:
        """Cancel in-flight token requests and fail their queued sends."""
        tasks = list(self._requests)
        for task in tasks:
            _ = task.cancel()
        if tasks:
            _ = await asyncio.gather(*tasks, return_exceptions=True)

        # Tasks cancelled before their first step never reach their own release
        for key in list(self._pending):
            self._release(key, _closed_error())

    async def _acquire(self, key: CredentialKey, credential: Credential, correlation_id: str) -> None:
        set_correlation_id(correlation_id)
        try:
            response = await self._http_client.post(
                self._token_url,
                self._build_form(credential),
                headers={"Content-Type": "application/x-www-form-urlencoded"},
            )
        except asyncio.CancelledError:
            self._release(key, _closed_error())
            raise
        except TRANSPORT_ERRORS as exc:
            self._release(
                key,
                TransportError(
                    f"Unable to send request for access token to Windows Notification Service: {exc}",
                    cause=exc,
                ),
            )
            return
        except Exception as exc:
            self._logger.exception("Unexpected failure while requesting WNS access token")
            self._release(
                key,
                TransportError(f"Unexpected failure while requesting WNS access token: {exc}", cause=exc),
            )
            return

        try:
            token = self._parse_token_response(response)
        except TokenAcquisitionError as error:
            self._release(key, error)
            return

        self._release(key, token)

    def _build_form(self, credential: Credential) -> bytes:
        return urlencode(
            {
                "grant_type": "client_credentials",
                "client_id": credential.client_id,
                "client_secret": credential.client_secret,
                "scope": self._scope,
            }
        ).encode("utf-8")

    def _parse_token_response(self, response: Response) -> AccessToken:
        """Validate a token endpoint response.

        Raises:
            TokenAcquisitionError: If the status is not 200 or the body is not a bearer token
        """
        if response.status != 200:
            raise TokenAcquisitionError(
                "Unable to obtain access token for WNS. HTTP status code: "
                f"{response.status}. HTTP response body: {response.body}",
                error_type=WNSErrorType.TOKEN_HTTP_ERROR,
                status_code=response.status,
                headers=response.headers,
                inner_error=response.body,
            )

        try:
            parsed: object = json.loads(response.body)
            if not isinstance(parsed, Mapping):
                raise ValueError("Token response is not a JSON object")
            access_token: object = parsed.get("access_token")  # pyright: ignore[reportUnknownMemberType]
            token_type: object = parsed.get("token_type")  # pyright: ignore[reportUnknownMemberType]
            if not isinstance(access_token, str) or token_type != "bearer":
                raise ValueError("Invalid response")
        except ValueError as exc:
            raise TokenAcquisitionError(
                f"Unable to obtain access token for WNS. Invalid response body: {response.body}",
                error_type=WNSErrorType.INVALID_TOKEN_RESPONSE,
                status_code=response.status,
                headers=response.headers,
                inner_error=exc,
            ) from exc

        return AccessToken(access_token=access_token, token_type=token_type)

    def _release(self, key: CredentialKey, outcome: AccessToken | WNSError) -> None:
        """Remove the queue for ``key`` and hand every queued send its outcome.

        The queue is popped before any hand-off, so a send that needs another
        token while being released starts a fresh request.
        """
        queue = self._pending.pop(key, [])
        if isinstance(outcome, WNSError):
            log_with_context(
                self._logger,
                logging.WARNING,
                f"WNS access token request failed: {sanitize_exception(outcome)}",
                extra={"queued_sends": len(queue), "status_code": outcome.status_code},
            )
            for context in queue:
                _ = context.completion.fail(outcome)
            return

        token = outcome
        log_with_context(
            self._logger,
            logging.INFO,
            "WNS access token obtained",
            extra={"queued_sends": len(queue)},
        )
        for context in queue:
            if context.completion.done():
                continue
            context.new_access_token = token.access_token
            self._on_token(context)

    def _log_queued(self, context: SendContext, queue_length: int) -> None:
        log_with_context(
            self._logger,
            logging.DEBUG,
            "Send queued behind in-flight access token request",
            extra={"client_id": context.credential.client_id, "queue_length": queue_length},
        )
