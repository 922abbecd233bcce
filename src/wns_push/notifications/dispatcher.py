"""Notification dispatcher delivering payloads to WNS channel URIs.

This module implements the NotificationDispatcher class responsible for the
HTTPS POST of a notification, classification of the WNS response, and the
single token-refresh-and-retry performed when WNS rejects a token that was
not freshly obtained.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable

from wns_push.errors import (
    NotificationDeliveryError,
    TransportError,
    WNSError,
    WNSErrorType,
    describe_status,
)
from wns_push.notifications.context import SendContext
from wns_push.types import HTTPClient, Response, SendResult
from wns_push.utils.http_client import TRANSPORT_ERRORS
from wns_push.utils.logging import get_logger, log_with_context, set_correlation_id
from wns_push.utils.sanitization import sanitize_exception, sanitize_url

__all__ = ["NotificationDispatcher", "build_headers"]

type UnauthorizedHandler = Callable[[SendContext], None]

NOTIFICATION_CONTENT_TYPE = "text/xml"
NOTIFICATION_STATUS_HEADER = "x-wns-notificationstatus"
RECEIVED = "received"


def _closed_error(context: SendContext) -> WNSError:
    return WNSError(
        "WNS client closed before the notification was delivered",
        error_type=WNSErrorType.CLOSED,
        new_access_token=context.new_access_token,
    )


def build_headers(context: SendContext, body: bytes) -> dict[str, str]:
    """Build the request headers for a notification POST.

    Caller supplied headers replace the defaults by case-insensitive name.
    """
    headers: dict[str, str] = {
        "Content-Type": NOTIFICATION_CONTENT_TYPE,
        "Content-Length": str(len(body)),
        "X-WNS-Type": context.notification_type.value,
        "Authorization": f"Bearer {context.access_token or ''}",
    }
    for name, value in context.options.headers.items():
        for existing in [key for key in headers if key.lower() == name.lower()]:
            del headers[existing]
        headers[name] = value
    return headers


class NotificationDispatcher:
    """Deliver notifications and classify WNS responses."""

    def __init__(
        self,
        http_client: HTTPClient,
        *,
        on_unauthorized: UnauthorizedHandler,
        logger_obj: logging.Logger | None = None,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            http_client: Transport used for notification requests
            on_unauthorized: Receives a send whose static token was rejected
            logger_obj: Optional logger override
        """
        self._http_client: HTTPClient = http_client
        self._on_unauthorized: UnauthorizedHandler = on_unauthorized
        self._logger: logging.Logger = logger_obj or get_logger(__name__)
        self._inflight: dict[asyncio.Task[None], SendContext] = {}

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    def dispatch(self, context: SendContext) -> None:
        """Start delivery of ``context``. Must be called from the running event loop."""
        task = asyncio.get_running_loop().create_task(
            self._deliver(context),
            name=f"wns-send-{context.correlation_id}",
        )
        self._inflight[task] = context
        task.add_done_callback(self._forget)

    async def aclose(self) -> None:
        """Cancel in-flight deliveries; their sends fail as closed."""
        inflight = list(self._inflight.items())
        for task, _context in inflight:
            _ = task.cancel()
        if inflight:
            _ = await asyncio.gather(*(task for task, _context in inflight), return_exceptions=True)

        # Tasks cancelled before their first step never reach their own handler
        for _task, context in inflight:
            _ = context.completion.fail(_closed_error(context))

    def _forget(self, task: asyncio.Task[None]) -> None:
        _ = self._inflight.pop(task, None)

    async def _deliver(self, context: SendContext) -> None:
        set_correlation_id(context.correlation_id)
        if context.completion.done():
            log_with_context(
                self._logger,
                logging.DEBUG,
                "Skipping delivery of a send that already completed",
                extra={"send_id": context.correlation_id},
            )
            return
        context.attempts += 1

        body = context.payload.encode("utf-8")
        headers = build_headers(context, body)

        log_with_context(
            self._logger,
            logging.DEBUG,
            "Sending WNS notification",
            extra={
                "channel": sanitize_url(context.channel),
                "notification_type": context.notification_type.value,
                "attempt": context.attempts,
                "payload_bytes": len(body),
            },
        )

        start = time.perf_counter()
        try:
            response = await self._http_client.post(context.channel, body, headers=headers)
        except asyncio.CancelledError:
            _ = context.completion.fail(_closed_error(context))
            raise
        except TRANSPORT_ERRORS as exc:
            self._fail(
                context,
                TransportError(
                    f"Unable to send HTTPS request to Windows Notification Service: {exc}",
                    cause=exc,
                ),
            )
            return
        except Exception as exc:
            self._logger.exception("Unexpected failure while sending WNS notification")
            self._fail(
                context,
                TransportError(f"Unexpected failure while sending WNS notification: {exc}", cause=exc),
            )
            return

        delivery_ms = (time.perf_counter() - start) * 1000.0
        self._handle_response(context, response, delivery_ms)

    def _handle_response(self, context: SendContext, response: Response, delivery_ms: float) -> None:
        notification_status = response.headers.get(NOTIFICATION_STATUS_HEADER)

        if response.status == 200 and notification_status == RECEIVED:
            result = SendResult(
                status_code=response.status,
                headers=response.headers,
                new_access_token=context.new_access_token,
            )
            if context.completion.resolve(result):
                log_with_context(
                    self._logger,
                    logging.INFO,
                    "WNS notification received",
                    extra={
                        "notification_type": context.notification_type.value,
                        "delivery_ms": round(delivery_ms, 2),
                        "message_id": result.message_id,
                        "device_connection_status": result.device_connection_status,
                    },
                )
            return

        if response.status == 401 and context.new_access_token is None:
            log_with_context(
                self._logger,
                logging.INFO,
                "WNS rejected access token; requesting a new one",
                extra={"attempt": context.attempts},
            )
            self._on_unauthorized(context)
            return

        self._fail(
            context,
            NotificationDeliveryError(
                describe_status(response.status, notification_status),
                error_type=WNSErrorType.DELIVERY_FAILED,
                status_code=response.status,
                headers=response.headers,
                new_access_token=context.new_access_token,
                inner_error=response.body or None,
            ),
        )

    def _fail(self, context: SendContext, error: WNSError) -> None:
        if error.new_access_token is None:
            error.new_access_token = context.new_access_token
        if context.completion.fail(error):
            log_with_context(
                self._logger,
                logging.INFO,
                f"WNS notification failed: {sanitize_exception(error)}",
                extra={
                    "notification_type": context.notification_type.value,
                    "status_code": error.status_code,
                    "attempt": context.attempts,
                },
            )
