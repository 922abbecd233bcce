"""Send orchestration: validation, context creation and routing.

The orchestrator is the only writer of new sends. It validates arguments
synchronously, resolves credentials, and then either hands the send to the
dispatcher or routes it through the access token broker. All of this runs
before the caller's first await, so registration order is submission order.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping

from pydantic import ValidationError

from wns_push.config.loader import EnvLoader
from wns_push.config.models import ClientSettings, SendOptions, first_error_message, format_choices
from wns_push.errors import WNSError, WNSValidationError
from wns_push.notifications.broker import AccessTokenBroker
from wns_push.notifications.completion import CompletionHandle
from wns_push.notifications.context import SendContext
from wns_push.notifications.credentials import resolve_credential
from wns_push.notifications.dispatcher import NotificationDispatcher
from wns_push.types import HTTPClient, NotificationType, SendCallback, SendResult
from wns_push.utils.logging import get_logger, log_with_context
from wns_push.utils.sanitization import sanitize_exception

__all__ = ["SendOrchestrator", "options_from_value"]


def options_from_value(value: object) -> SendOptions:
    """Build SendOptions, reporting problems as WNSValidationError.

    Raises:
        WNSValidationError: If the value is not options-shaped or fails validation
    """
    if value is not None and not isinstance(value, (SendOptions, Mapping)):
        msg = "The options parameter, if specified, must be a mapping of send options."
        raise WNSValidationError(msg)
    try:
        return SendOptions.from_value(value)  # pyright: ignore[reportArgumentType]
    except ValidationError as exc:
        raise WNSValidationError(first_error_message(exc)) from exc


class SendOrchestrator:
    """Validate sends and route them to the dispatcher or the token broker."""

    def __init__(
        self,
        http_client: HTTPClient,
        settings: ClientSettings | None = None,
        *,
        env_loader: EnvLoader | None = None,
        logger_obj: logging.Logger | None = None,
    ) -> None:
        """Initialize the orchestrator and its broker and dispatcher.

        Args:
            http_client: Transport shared by token and notification requests
            settings: Client settings (defaults apply when omitted)
            env_loader: Source of WNS_CLIENT_ID / WNS_CLIENT_SECRET fallbacks
            logger_obj: Optional logger override
        """
        self._settings: ClientSettings = settings or ClientSettings()
        self._env_loader: EnvLoader = env_loader or EnvLoader()
        self._logger: logging.Logger = logger_obj or get_logger(__name__)

        self._dispatcher: NotificationDispatcher = NotificationDispatcher(
            http_client,
            on_unauthorized=self._request_token,
        )
        self._broker: AccessTokenBroker = AccessTokenBroker(
            http_client,
            on_token=self._dispatcher.dispatch,
            token_url=self._settings.token_url,
            scope=self._settings.scope,
        )

    @property
    def broker(self) -> AccessTokenBroker:
        return self._broker

    @property
    def dispatcher(self) -> NotificationDispatcher:
        return self._dispatcher

    def submit(
        self,
        channel: object,
        payload: object,
        notification_type: object,
        options: object = None,
        callback: object = None,
        *,
        observed: bool = False,
    ) -> asyncio.Future[SendResult]:
        """Validate and register a send.

        Must be called from the running event loop. Validation happens
        before anything is registered.

        Args:
            channel: Channel URI of the target device
            payload: Notification body
            notification_type: toast, badge, tile or raw (optionally wns/ prefixed)
            options: SendOptions or a mapping of its fields
            callback: Optional callable invoked once as callback(error, result)
            observed: The caller awaits the returned future, so failures are not
                logged as unhandled

        Returns:
            Future resolved with the SendResult or failed with a WNSError

        Raises:
            WNSValidationError: If any argument is invalid
        """
        send_options = options_from_value(options)

        if not isinstance(channel, str):
            msg = "The channel parameter must be the channel URI string."
            raise WNSValidationError(msg)

        if not isinstance(payload, str):
            msg = "The payload parameter must be the notification payload string."
            raise WNSValidationError(msg)

        resolved_type = NotificationType.parse(notification_type)
        if resolved_type is None:
            msg = (
                "The type parameter must specify the notification type. "
                f"The value of {notification_type} is not in the set of valid value types: "
                f"{format_choices([member.value for member in NotificationType])}"
            )
            raise WNSValidationError(msg)

        credential = resolve_credential(send_options, self._settings, self._env_loader)

        if callback is not None and not callable(callback):
            msg = "The callback parameter, if specified, must be the callback function."
            raise WNSValidationError(msg)

        context = SendContext(
            channel=channel,
            payload=payload,
            notification_type=resolved_type,
            options=send_options,
            credential=credential,
            completion=CompletionHandle(),
        )
        future = context.completion.future
        future.add_done_callback(self._completion_reporter(context, callback, observed=observed))

        self._route(context)
        return future

    async def aclose(self) -> None:
        """Cancel outstanding token requests and deliveries."""
        await self._broker.aclose()
        await self._dispatcher.aclose()

    def _route(self, context: SendContext) -> None:
        if context.options.access_token:
            if self._broker.enqueue_if_pending(context):
                return
            self._dispatcher.dispatch(context)
        else:
            self._broker.request_token(context)

    def _request_token(self, context: SendContext) -> None:
        self._broker.request_token(context)

    def _completion_reporter(
        self,
        context: SendContext,
        callback: object,
        *,
        observed: bool,
    ) -> Callable[[asyncio.Future[SendResult]], None]:
        """Build the done-callback that reports a send's outcome."""

        def report(future: asyncio.Future[SendResult]) -> None:
            if future.cancelled():
                log_with_context(
                    self._logger,
                    logging.DEBUG,
                    "WNS send cancelled by caller",
                    extra={"send_id": context.correlation_id},
                )
                return

            error = future.exception()
            if callback is not None:
                reporter: SendCallback = callback  # pyright: ignore[reportAssignmentType]
                if error is None:
                    _ = reporter(None, future.result())
                else:
                    _ = reporter(error, None)
                return

            if error is not None and not observed:
                status_code = error.status_code if isinstance(error, WNSError) else None
                log_with_context(
                    self._logger,
                    logging.WARNING,
                    f"WNS send failed with no callback registered: {sanitize_exception(error)}",
                    extra={
                        "send_id": context.correlation_id,
                        "notification_type": context.notification_type.value,
                        "status_code": status_code,
                    },
                )

        return report
