"""Public async client for the Windows Notification Service.

Example:
    >>> async with WNSClient() as client:
    ...     result = await client.send_template(
    ...         "ToastText01",
    ...         channel_uri,
    ...         ["Build finished"],
    ...         {"client_id": "ms-app://...", "client_secret": "..."},
    ...     )
    ...     print(result.new_access_token)
"""

from __future__ import annotations

import asyncio
from typing import Self

from wns_push.config.loader import EnvLoader
from wns_push.config.models import ClientSettings, SendOptions
from wns_push.errors import WNSValidationError
from wns_push.notifications import SendOrchestrator, options_from_value
from wns_push.templates import BadgeValue, TemplateParams, TemplateSpec, get_template, render_badge, render_template
from wns_push.types import HTTPClient, NotificationType, SendResult
from wns_push.utils.http_client import AIOHTTPClient
from wns_push.utils.logging import get_logger

__all__ = ["WNSClient"]

logger = get_logger(__name__)


class WNSClient:
    """Send raw, badge and template notifications to WNS channels.

    Every ``submit*`` method validates synchronously, registers the send and
    returns a future; the matching ``send*`` coroutine awaits it. Access tokens
    obtained on the caller's behalf are reported as ``new_access_token`` and
    can be passed back as ``options.access_token`` on later sends.
    """

    def __init__(
        self,
        *,
        settings: ClientSettings | None = None,
        http_client: HTTPClient | None = None,
        env_loader: EnvLoader | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Client settings; defaults apply when omitted
            http_client: Transport to use; an aiohttp client is created and owned when omitted
            env_loader: Source of credential environment variables
        """
        self._settings: ClientSettings = settings or ClientSettings()
        self._owned_http: AIOHTTPClient | None = None
        if http_client is None:
            self._owned_http = AIOHTTPClient(default_timeout_seconds=self._settings.timeout_seconds)
            http_client = self._owned_http
        self._orchestrator: SendOrchestrator = SendOrchestrator(
            http_client,
            self._settings,
            env_loader=env_loader,
        )
        self._opened: bool = self._owned_http is None
        self._closed: bool = False

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    async def __aenter__(self) -> Self:
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        await self.aclose()

    async def open(self) -> None:
        """Open the owned transport session. Injected transports are used as given."""
        if self._owned_http is not None and not self._opened:
            _ = await self._owned_http.__aenter__()
        self._opened = True

    async def aclose(self) -> None:
        """Fail outstanding sends and close the owned transport."""
        if self._closed:
            return
        self._closed = True
        await self._orchestrator.aclose()
        if self._owned_http is not None:
            await self._owned_http.close()
        logger.debug("WNS client closed")

    def submit(
        self,
        channel: str,
        payload: str,
        notification_type: NotificationType | str,
        options: object = None,
        callback: object = None,
    ) -> asyncio.Future[SendResult]:
        """Submit a pre-formatted notification payload.

        Raises:
            WNSValidationError: If any argument is invalid
            RuntimeError: If the client is closed or was never opened
        """
        return self._register(channel, payload, notification_type, options, callback)

    async def send(
        self,
        channel: str,
        payload: str,
        notification_type: NotificationType | str,
        options: object = None,
    ) -> SendResult:
        """Send a pre-formatted notification payload and await the outcome."""
        return await self._register(channel, payload, notification_type, options, observed=True)

    def submit_badge(
        self,
        channel: str,
        value: BadgeValue | int | str | object,
        options: object = None,
        callback: object = None,
    ) -> asyncio.Future[SendResult]:
        """Submit a badge notification.

        ``value`` is an integer in the 1-99 range, a badge state name, a
        BadgeValue, or a mapping with ``value`` and optional ``version``.
        """
        return self._register(channel, _badge_payload(value), NotificationType.BADGE, options, callback)

    async def send_badge(
        self,
        channel: str,
        value: BadgeValue | int | str | object,
        options: object = None,
    ) -> SendResult:
        return await self._register(channel, _badge_payload(value), NotificationType.BADGE, options, observed=True)

    def submit_template(
        self,
        template: str | TemplateSpec,
        channel: str,
        params: object,
        options: object = None,
        callback: object = None,
    ) -> asyncio.Future[SendResult]:
        """Submit a tile or toast template notification.

        Args:
            template: Template name, e.g. "TileWideText03" or "ToastImageAndText01"
            channel: Channel URI of the target device
            params: TemplateParams, a mapping of image{i}src / image{i}alt / text{i}, or positional strings
            options: SendOptions or a mapping; toast fields are ignored for tiles
            callback: Optional callable invoked once as callback(error, result)

        Raises:
            WNSValidationError: If the template, channel, parameters or options are invalid
        """
        payload, notification_type, send_options = _template_payload(template, channel, params, options)
        return self._register(channel, payload, notification_type, send_options, callback)

    async def send_template(
        self,
        template: str | TemplateSpec,
        channel: str,
        params: object,
        options: object = None,
    ) -> SendResult:
        """Send a tile or toast template notification and await the outcome."""
        payload, notification_type, send_options = _template_payload(template, channel, params, options)
        return await self._register(channel, payload, notification_type, send_options, observed=True)

    def _register(
        self,
        channel: str,
        payload: str,
        notification_type: NotificationType | str,
        options: object,
        callback: object = None,
        *,
        observed: bool = False,
    ) -> asyncio.Future[SendResult]:
        self._ensure_open()
        return self._orchestrator.submit(channel, payload, notification_type, options, callback, observed=observed)

    def _ensure_open(self) -> None:
        if self._closed:
            msg = "WNSClient is closed"
            raise RuntimeError(msg)
        if not self._opened:
            msg = "WNSClient not opened. Use 'async with' context manager or call open()."
            raise RuntimeError(msg)


def _badge_payload(value: object) -> str:
    return render_badge(BadgeValue.from_value(value))


def _template_payload(
    template: str | TemplateSpec,
    channel: object,
    params: object,
    options: object,
) -> tuple[str, NotificationType, SendOptions]:
    """Validate a template send and render its XML payload.

    Raises:
        WNSValidationError: If the template, channel, parameters or options are invalid
    """
    spec = get_template(template)
    if not isinstance(channel, str):
        msg = "The channel parameter must be the channel URI string."
        raise WNSValidationError(msg)
    template_params = TemplateParams.coerce(spec, params)
    send_options = options_from_value(options)
    return render_template(template_params, send_options), spec.notification_type, send_options
