"""Data models for the wns-push client.

This module defines the dataclasses passed between the transport, the
token broker and the notification dispatcher.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Self

from wns_push.utils.sanitization import REDACTED

WNS_TYPE_PREFIX = "wns/"


class NotificationType(StrEnum):
    """WNS notification types, valued by their X-WNS-Type header form."""

    TOAST = "wns/toast"
    BADGE = "wns/badge"
    TILE = "wns/tile"
    RAW = "wns/raw"

    @classmethod
    def parse(cls, value: object) -> Self | None:
        """Resolve a short ("toast") or prefixed ("wns/toast") type name.

        Returns:
            Matching notification type, or None if the value is not recognized
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        name = value if value.startswith(WNS_TYPE_PREFIX) else WNS_TYPE_PREFIX + value
        try:
            return cls(name)
        except ValueError:
            return None

    @property
    def short_name(self) -> str:
        return self.value.removeprefix(WNS_TYPE_PREFIX)


@dataclass(slots=True, frozen=True)
class Credential:
    """Application credentials registered with WNS."""

    client_id: str
    client_secret: str

    def __repr__(self) -> str:
        return f"Credential(client_id={self.client_id!r}, client_secret={REDACTED!r})"


@dataclass(slots=True, frozen=True)
class AccessToken:
    """OAuth access token issued by the identity provider.

    No expiry is tracked; an expired token is discovered when WNS answers 401.
    """

    access_token: str
    token_type: str = "bearer"

    def __repr__(self) -> str:
        return f"AccessToken(access_token={REDACTED!r}, token_type={self.token_type!r})"


@dataclass(slots=True)
class Response:
    """HTTP response.

    Header names are lower-cased by the transport.
    """

    status: int
    body: str
    headers: Mapping[str, str]


@dataclass(slots=True, frozen=True)
class SendResult:
    """Successful delivery of a notification to WNS."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    new_access_token: str | None = None

    @property
    def notification_status(self) -> str | None:
        return self.headers.get("x-wns-notificationstatus")

    @property
    def device_connection_status(self) -> str | None:
        return self.headers.get("x-wns-deviceconnectionstatus")

    @property
    def message_id(self) -> str | None:
        return self.headers.get("x-wns-msg-id")

    @property
    def debug_trace(self) -> str | None:
        return self.headers.get("x-wns-debug-trace")
