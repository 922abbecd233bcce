"""Exception taxonomy for Windows Notification Service operations.

Validation errors are raised synchronously before any network I/O. Every
other error is delivered through the future (and optional callback) of the
send that produced it.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Final

__all__ = [
    "STATUS_MESSAGES",
    "NotificationDeliveryError",
    "TokenAcquisitionError",
    "TransportError",
    "WNSError",
    "WNSErrorType",
    "WNSValidationError",
    "describe_status",
]

# Send notification response codes documented for WNS
STATUS_MESSAGES: Final[Mapping[int, str]] = {
    400: "One or more headers were specified incorrectly or conflict with another header.",
    401: "The cloud service did not present a valid authentication ticket. The OAuth ticket may be invalid.",
    403: "The cloud service is not authorized to send a notification to this URI even though they are authenticated.",
    404: "The channel URI is not valid or is not recognized by WNS.",
    405: "Invalid method (GET, DELETE, CREATE); only POST is allowed.",
    406: "The cloud service exceeded its throttle limit.",
    410: "The channel expired.",
    413: "The notification payload exceeds the 5000 byte size limit.",
    500: "An internal failure caused notification delivery to fail.",
    503: "The server is currently unavailable.",
}


class WNSErrorType(Enum):
    """Classification of WNS client errors."""

    VALIDATION = "validation"
    INVALID_TOKEN_RESPONSE = "invalid_token_response"
    TOKEN_HTTP_ERROR = "token_http_error"
    DELIVERY_FAILED = "delivery_failed"
    TRANSPORT = "transport"
    CLOSED = "closed"


class WNSError(Exception):
    """Base exception for all WNS client errors."""

    def __init__(
        self,
        message: str,
        *,
        error_type: WNSErrorType,
        status_code: int | None = None,
        headers: Mapping[str, str] | None = None,
        new_access_token: str | None = None,
        inner_error: object | None = None,
    ) -> None:
        """Initialize WNS error.

        Args:
            message: Human readable error message
            error_type: Classification of the error
            status_code: HTTP status code if a response was received
            headers: HTTP response headers if a response was received
            new_access_token: Access token obtained during the failed send, if any
            inner_error: Underlying exception or raw response body
        """
        super().__init__(message)
        self.message: str = message
        self.error_type: WNSErrorType = error_type
        self.status_code: int | None = status_code
        self.headers: Mapping[str, str] = headers or {}
        self.new_access_token: str | None = new_access_token
        self.inner_error: object | None = inner_error
        if isinstance(inner_error, BaseException):
            self.__cause__ = inner_error


class WNSValidationError(WNSError, ValueError):
    """Raised synchronously when send arguments are malformed."""

    def __init__(self, message: str) -> None:
        super().__init__(message, error_type=WNSErrorType.VALIDATION)


class TokenAcquisitionError(WNSError):
    """Raised when an access token could not be obtained from the identity provider."""


class NotificationDeliveryError(WNSError):
    """Raised when WNS rejects or does not accept a notification."""


class TransportError(WNSError):
    """Raised when an HTTPS request could not be completed at the connection level."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message, error_type=WNSErrorType.TRANSPORT, inner_error=cause)


def describe_status(status_code: int, notification_status: str | None) -> str:
    """Return the error message for a failed WNS send response.

    Args:
        status_code: HTTP status code returned by WNS
        notification_status: Value of the x-wns-notificationstatus header

    Returns:
        Documented message for known codes, otherwise a synthesized one
    """
    known = STATUS_MESSAGES.get(status_code)
    if known is not None:
        return known
    return (
        f"Windows Notification Service returned HTTP status code {status_code} "
        f"with x-wns-notificationstatus value of {notification_status}"
    )
