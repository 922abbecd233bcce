"""wns-push - Windows Notification Service push client.

This package sends toast, tile, badge and raw notifications to WNS channel
URIs and obtains OAuth client-credential access tokens on the caller's
behalf, issuing at most one token request at a time per credential pair.
"""

from wns_push.client import WNSClient
from wns_push.config import AudioOptions, ClientSettings, SendOptions, load_settings
from wns_push.errors import (
    NotificationDeliveryError,
    TokenAcquisitionError,
    TransportError,
    WNSError,
    WNSErrorType,
    WNSValidationError,
)
from wns_push.templates import BadgeValue, TemplateParams
from wns_push.types import NotificationType, SendResult

__all__ = [
    # Client
    "WNSClient",
    # Configuration
    "AudioOptions",
    "ClientSettings",
    "SendOptions",
    "load_settings",
    # Request descriptors
    "BadgeValue",
    "NotificationType",
    "TemplateParams",
    # Results and errors
    "NotificationDeliveryError",
    "SendResult",
    "TokenAcquisitionError",
    "TransportError",
    "WNSError",
    "WNSErrorType",
    "WNSValidationError",
]
