"""Type definitions and protocols for the wns-push client.

This package provides:
- Data models (dataclasses)
- Protocol definitions (structural subtyping interfaces)
- Type aliases (PEP 695 syntax)
"""

from wns_push.types.aliases import CredentialKey, HeaderMap
from wns_push.types.models import (
    AccessToken,
    Credential,
    NotificationType,
    Response,
    SendResult,
)
from wns_push.types.protocols import HTTPClient, SendCallback

__all__ = [
    # Type aliases
    "CredentialKey",
    "HeaderMap",
    # Data models
    "AccessToken",
    "Credential",
    "NotificationType",
    "Response",
    "SendResult",
    # Protocols
    "HTTPClient",
    "SendCallback",
]
