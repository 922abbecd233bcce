"""Unit of work carried through the token broker and dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import uuid4

from wns_push.config.models import SendOptions
from wns_push.notifications.completion import CompletionHandle
from wns_push.notifications.credentials import credential_key
from wns_push.types import Credential, CredentialKey, NotificationType


@dataclass(slots=True)
class SendContext:
    """A queued or in-flight notification send.

    Owned by the orchestrator while queued behind a token request and by the
    dispatcher while in flight; never held by both at once.
    """

    channel: str
    payload: str
    notification_type: NotificationType
    options: SendOptions
    credential: Credential
    completion: CompletionHandle
    correlation_id: str = field(default_factory=lambda: uuid4().hex)
    new_access_token: str | None = None
    attempts: int = 0

    @property
    def key(self) -> CredentialKey:
        return credential_key(self.credential)

    @property
    def access_token(self) -> str | None:
        """Token presented to WNS: the newly obtained one, else the static one."""
        return self.new_access_token or self.options.access_token
