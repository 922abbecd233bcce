"""Notification delivery: token coalescing, dispatch and send orchestration."""

from __future__ import annotations

from .broker import AccessTokenBroker
from .completion import CompletionHandle
from .context import SendContext
from .credentials import credential_key, resolve_credential
from .dispatcher import NotificationDispatcher, build_headers
from .orchestrator import SendOrchestrator, options_from_value

__all__ = [
    # Coalescing
    "AccessTokenBroker",
    "credential_key",
    "resolve_credential",
    # Delivery
    "NotificationDispatcher",
    "build_headers",
    # Orchestration
    "CompletionHandle",
    "SendContext",
    "SendOrchestrator",
    "options_from_value",
]
