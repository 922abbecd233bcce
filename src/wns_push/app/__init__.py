"""Command-line application for the wns-push client."""

from __future__ import annotations

from wns_push.app.cli import cli, main
from wns_push.app.runner import NotificationRunner

__all__ = [
    "cli",
    "main",
    "NotificationRunner",
]
