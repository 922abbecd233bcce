"""Pydantic models for client settings and per-send options."""

from __future__ import annotations

from .base import BaseConfig, first_error_message, format_choices
from .options import (
    AUDIO_SOURCE_PREFIX,
    AUDIO_SOURCES,
    CREDENTIALS_MESSAGE,
    TOAST_DURATIONS,
    AudioOptions,
    SendOptions,
)
from .settings import DEFAULT_SCOPE, DEFAULT_TOKEN_URL, ClientSettings

__all__ = [
    "AUDIO_SOURCE_PREFIX",
    "AUDIO_SOURCES",
    "CREDENTIALS_MESSAGE",
    "DEFAULT_SCOPE",
    "DEFAULT_TOKEN_URL",
    "TOAST_DURATIONS",
    "AudioOptions",
    "BaseConfig",
    "ClientSettings",
    "SendOptions",
    "first_error_message",
    "format_choices",
]
