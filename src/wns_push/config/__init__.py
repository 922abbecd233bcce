"""Configuration for the wns-push client: settings, send options and loaders."""

from __future__ import annotations

from .exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    handle_config_error,
    suggest_config_fix,
)
from .loader import EnvLoader, YamlLoader, load_settings
from .models import AudioOptions, ClientSettings, SendOptions

__all__ = [
    # Exception classes
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    # Utility functions
    "handle_config_error",
    "suggest_config_fix",
    # Loaders
    "EnvLoader",
    "YamlLoader",
    "load_settings",
    # Models
    "AudioOptions",
    "ClientSettings",
    "SendOptions",
]
