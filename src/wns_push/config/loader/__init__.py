"""Settings loading from YAML files and environment variables."""

from __future__ import annotations

from ..exceptions import ConfigLoadError
from .config_loader import (
    CLIENT_ID_ENV_VAR,
    CLIENT_SECRET_ENV_VAR,
    CREDENTIAL_ENV_MAPPINGS,
    load_settings,
)
from .env_loader import EnvLoader
from .yaml_loader import YamlLoader

__all__ = [
    "CLIENT_ID_ENV_VAR",
    "CLIENT_SECRET_ENV_VAR",
    "CREDENTIAL_ENV_MAPPINGS",
    "ConfigLoadError",
    "EnvLoader",
    "YamlLoader",
    "load_settings",
]
