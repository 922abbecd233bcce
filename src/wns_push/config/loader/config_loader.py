"""Settings loader combining a YAML file with environment variables."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Final

from pydantic import ValidationError

from ..exceptions import ConfigValidationError, handle_config_error
from ..models.settings import ClientSettings
from .env_loader import EnvLoader
from .yaml_loader import YamlLoader

CLIENT_ID_ENV_VAR: Final[str] = "WNS_CLIENT_ID"
CLIENT_SECRET_ENV_VAR: Final[str] = "WNS_CLIENT_SECRET"
SETTINGS_ENV_PREFIX: Final[str] = "WNS_PUSH_"

# Credential variables shared with the send path
CREDENTIAL_ENV_MAPPINGS: Final[Mapping[str, str]] = {
    CLIENT_ID_ENV_VAR: "client_id",
    CLIENT_SECRET_ENV_VAR: "client_secret",
}


def load_settings(
    path: Path | None = None,
    *,
    environ: Mapping[str, str] | None = None,
) -> ClientSettings:
    """Load client settings.

    Sources in increasing precedence: defaults, the YAML file at ``path``,
    ``WNS_CLIENT_ID``/``WNS_CLIENT_SECRET``, ``WNS_PUSH_*`` variables.

    Args:
        path: Optional YAML settings file
        environ: Environment to read (defaults to os.environ)

    Returns:
        Validated client settings

    Raises:
        ConfigLoadError: If the YAML file cannot be loaded
        ConfigValidationError: If the merged settings are invalid
    """
    merged: dict[str, object] = {}
    if path is not None:
        merged.update(YamlLoader().load(path))

    env_loader = EnvLoader(
        prefix=SETTINGS_ENV_PREFIX,
        mappings=CREDENTIAL_ENV_MAPPINGS,
        environ=environ,
    )
    merged.update(env_loader.load())

    try:
        return ClientSettings.model_validate(merged)
    except ValidationError as exc:
        error = handle_config_error(exc, "settings validation")
        if isinstance(error, ConfigValidationError) and path is not None:
            error.context["file_path"] = str(path)
        raise error from exc
