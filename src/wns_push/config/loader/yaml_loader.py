"""YAML configuration loader."""

from __future__ import annotations

from pathlib import Path

import yaml

from ..exceptions import ConfigLoadError


class YamlLoader:
    """Loader for YAML configuration files."""

    def load(self, path: Path) -> dict[str, object]:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Parsed configuration as a dictionary

        Raises:
            ConfigLoadError: If the file cannot be read, parsed, or is not a mapping
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                content = yaml.safe_load(f)  # pyright: ignore[reportAny] # yaml.safe_load returns Any
        except (OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"Failed to load {path}: {e}", file_path=str(path)) from e

        # Empty files parse to None
        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigLoadError(
                f"Configuration file {path} must contain a mapping at the top level",
                file_path=str(path),
            )
        return {str(key): value for key, value in content.items()}  # pyright: ignore[reportUnknownVariableType]
