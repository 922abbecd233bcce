"""Environment variable configuration loader."""

from __future__ import annotations

import os
from collections.abc import Mapping


class EnvLoader:
    """Environment variable loader with prefix stripping and fixed mappings.

    Variables named ``<prefix><FIELD>`` load as lower-cased ``field`` keys;
    explicit mappings load fixed variable names into the given keys and take
    precedence over prefixed variables. Values stay strings; type coercion is
    left to the pydantic models that consume them.
    """

    def __init__(
        self,
        prefix: str = "WNS_PUSH_",
        mappings: Mapping[str, str] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize EnvLoader.

        Args:
            prefix: Prefix for environment variables to load
            mappings: Mappings from env var names to config keys
            environ: Environment to read (defaults to os.environ at load time)
        """
        self.prefix: str = prefix
        self.mappings: dict[str, str] = dict(mappings or {})
        self._environ: Mapping[str, str] | None = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def load(self) -> dict[str, object]:
        """Load configuration from environment variables.

        Returns:
            Dictionary containing the loaded configuration
        """
        environ = self.environ
        config: dict[str, object] = {}

        for env_var, raw_value in environ.items():
            if not env_var.startswith(self.prefix) or env_var in self.mappings:
                continue
            config_key = env_var[len(self.prefix):].lower()
            if config_key:
                config[config_key] = raw_value

        for env_var, config_key in self.mappings.items():
            if env_var in environ:
                config[config_key] = environ[env_var]

        return config

    def get(self, env_var: str) -> str | None:
        """Read a single variable from the loader's environment."""
        return self.environ.get(env_var)
