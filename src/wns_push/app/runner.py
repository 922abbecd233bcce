"""Application runner for the wns-push command line."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path

from wns_push.client import WNSClient
from wns_push.config import ClientSettings, EnvLoader, load_settings
from wns_push.types import SendResult
from wns_push.utils.logging import configure_logging, get_logger

__all__ = ["NotificationRunner", "SendAction"]

type SendAction = Callable[[WNSClient], Awaitable[SendResult]]

logger = get_logger(__name__)


class NotificationRunner:
    """Load settings, configure logging and run one send on a fresh client."""

    def __init__(
        self,
        config_path: Path | None = None,
        log_level: str | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            config_path: Optional YAML settings file
            log_level: Log level overriding the settings value
            environ: Environment to read settings from (defaults to os.environ)
        """
        self.config_path: Path | None = config_path
        self.log_level: str | None = log_level
        self._environ: Mapping[str, str] | None = environ
        self._settings: ClientSettings | None = None

    @property
    def settings(self) -> ClientSettings:
        """Settings loaded on first access.

        Raises:
            ConfigError: If the settings file or environment is invalid
        """
        if self._settings is None:
            self._settings = load_settings(self.config_path, environ=self._environ)
        return self._settings

    def configure(self) -> None:
        configure_logging(log_level=self.log_level or self.settings.log_level)

    def run(self, action: SendAction) -> SendResult:
        """Run ``action`` against a client opened with the loaded settings."""
        self.configure()
        return asyncio.run(self._run(action))

    async def _run(self, action: SendAction) -> SendResult:
        env_loader = EnvLoader(environ=self._environ)
        async with WNSClient(settings=self.settings, env_loader=env_loader) as client:
            logger.debug("Running send with settings %r", self.settings)
            return await action(client)
