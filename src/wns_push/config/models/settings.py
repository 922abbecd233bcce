"""Client-wide settings."""

from __future__ import annotations

from typing import Annotated, Final, Literal, override

from pydantic import Field, field_validator

from wns_push.config.models.base import BaseConfig
from wns_push.utils.sanitization import REDACTED

DEFAULT_TOKEN_URL: Final[str] = "https://login.live.com/accesstoken.srf"
DEFAULT_SCOPE: Final[str] = "notify.windows.com"


class ClientSettings(BaseConfig):
    """Settings shared by every send made through one client."""

    token_url: Annotated[
        str,
        Field(
            description="OAuth token endpoint of the identity provider",
            pattern=r"^https?://",
        ),
    ] = DEFAULT_TOKEN_URL
    scope: Annotated[
        str,
        Field(
            description="OAuth scope requested with client credentials",
            min_length=1,
        ),
    ] = DEFAULT_SCOPE
    timeout_seconds: Annotated[
        float,
        Field(
            description="Total timeout of a single HTTPS request",
            gt=0,
            le=600,
        ),
    ] = 60.0
    log_level: Annotated[
        Literal["DEBUG", "INFO", "WARNING", "ERROR"],
        Field(
            description="Log level used by the command-line interface",
        ),
    ] = "INFO"
    client_id: Annotated[
        str | None,
        Field(
            description="Default client_id when a send does not specify one",
        ),
    ] = None
    client_secret: Annotated[
        str | None,
        Field(
            description="Default client_secret when a send does not specify one",
        ),
    ] = None

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: object) -> object:
        """Accept log levels in any case."""
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @override
    def __repr__(self) -> str:
        """Return representation with client_secret sanitized."""
        secret = None if self.client_secret is None else REDACTED
        return (
            f"ClientSettings("
            f"token_url={self.token_url!r}, "
            f"scope={self.scope!r}, "
            f"timeout_seconds={self.timeout_seconds!r}, "
            f"log_level={self.log_level!r}, "
            f"client_id={self.client_id!r}, "
            f"client_secret={secret!r})"
        )
