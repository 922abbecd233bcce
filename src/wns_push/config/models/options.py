"""Per-send request options.

SendOptions is the explicit descriptor of the optional parts of a send:
credentials, a static access token, header overrides and the toast-only
presentation fields. Every validator raises the message reported to
callers as a WNSValidationError.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Final, Literal, Self, override

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from wns_push.config.models.base import format_choices
from wns_push.utils.sanitization import REDACTED

AUDIO_SOURCE_PREFIX: Final[str] = "ms-winsoundevent:Notification."

# System sounds a toast may play
AUDIO_SOURCES: Final[tuple[str, ...]] = (
    "Default",
    "IM",
    "Mail",
    "Reminder",
    "SMS",
    "Alarm",
    "Looping.Alarm2",
    "Looping.Call",
    "Looping.Call2",
)

TOAST_DURATIONS: Final[tuple[str, ...]] = ("long", "short")

CREDENTIALS_MESSAGE: Final[str] = (
    "The options.client_id and options.client_secret must be specified as strings "
    "or the WNS_CLIENT_ID and WNS_CLIENT_SECRET environment variables must be set."
)


class AudioOptions(BaseModel):
    """Audio played with a toast notification."""

    model_config: ConfigDict = ConfigDict(extra="forbid", frozen=True)  # pyright: ignore[reportIncompatibleVariableOverride]

    src: str | None = None
    loop: bool | None = None
    silent: bool | None = None

    @field_validator("src", mode="before")
    @classmethod
    def validate_src(cls, value: object) -> object:
        """Accept a known system sound, bare or prefixed, and store it prefixed."""
        if value is None:
            return value
        if isinstance(value, str):
            if value in AUDIO_SOURCES:
                return AUDIO_SOURCE_PREFIX + value
            if value.startswith(AUDIO_SOURCE_PREFIX) and value.removeprefix(AUDIO_SOURCE_PREFIX) in AUDIO_SOURCES:
                return value
        msg = f"The options.audio.src must be a string value from the following set: {format_choices(AUDIO_SOURCES)}"
        raise ValueError(msg)

    @field_validator("loop", "silent", mode="before")
    @classmethod
    def validate_flags(cls, value: object, info: ValidationInfo) -> object:
        if value is None or isinstance(value, bool):
            return value
        msg = f"The options.audio.{info.field_name} must be a boolean value."
        raise ValueError(msg)


class SendOptions(BaseModel):
    """Optional parameters of a single notification send."""

    model_config: ConfigDict = ConfigDict(extra="forbid", frozen=True)  # pyright: ignore[reportIncompatibleVariableOverride]

    client_id: Annotated[
        str | None,
        Field(description="client_id of the application registered with WNS"),
    ] = None
    client_secret: Annotated[
        str | None,
        Field(description="client_secret of the application registered with WNS"),
    ] = None
    access_token: Annotated[
        str | None,
        Field(description="Static access token to present to WNS"),
    ] = None
    headers: Annotated[
        dict[str, str],
        Field(
            default_factory=dict,
            description="HTTP headers added to, or overriding, the notification request",
        ),
    ]
    duration: Annotated[
        Literal["long", "short"] | None,
        Field(description="Toast display duration"),
    ] = None
    launch: Annotated[
        str | None,
        Field(description="Toast launch argument passed to the application"),
    ] = None
    audio: Annotated[
        AudioOptions | None,
        Field(description="Toast audio"),
    ] = None

    @classmethod
    def from_value(cls, value: SendOptions | Mapping[str, object] | None) -> Self:
        """Build options from an existing instance, a mapping, or nothing."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))

    @field_validator("client_id", "client_secret", mode="before")
    @classmethod
    def validate_credential(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value or None
        raise ValueError(CREDENTIALS_MESSAGE)

    @field_validator("access_token", mode="before")
    @classmethod
    def validate_access_token(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value or None
        msg = "If options.access_token is specified, it must be a string."
        raise ValueError(msg)

    @field_validator("headers", mode="before")
    @classmethod
    def validate_headers(cls, value: object) -> object:
        if value is None:
            return {}
        if isinstance(value, Mapping) and all(
            isinstance(name, str) and isinstance(header_value, str)
            for name, header_value in value.items()  # pyright: ignore[reportUnknownVariableType]
        ):
            return dict(value)  # pyright: ignore[reportUnknownArgumentType]
        msg = "The options.headers must map header names to string values."
        raise ValueError(msg)

    @field_validator("duration", mode="before")
    @classmethod
    def validate_duration(cls, value: object) -> object:
        if value is None or value in TOAST_DURATIONS:
            return value
        msg = f"The options.duration must be a string value from the following set: {format_choices(TOAST_DURATIONS)}"
        raise ValueError(msg)

    @field_validator("launch", mode="before")
    @classmethod
    def validate_launch(cls, value: object) -> object:
        if value is None or isinstance(value, str):
            return value
        msg = "The options.launch must be a string value."
        raise ValueError(msg)

    @override
    def __repr__(self) -> str:
        """Return representation with secrets sanitized."""
        secret = None if self.client_secret is None else REDACTED
        token = None if self.access_token is None else REDACTED
        return (
            f"SendOptions("
            f"client_id={self.client_id!r}, "
            f"client_secret={secret!r}, "
            f"access_token={token!r}, "
            f"headers={sorted(self.headers)!r}, "
            f"duration={self.duration!r}, "
            f"launch={self.launch!r}, "
            f"audio={self.audio!r})"
        )
