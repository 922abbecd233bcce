"""Badge descriptor and payload builder."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Final, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wns_push.config.models import first_error_message, format_choices
from wns_push.errors import WNSValidationError

__all__ = ["BADGE_STATES", "BadgeValue", "render_badge"]

# Glyphs a badge can show instead of a number
BADGE_STATES: Final[tuple[str, ...]] = (
    "none",
    "activity",
    "alert",
    "available",
    "away",
    "busy",
    "newMessage",
    "paused",
    "playing",
    "unavailable",
    "error",
)


class BadgeValue(BaseModel):
    """Badge number or glyph, with the badge schema version."""

    model_config: ConfigDict = ConfigDict(extra="forbid", frozen=True)  # pyright: ignore[reportIncompatibleVariableOverride]

    value: int | str
    version: Annotated[int, Field(description="Badge schema version")] = 1

    @classmethod
    def from_value(cls, value: object) -> Self:
        """Build a badge from an instance, a {value, version} mapping, or a bare value.

        Raises:
            WNSValidationError: If the value or version is invalid
        """
        if isinstance(value, cls):
            return value
        data = dict(value) if isinstance(value, Mapping) else {"value": value}  # pyright: ignore[reportUnknownArgumentType]
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise WNSValidationError(first_error_message(exc, prefix="badge")) from exc

    @field_validator("value", mode="before")
    @classmethod
    def validate_value(cls, value: object) -> object:
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            msg = "The badge value must be a string or a number."
            raise ValueError(msg)
        if isinstance(value, str):
            if value in BADGE_STATES:
                return value
            msg = f"The badge value must be either an integer in the 1-99 range or one of {format_choices(BADGE_STATES)}"
            raise ValueError(msg)
        if isinstance(value, float) and not value.is_integer():
            msg = "The badge numeric value must be an integer in the 1-99 range."
            raise ValueError(msg)
        if not 1 <= value <= 99:
            msg = "The badge numeric value must be in the 1-99 range."
            raise ValueError(msg)
        return int(value)

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, value: object) -> object:
        if isinstance(value, int) and not isinstance(value, bool) and value >= 1:
            return value
        msg = "The badge version must be a positive integer."
        raise ValueError(msg)


def render_badge(badge: BadgeValue) -> str:
    """Render the badge XML payload.

    Examples:
        >>> render_badge(BadgeValue(value=7))
        '<badge value="7" version="1"/>'
    """
    return f'<badge value="{badge.value}" version="{badge.version}"/>'
