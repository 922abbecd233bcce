"""Base configuration model and shared helpers."""

from __future__ import annotations

import json
from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, ValidationError


class BaseConfig(BaseModel):
    """Base configuration model with common settings."""

    model_config: ConfigDict = ConfigDict(  # pyright: ignore[reportIncompatibleVariableOverride]
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
        frozen=False,
    )


def format_choices(choices: Sequence[str]) -> str:
    """Render allowed values the way error messages list them: ["a","b"]."""
    return json.dumps(list(choices), separators=(",", ":"))


def first_error_message(exc: ValidationError, *, prefix: str = "options") -> str:
    """Return the message a field validator raised, or pydantic's own message.

    Field validators raise ValueError with the exact text reported to callers;
    pydantic keeps that instance in the error context.
    """
    error = exc.errors()[0]
    cause = (error.get("ctx") or {}).get("error")
    if isinstance(cause, ValueError):
        return str(cause)
    location = ".".join(str(part) for part in (prefix, *error["loc"]))
    return f"Invalid value for {location}: {error['msg']}"
