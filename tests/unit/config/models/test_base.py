"""Tests for base configuration models and helpers."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wns_push.config.models import BaseConfig, SendOptions, first_error_message, format_choices


class TestBaseConfig:
    """Test suite for BaseConfig class."""

    def test_base_config_forbids_extra_fields(self) -> None:
        """Test that BaseConfig forbids extra fields."""
        with pytest.raises(ValidationError) as exc_info:
            _ = BaseConfig(extra_field="not_allowed")  # pyright: ignore[reportCallIssue] # Testing validation error

        assert "extra_field" in str(exc_info.value)


class TestFormatChoices:
    """Test rendering of allowed values in error messages."""

    def test_compact_json_list(self) -> None:
        assert format_choices(["long", "short"]) == '["long","short"]'

    def test_empty(self) -> None:
        assert format_choices([]) == "[]"


class TestFirstErrorMessage:
    """Test extraction of caller-facing validation messages."""

    def test_validator_message_returned_verbatim(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _ = SendOptions.model_validate({"launch": 5})

        assert first_error_message(exc_info.value) == "The options.launch must be a string value."

    def test_pydantic_message_located(self) -> None:
        """Test that errors without a validator message name the field."""
        with pytest.raises(ValidationError) as exc_info:
            _ = SendOptions.model_validate({"unknown": 1})

        assert first_error_message(exc_info.value) == "Invalid value for options.unknown: Extra inputs are not permitted"

    def test_custom_prefix(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            _ = SendOptions.model_validate({"unknown": 1})

        assert first_error_message(exc_info.value, prefix="settings").startswith("Invalid value for settings.unknown")
