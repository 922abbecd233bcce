"""Tests for configuration error handling."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from wns_push.config import (
    ClientSettings,
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    handle_config_error,
    suggest_config_fix,
)


def _validation_error(**data: object) -> ValidationError:
    with pytest.raises(ValidationError) as exc_info:
        _ = ClientSettings.model_validate(data)
    return exc_info.value


class TestConfigErrors:
    """Test configuration exception classes."""

    def test_config_error_context(self) -> None:
        error = ConfigError("Test error", context={"field": "test"})

        assert str(error) == "Test error"
        assert error.context == {"field": "test"}

    def test_config_error_no_context(self) -> None:
        assert ConfigError("Test error").context == {}

    def test_load_error_records_path(self) -> None:
        error = ConfigLoadError("Failed to load", file_path="/etc/wns.yaml")

        assert error.file_path == "/etc/wns.yaml"
        assert error.context["file_path"] == "/etc/wns.yaml"

    def test_validation_error_formats_details(self) -> None:
        error = ConfigValidationError("invalid", pydantic_error=_validation_error(timeout_seconds=0))

        details = error.context["validation_errors"]
        assert details[0]["field"] == "timeout_seconds"
        assert details[0]["type"] == "greater_than"


class TestHandleConfigError:
    """Test wrapping of arbitrary errors."""

    def test_config_error_returned_unchanged(self) -> None:
        error = ConfigLoadError("Failed to load")

        assert handle_config_error(error, "loading") is error

    def test_validation_error_wrapped(self) -> None:
        cause = _validation_error(scope="")
        error = handle_config_error(cause, "settings validation")

        assert isinstance(error, ConfigValidationError)
        assert str(error) == "Configuration validation failed during settings validation"
        assert error.__cause__ is cause

    def test_other_error_wrapped(self) -> None:
        cause = KeyError("scope")
        error = handle_config_error(cause, "merging")

        assert type(error) is ConfigError
        assert error.context == {"operation": "merging", "original_error_type": "KeyError"}


class TestSuggestConfigFix:
    """Test fix suggestions shown by the CLI."""

    def test_load_error_with_path(self) -> None:
        suggestion = suggest_config_fix(ConfigLoadError("x", file_path="/etc/wns.yaml"))

        assert suggestion == "Check that the file exists and is readable: /etc/wns.yaml"

    def test_single_validation_error(self) -> None:
        error = ConfigValidationError("invalid", pydantic_error=_validation_error(timeout_seconds=0))

        suggestion = suggest_config_fix(error)

        assert suggestion is not None
        assert suggestion.startswith("Fix validation error in field 'timeout_seconds'")

    def test_multiple_validation_errors(self) -> None:
        error = ConfigValidationError("invalid", pydantic_error=_validation_error(timeout_seconds=0, scope=""))

        assert suggest_config_fix(error) == "Fix 2 validation errors in the configuration"

    def test_no_suggestion(self) -> None:
        assert suggest_config_fix(ConfigError("x")) is None
