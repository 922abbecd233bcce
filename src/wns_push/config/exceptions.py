"""Error handling for the configuration system."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Base exception for all configuration-related errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:  # pyright: ignore[reportExplicitAny] # Flexible config error context
        """Initialize ConfigError.

        Args:
            message: Error message
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.context: dict[str, Any] = context or {}  # pyright: ignore[reportExplicitAny] # Flexible config error context


class ConfigLoadError(ConfigError):
    """Exception raised when a configuration file cannot be loaded."""

    def __init__(
        self,
        message: str,
        file_path: str | None = None,
        context: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny] # Flexible config error context
    ) -> None:
        full_context = context or {}
        if file_path is not None:
            full_context["file_path"] = file_path

        super().__init__(message, full_context)
        self.file_path: str | None = file_path


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(
        self,
        message: str,
        pydantic_error: ValidationError | None = None,
        context: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny] # Flexible config error context
    ) -> None:
        """Initialize ConfigValidationError.

        Args:
            message: Error message
            pydantic_error: Original Pydantic ValidationError
            context: Additional context information
        """
        full_context = context or {}
        if pydantic_error is not None:
            full_context["validation_errors"] = format_validation_errors(pydantic_error)

        super().__init__(message, full_context)
        self.pydantic_error: ValidationError | None = pydantic_error


def format_validation_errors(error: ValidationError) -> list[dict[str, object]]:
    """Format Pydantic validation errors for better readability.

    Args:
        error: Pydantic ValidationError

    Returns:
        List of formatted error dictionaries
    """
    return [
        {
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
            "type": err["type"],
        }
        for err in error.errors()
    ]


def handle_config_error(error: Exception, operation: str) -> ConfigError:
    """Wrap configuration errors with consistent error types.

    Args:
        error: Original exception
        operation: Description of the operation that failed

    Returns:
        Wrapped ConfigError instance
    """
    logger.debug("Configuration error during %s: %s", operation, error, exc_info=True)

    if isinstance(error, ConfigError):
        return error

    if isinstance(error, ValidationError):
        wrapped: ConfigError = ConfigValidationError(
            f"Configuration validation failed during {operation}",
            pydantic_error=error,
        )
    else:
        wrapped = ConfigError(
            f"Configuration error during {operation}: {error}",
            context={"operation": operation, "original_error_type": type(error).__name__},
        )
    wrapped.__cause__ = error
    return wrapped


def suggest_config_fix(error: ConfigError) -> str | None:
    """Suggest a fix for a configuration error.

    Args:
        error: Configuration error

    Returns:
        Suggested fix or None if no suggestion available
    """
    if isinstance(error, ConfigLoadError):
        if error.file_path:
            return f"Check that the file exists and is readable: {error.file_path}"
        return "Check that the configuration file exists and is readable"

    if isinstance(error, ConfigValidationError) and error.pydantic_error:
        errors = error.pydantic_error.errors()
        if len(errors) == 1:
            field_path = ".".join(str(loc) for loc in errors[0]["loc"])
            return f"Fix validation error in field '{field_path}': {errors[0]['msg']}"
        return f"Fix {len(errors)} validation errors in the configuration"

    return None
