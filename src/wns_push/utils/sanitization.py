"""Secret sanitization utilities for logging and error messages.

This module redacts sensitive information (bearer tokens, client secrets,
channel URI tokens) from strings, URLs, and structured data before logging
or displaying in error messages.

Examples:
    >>> sanitize_url("https://db5.notify.windows.com/?token=AwYAAAB")
    'https://db5.notify.windows.com/?token=<REDACTED>'

    >>> sanitize_text("Authorization: Bearer EgAcAQMAAAAALYAAY")
    'Authorization: Bearer <REDACTED>'

    >>> sanitize_value({"client_secret": "s3cr3t", "status": 200})
    {'client_secret': '<REDACTED>', 'status': 200}
"""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import TypeIs

# Redaction marker for sanitized values
REDACTED = "<REDACTED>"

# Channel URIs carry their secret in the "token" query parameter:
# https://<region>.notify.windows.com/?token=<token>
_TOKEN_IN_QUERY = re.compile(
    r"([?&](?:token|access_token|client_secret|api[-_]?key|secret)=)([^&\s\"']+)",
    re.IGNORECASE,
)

# x-www-form-urlencoded token request bodies
_FORM_SECRET = re.compile(
    r"((?:^|&)(?:client_secret|access_token)=)([^&\s]+)",
    re.IGNORECASE,
)

# Authorization header values
_BEARER_TOKEN = re.compile(r"(\bBearer\s+)(?!%[sdr])([A-Za-z0-9._~+/=%-]+)", re.IGNORECASE)

# JSON token response bodies: {"access_token":"..."}
_JSON_ACCESS_TOKEN = re.compile(r"(\"access_token\"\s*:\s*\")([^\"]*)(\")")

# Sensitive field name patterns (case-insensitive)
_SENSITIVE_FIELD_PATTERNS = [
    re.compile(pattern, re.IGNORECASE)
    for pattern in [
        r".*token.*",
        r".*secret.*",
        r".*password.*",
        r".*authorization.*",
        r".*credential.*",
    ]
]


def is_sensitive_field(field_name: str) -> bool:
    """Check if a field name indicates sensitive data.

    Examples:
        >>> is_sensitive_field("new_access_token")
        True
        >>> is_sensitive_field("Authorization")
        True
        >>> is_sensitive_field("status_code")
        False
    """
    return any(pattern.match(field_name) for pattern in _SENSITIVE_FIELD_PATTERNS)


def sanitize_url(url: str) -> str:
    """Sanitize secrets from URL query parameters while preserving structure."""
    if not url:
        return url
    return _TOKEN_IN_QUERY.sub(rf"\1{REDACTED}", url)


def sanitize_text(text: str) -> str:
    """Sanitize every known secret pattern from free text.

    Covers URLs, Authorization header values, form-encoded bodies and JSON
    token responses.
    """
    if not text:
        return text

    sanitized = sanitize_url(text)
    sanitized = _FORM_SECRET.sub(rf"\1{REDACTED}", sanitized)
    sanitized = _BEARER_TOKEN.sub(rf"\1{REDACTED}", sanitized)
    sanitized = _JSON_ACCESS_TOKEN.sub(rf"\1{REDACTED}\3", sanitized)
    return sanitized


def _is_primitive(value: object) -> TypeIs[str | int | float | bool | None]:
    return isinstance(value, (str, int, float, bool, type(None)))


def _is_mapping(value: object) -> TypeIs[Mapping[str, object]]:
    return isinstance(value, Mapping)


def _is_sequence(value: object) -> TypeIs[Sequence[object]]:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def sanitize_value(
    value: object,
    *,
    field_name: str | None = None,
) -> object:
    """Recursively sanitize sensitive values from structured data.

    Values are redacted entirely when their field name looks sensitive;
    strings are otherwise scrubbed with sanitize_text, and nested mappings
    and sequences are walked.

    Args:
        value: The value to sanitize (can be any type)
        field_name: Optional field name for context-aware sanitization

    Returns:
        Sanitized value with secrets replaced by REDACTED marker
    """
    if field_name and is_sensitive_field(field_name) and value is not None:
        return REDACTED

    if _is_primitive(value):
        if type(value) is str:
            return sanitize_text(value)
        return value

    if _is_mapping(value):
        return {key: sanitize_value(val, field_name=str(key)) for key, val in value.items()}

    if _is_sequence(value):
        sanitized_items: list[object] = [sanitize_value(item) for item in value]
        if isinstance(value, tuple):
            return tuple(sanitized_items)
        return sanitized_items

    # Fail-safe for unexpected types
    return sanitize_text(str(value))


def sanitize_exception(exc: BaseException) -> str:
    """Sanitize exception messages to remove sensitive information.

    Examples:
        >>> sanitize_exception(ValueError("Bearer abc123 rejected"))
        'ValueError: Bearer <REDACTED> rejected'
    """
    return f"{type(exc).__name__}: {sanitize_text(str(exc))}"


def sanitize_args(args: tuple[object, ...]) -> tuple[object, ...]:
    """Sanitize a tuple of logging arguments."""
    return tuple(sanitize_value(arg) for arg in args)


def sanitize_mapping(data: Mapping[str, object]) -> dict[str, object]:
    """Sanitize a mapping (e.g., response headers or logging extra) for safe output."""
    return {key: sanitize_value(val, field_name=key) for key, val in data.items()}
