"""Shared utility modules: HTTPS transport, logging and secret sanitization.

Only the dependency-free sanitization helpers are re-exported here; import
the transport from wns_push.utils.http_client and logging helpers from
wns_push.utils.logging.
"""

from wns_push.utils.sanitization import (
    REDACTED,
    sanitize_exception,
    sanitize_mapping,
    sanitize_text,
    sanitize_url,
    sanitize_value,
)

__all__ = [
    "REDACTED",
    "sanitize_exception",
    "sanitize_mapping",
    "sanitize_text",
    "sanitize_url",
    "sanitize_value",
]
