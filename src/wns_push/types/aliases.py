"""Type aliases using PEP 695 syntax."""

from collections.abc import Mapping

# HTTP header names to values; response headers arrive lower-cased
type HeaderMap = Mapping[str, str]

# Credential coalescing key ("<client_secret>:<client_id>")
type CredentialKey = str
