"""Credential resolution and coalescing keys."""

from __future__ import annotations

from wns_push.config.loader import CLIENT_ID_ENV_VAR, CLIENT_SECRET_ENV_VAR, EnvLoader
from wns_push.config.models import CREDENTIALS_MESSAGE, ClientSettings, SendOptions
from wns_push.errors import WNSValidationError
from wns_push.types import Credential, CredentialKey

__all__ = ["credential_key", "resolve_credential"]


def credential_key(credential: Credential) -> CredentialKey:
    """Return the coalescing key of a credential pair.

    Sends that share a key share one in-flight token request.
    """
    return f"{credential.client_secret}:{credential.client_id}"


def resolve_credential(
    options: SendOptions,
    settings: ClientSettings,
    env_loader: EnvLoader | None = None,
) -> Credential:
    """Resolve the credential of a send.

    Each field is taken from the send options, then the client settings,
    then the WNS_CLIENT_ID / WNS_CLIENT_SECRET environment variables read
    at call time.

    Raises:
        WNSValidationError: If either field cannot be resolved to a non-empty string
    """
    env = env_loader or EnvLoader()
    client_id = options.client_id or settings.client_id or env.get(CLIENT_ID_ENV_VAR)
    client_secret = options.client_secret or settings.client_secret or env.get(CLIENT_SECRET_ENV_VAR)
    if not client_id or not client_secret:
        raise WNSValidationError(CREDENTIALS_MESSAGE)
    return Credential(client_id=client_id, client_secret=client_secret)
