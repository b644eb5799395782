"""Factory functions producing authenticated httpx clients.

Each scheme function validates the credential set for its scheme and
returns an ``httpx.Client`` that authenticates every request. Failed
validation raises :class:`~api_session_core.auth.exceptions.CredentialValidationError`
before any client is built.

Example:
    ```python
    from api_session_core import AuthScheme, bearer_token, create

    client = bearer_token("https://api.example.com", {"token": "abc123"})

    # Same thing through the dispatch entry point
    client = create(AuthScheme.BEARER, "https://api.example.com", {"token": "abc123"})
    ```
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx
from httpx_ntlm import HttpNtlmAuth

from api_session_core.auth.credential_set import CredentialSet
from api_session_core.auth.grants import GrantType, resolve_grant_type
from api_session_core.auth.oauth1 import OAuth1Auth
from api_session_core.auth.oauth2 import OAuth2Auth
from api_session_core.auth.schemes import AuthScheme
from api_session_core.auth.validation import require_credentials
from api_session_core.client import ClientConfig

logger = logging.getLogger(__name__)

RequestDefaults = Mapping[str, Any] | None
Credentials = Mapping[str, str]


def oauth2_grants(
    base_uri: str,
    credentials: Credentials,
    uses_refresh: bool = False,
    custom_grant: GrantType | None = None,
    client_options: Mapping[str, Any] | None = None,
) -> OAuth2Auth:
    """Create the OAuth2 auth handler for a token endpoint.

    Args:
        base_uri: The token endpoint the grant talks to.
        credentials: OAuth2 credentials (``client_id``, ``client_secret`` and
            optionally ``scope``, ``state``, ``redirect_uri``, ``code``,
            ``username``, ``password``).
        uses_refresh: Layer a refresh token grant on top of the main grant.
        custom_grant: Grant to use verbatim instead of selecting one. The
            credentials are not validated in that case.
        client_options: Extra ``httpx.Client`` options for the handshake client.

    Returns:
        An :class:`OAuth2Auth` handler ready to pass to :func:`oauth2`.

    Raises:
        CredentialValidationError: If no custom grant is given and the
            credentials lack ``client_id`` or ``client_secret``.
    """
    grant, refresh_grant = resolve_grant_type(credentials, custom_grant, uses_refresh)
    handshake_client = ClientConfig(base_uri, request_defaults=client_options or {}).create_client()
    return OAuth2Auth(grant, handshake_client, refresh_grant)


def oauth2_config(base_uri: str, auth: OAuth2Auth, request_defaults: RequestDefaults = None) -> ClientConfig:
    return ClientConfig(base_uri, auth=auth, request_defaults=request_defaults or {})


def oauth2(base_uri: str, auth: OAuth2Auth, request_defaults: RequestDefaults = None) -> httpx.Client:
    """Create a client authenticated by an :func:`oauth2_grants` handler."""
    return oauth2_config(base_uri, auth, request_defaults).create_client()


def oauth1_config(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> ClientConfig:
    creds = require_credentials(AuthScheme.OAUTH1, credentials)
    auth = OAuth1Auth(creds["consumer_key"], creds["consumer_secret"], creds["token"], creds["token_secret"])
    return ClientConfig(base_uri, auth=auth, request_defaults=request_defaults or {})


def oauth1(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> httpx.Client:
    """Create a client that OAuth1-signs every request.

    Requires ``consumer_key``, ``consumer_secret``, ``token`` and ``token_secret``.
    """
    return oauth1_config(base_uri, credentials, request_defaults).create_client()


def basic_auth_config(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> ClientConfig:
    creds = require_credentials(AuthScheme.BASIC, credentials)
    auth = httpx.BasicAuth(creds["username"], creds["password"])
    return ClientConfig(base_uri, auth=auth, request_defaults=request_defaults or {})


def basic_auth(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> httpx.Client:
    """Create a client using HTTP Basic auth (``username``, ``password``)."""
    return basic_auth_config(base_uri, credentials, request_defaults).create_client()


def digest_config(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> ClientConfig:
    creds = require_credentials(AuthScheme.DIGEST, credentials)
    auth = httpx.DigestAuth(creds["username"], creds["password"])
    return ClientConfig(base_uri, auth=auth, request_defaults=request_defaults or {})


def digest(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> httpx.Client:
    """Create a client using HTTP Digest auth.

    Requires ``username``, ``password`` and ``digest``; the ``digest`` field
    only opts into the mode.
    """
    return digest_config(base_uri, credentials, request_defaults).create_client()


def ntlm_config(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> ClientConfig:
    creds = require_credentials(AuthScheme.NTLM, credentials)
    auth = HttpNtlmAuth(creds["username"], creds["password"])
    return ClientConfig(base_uri, auth=auth, request_defaults=request_defaults or {})


def ntlm(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> httpx.Client:
    """Create a client using NTLM auth.

    Requires ``username``, ``password`` and ``ntlm``; the ``ntlm`` field only
    opts into the mode.
    """
    return ntlm_config(base_uri, credentials, request_defaults).create_client()


def bearer_token_config(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> ClientConfig:
    creds = require_credentials(AuthScheme.BEARER, credentials)
    return ClientConfig(
        base_uri,
        headers={"Authorization": f"Bearer {creds['token']}"},
        request_defaults=request_defaults or {},
    )


def bearer_token(base_uri: str, credentials: Credentials, request_defaults: RequestDefaults = None) -> httpx.Client:
    """Create a client sending ``Authorization: Bearer <token>`` on every request."""
    return bearer_token_config(base_uri, credentials, request_defaults).create_client()


_CONFIG_BUILDERS: dict[AuthScheme, Callable[[str, Credentials, RequestDefaults], ClientConfig]] = {
    AuthScheme.OAUTH1: oauth1_config,
    AuthScheme.BASIC: basic_auth_config,
    AuthScheme.DIGEST: digest_config,
    AuthScheme.NTLM: ntlm_config,
    AuthScheme.BEARER: bearer_token_config,
}


def build_config(
    scheme: AuthScheme | str,
    base_uri: str,
    credentials: Credentials,
    request_defaults: RequestDefaults = None,
    *,
    uses_refresh: bool = False,
    custom_grant: GrantType | None = None,
) -> ClientConfig:
    """Validate ``credentials`` for ``scheme`` and return the client configuration.

    For OAuth2, ``base_uri`` is both the API base and the token endpoint; use
    :func:`oauth2_grants` and :func:`oauth2` directly when they differ.

    Raises:
        ValueError: If ``scheme`` is not a supported scheme or ``base_uri`` is empty.
        CredentialValidationError: If required credential fields are missing.
    """
    scheme = AuthScheme.parse(scheme)
    logger.debug(
        f"Building {scheme.display_name} client for {base_uri} "
        f"(fields: {sorted(CredentialSet.coerce(credentials))})"
    )

    if scheme is AuthScheme.OAUTH2:
        auth = oauth2_grants(base_uri, credentials, uses_refresh=uses_refresh, custom_grant=custom_grant)
        return oauth2_config(base_uri, auth, request_defaults)
    return _CONFIG_BUILDERS[scheme](base_uri, credentials, request_defaults)


def create(
    scheme: AuthScheme | str,
    base_uri: str,
    credentials: Credentials,
    request_defaults: RequestDefaults = None,
    *,
    uses_refresh: bool = False,
    custom_grant: GrantType | None = None,
) -> httpx.Client:
    """Create an authenticated client for any supported scheme.

    Example:
        ```python
        client = create("basic", "https://api.example.com", {"username": "jdoe", "password": "pw"})
        ```
    """
    config = build_config(
        scheme,
        base_uri,
        credentials,
        request_defaults,
        uses_refresh=uses_refresh,
        custom_grant=custom_grant,
    )
    return config.create_client()
