"""OAuth2 grant types and grant selection.

A grant knows how to obtain a token from the token endpoint. The built-in
grants are small frozen dataclasses tagged with a :class:`GrantKind`; a
caller may supply any other object that satisfies the :class:`GrantType`
protocol, which is then classified as ``GrantKind.CUSTOM``.

Token requests are form-encoded POSTs to the handshake client's base URI
(the token endpoint), authenticated with the client id and secret as HTTP
Basic credentials. Request bodies are prepared and token responses parsed
with ``oauthlib``.

Example:
    ```python
    from api_session_core.auth.grants import GrantKind, resolve_grant_type

    grant, refresh = resolve_grant_type(
        {"client_id": "app", "client_secret": "s3cret", "code": "xyz"},
        uses_refresh=True,
    )
    assert grant.kind is GrantKind.AUTHORIZATION_CODE
    ```
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Protocol, runtime_checkable

import httpx
from oauthlib.oauth2 import BackendApplicationClient, LegacyApplicationClient, WebApplicationClient
from oauthlib.oauth2.rfc6749.parameters import parse_token_response

from api_session_core.auth.credential_set import CredentialSet
from api_session_core.auth.schemes import AuthScheme
from api_session_core.auth.validation import require_credentials

logger = logging.getLogger(__name__)

_FORM_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "Accept": "application/json",
}


class GrantKind(str, Enum):
    """Tag identifying which OAuth2 grant strategy is in use."""

    AUTHORIZATION_CODE = "authorization_code"
    PASSWORD_CREDENTIALS = "password"
    CLIENT_CREDENTIALS = "client_credentials"
    REFRESH_TOKEN = "refresh_token"
    CUSTOM = "custom"


@runtime_checkable
class GrantType(Protocol):
    """Contract every grant satisfies, built-in or caller-supplied."""

    def fetch_token(self, client: httpx.Client) -> Mapping[str, Any]:
        """Obtain a token response (must contain ``access_token``)."""
        ...


def grant_kind(grant: GrantType) -> GrantKind:
    """Return the tag of ``grant``; anything untagged is a custom grant."""
    kind = getattr(grant, "kind", None)
    return kind if isinstance(kind, GrantKind) else GrantKind.CUSTOM


def token_url(client: httpx.Client) -> httpx.URL:
    """The token endpoint a handshake client is bound to.

    httpx appends a trailing slash to ``base_url``; it is stripped so the
    request goes to the endpoint as configured.
    """
    base_url = client.base_url
    return base_url.copy_with(path=base_url.path.rstrip("/") or "/")


def request_token(client: httpx.Client, credentials: CredentialSet, body: str) -> dict[str, Any]:
    """POST a prepared token request body and parse the token response.

    Raises:
        httpx.HTTPStatusError: If the token endpoint answers with an error status.
        oauthlib.oauth2.OAuth2Error: If the response carries an OAuth error.
    """
    response = client.post(
        token_url(client),
        content=body,
        headers=_FORM_HEADERS,
        auth=httpx.BasicAuth(credentials["client_id"], credentials["client_secret"]),
    )
    response.raise_for_status()
    return dict(parse_token_response(response.text))


@dataclass(frozen=True)
class AuthorizationCodeGrant:
    credentials: CredentialSet
    kind: ClassVar[GrantKind] = GrantKind.AUTHORIZATION_CODE

    def fetch_token(self, client: httpx.Client) -> dict[str, Any]:
        oauth = WebApplicationClient(self.credentials["client_id"])
        body = oauth.prepare_request_body(
            code=self.credentials["code"],
            redirect_uri=self.credentials.get("redirect_uri"),
        )
        return request_token(client, self.credentials, body)


@dataclass(frozen=True)
class PasswordCredentialsGrant:
    credentials: CredentialSet
    kind: ClassVar[GrantKind] = GrantKind.PASSWORD_CREDENTIALS

    def fetch_token(self, client: httpx.Client) -> dict[str, Any]:
        oauth = LegacyApplicationClient(self.credentials["client_id"])
        body = oauth.prepare_request_body(
            username=self.credentials["username"],
            password=self.credentials["password"],
            scope=self.credentials.get("scope"),
        )
        return request_token(client, self.credentials, body)


@dataclass(frozen=True)
class ClientCredentialsGrant:
    credentials: CredentialSet
    kind: ClassVar[GrantKind] = GrantKind.CLIENT_CREDENTIALS

    def fetch_token(self, client: httpx.Client) -> dict[str, Any]:
        oauth = BackendApplicationClient(self.credentials["client_id"])
        body = oauth.prepare_request_body(scope=self.credentials.get("scope"))
        return request_token(client, self.credentials, body)


@dataclass(frozen=True)
class RefreshTokenGrant:
    """Exchanges a refresh token for a new access token.

    Layered on top of another grant: the OAuth2 handler tries it first when
    the cached token has expired and carries a ``refresh_token``.

    Behind a custom grant the credentials were never validated, so the
    client id and secret are checked here, when the refresh is attempted.
    """

    credentials: CredentialSet
    kind: ClassVar[GrantKind] = GrantKind.REFRESH_TOKEN

    def fetch_token(self, client: httpx.Client, refresh_token: str | None = None) -> dict[str, Any]:
        refresh_token = refresh_token or self.credentials.get("refresh_token")
        if not refresh_token:
            raise ValueError("No refresh token available for the refresh_token grant")
        require_credentials(AuthScheme.OAUTH2, self.credentials)

        oauth = WebApplicationClient(self.credentials["client_id"])
        body = oauth.prepare_refresh_body(
            refresh_token=refresh_token,
            scope=self.credentials.get("scope"),
        )
        return request_token(client, self.credentials, body)


def resolve_grant_type(
    credentials: Mapping[str, str],
    custom_grant: GrantType | None = None,
    uses_refresh: bool = False,
) -> tuple[GrantType, RefreshTokenGrant | None]:
    """Pick the grant to use for an OAuth2 client.

    Without ``custom_grant`` the credentials must hold ``client_id`` and
    ``client_secret`` (``scope``, ``state``, ``redirect_uri`` and ``code`` are
    accepted as extras). A ``code`` selects the authorization code grant,
    ``username`` plus ``password`` the password grant, anything else the
    client credentials grant.

    A ``custom_grant`` is returned as-is and the credentials are not
    validated at all.

    Returns:
        The selected grant and, when ``uses_refresh`` is set, a refresh grant
        sharing the same credentials.

    Raises:
        CredentialValidationError: If no custom grant is given and the
            OAuth2 required fields are missing.
    """
    if custom_grant is not None:
        logger.debug("Using custom OAuth2 grant without credential validation")
        creds = CredentialSet.coerce(credentials)
        grant: GrantType = custom_grant
    else:
        creds = require_credentials(AuthScheme.OAUTH2, credentials)
        if "code" in creds:
            grant = AuthorizationCodeGrant(creds)
        elif "username" in creds and "password" in creds:
            grant = PasswordCredentialsGrant(creds)
        else:
            grant = ClientCredentialsGrant(creds)

    logger.debug(f"Resolved OAuth2 grant: {grant_kind(grant).value} (refresh: {uses_refresh})")
    refresh = RefreshTokenGrant(creds) if uses_refresh else None
    return grant, refresh
