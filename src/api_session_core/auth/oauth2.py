"""OAuth2 authentication handler for httpx clients.

:class:`OAuth2Auth` attaches a bearer access token to every request and
obtains that token from the configured grant on demand:

1. The first authenticated request triggers the token handshake.
2. The token is cached and reused until it expires.
3. An expired token is refreshed through the refresh grant when one is
   attached and the token carries a ``refresh_token``; if the refresh
   fails, the main grant is run again.
4. A ``401`` from the API discards the cached token and the request is
   retried once with a fresh one.

Example:
    ```python
    from api_session_core import oauth2, oauth2_grants

    auth = oauth2_grants(
        "https://auth.example.com/oauth/token",
        {"client_id": "app", "client_secret": "s3cret"},
        uses_refresh=True,
    )
    client = oauth2("https://api.example.com", auth)
    client.get("/timesheets")  # fetches a token, then sends the request
    ```
"""

import logging
import time
from collections.abc import Generator
from threading import Lock
from typing import Any

import httpx
from oauthlib.oauth2 import OAuth2Error

from api_session_core.auth.exceptions import CredentialValidationError
from api_session_core.auth.grants import GrantType, RefreshTokenGrant, grant_kind

logger = logging.getLogger(__name__)

# Tokens this close to expiry are treated as expired.
EXPIRY_LEEWAY_SECONDS = 10


class OAuth2Auth(httpx.Auth):
    """httpx auth handler driving an OAuth2 grant.

    Args:
        grant: The grant used to obtain access tokens.
        handshake_client: Client bound to the token endpoint, used only for
            token requests.
        refresh_grant: Optional grant layered on top of ``grant`` to renew
            expired tokens.
    """

    def __init__(
        self,
        grant: GrantType,
        handshake_client: httpx.Client,
        refresh_grant: RefreshTokenGrant | None = None,
    ) -> None:
        self.grant = grant
        self.refresh_grant = refresh_grant
        self.handshake_client = handshake_client
        self._token: dict[str, Any] | None = None
        self._token_lock = Lock()

    @property
    def grants(self) -> tuple[GrantType, ...]:
        """The grant chain, main grant first."""
        if self.refresh_grant is None:
            return (self.grant,)
        return (self.grant, self.refresh_grant)

    @property
    def token(self) -> dict[str, Any] | None:
        return self._token

    def _is_expired(self, token: dict[str, Any]) -> bool:
        expires_at = token.get("expires_at")
        if expires_at is None:
            return False
        return float(expires_at) - EXPIRY_LEEWAY_SECONDS <= time.time()

    def _fetch_token(self) -> dict[str, Any]:
        logger.debug(f"Requesting OAuth2 token with {grant_kind(self.grant).value} grant")
        token = dict(self.grant.fetch_token(self.handshake_client))
        if "access_token" not in token:
            raise ValueError("OAuth2 token response did not include an access_token")
        return token

    def _refresh_token(self, refresh_grant: RefreshTokenGrant, token: dict[str, Any]) -> dict[str, Any]:
        try:
            refreshed = refresh_grant.fetch_token(self.handshake_client, token["refresh_token"])
        except (httpx.HTTPStatusError, OAuth2Error, CredentialValidationError) as e:
            logger.warning(f"OAuth2 token refresh failed, requesting a new token instead: {e}")
            return self._fetch_token()

        # Servers may omit the refresh token when it stays valid.
        refreshed.setdefault("refresh_token", token["refresh_token"])
        return refreshed

    def access_token(self) -> str:
        """Return a valid access token, acquiring or refreshing it if needed."""
        with self._token_lock:
            token = self._token
            if token is None:
                token = self._fetch_token()
            elif self._is_expired(token):
                if self.refresh_grant is not None and token.get("refresh_token"):
                    token = self._refresh_token(self.refresh_grant, token)
                else:
                    token = self._fetch_token()
            self._token = token
            return token["access_token"]

    def invalidate(self) -> None:
        """Forget the cached token so the next request acquires a new one."""
        with self._token_lock:
            self._token = None

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        request.headers["Authorization"] = f"Bearer {self.access_token()}"
        response = yield request

        if response.status_code == httpx.codes.UNAUTHORIZED:
            logger.debug(f"{request.method} {request.url} returned 401, retrying with a new token")
            self.invalidate()
            request.headers["Authorization"] = f"Bearer {self.access_token()}"
            yield request
