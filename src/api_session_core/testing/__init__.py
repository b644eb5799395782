"""Testing utilities for code built on the client factory.

Provides sample credential sets for every scheme and a fake OAuth2 token
endpoint to run under ``httpx.MockTransport``.

Example:
    ```python
    import httpx

    from api_session_core import oauth2_grants
    from api_session_core.testing import SAMPLE_CREDENTIALS, TokenEndpoint

    endpoint = TokenEndpoint()
    auth = oauth2_grants(
        "https://auth.example.com/token",
        SAMPLE_CREDENTIALS["oauth2"],
        client_options={"transport": httpx.MockTransport(endpoint)},
    )
    ```
"""

from collections.abc import Mapping
from typing import Any
from urllib.parse import parse_qsl

import httpx

from api_session_core.auth.schemes import AuthScheme

SAMPLE_CREDENTIALS: Mapping[str, Mapping[str, str]] = {
    AuthScheme.OAUTH1.value: {
        "consumer_key": "consumer-key",
        "consumer_secret": "consumer-secret",
        "token": "access-token",
        "token_secret": "access-token-secret",
    },
    AuthScheme.OAUTH2.value: {"client_id": "client-id", "client_secret": "client-secret"},
    AuthScheme.BASIC.value: {"username": "jdoe", "password": "hunter2"},
    AuthScheme.DIGEST.value: {"username": "jdoe", "password": "hunter2", "digest": "digest"},
    AuthScheme.NTLM.value: {"username": "jdoe", "password": "hunter2", "ntlm": "ntlm"},
    AuthScheme.BEARER.value: {"token": "abc123"},
}


class TokenEndpoint:
    """Callable ``httpx.MockTransport`` handler acting as an OAuth2 token endpoint.

    Every request gets a new access token (``token-1``, ``token-2``, ...).
    Received form bodies are recorded in :attr:`requests`, request URLs in
    :attr:`urls` and client authentication headers in :attr:`authorizations`.

    Args:
        expires_in: Lifetime reported for issued tokens (omitted when None).
        refresh_token: Refresh token included in responses (omitted when None).
        status_code: Status returned for every request.
    """

    def __init__(
        self,
        expires_in: int | None = 3600,
        refresh_token: str | None = "refresh-1",
        status_code: int = 200,
    ) -> None:
        self.expires_in = expires_in
        self.refresh_token = refresh_token
        self.status_code = status_code
        self.requests: list[dict[str, str]] = []
        self.urls: list[str] = []
        self.authorizations: list[str | None] = []

    @property
    def grant_types(self) -> list[str]:
        return [form.get("grant_type", "") for form in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(dict(parse_qsl(request.content.decode())))
        self.urls.append(str(request.url))
        self.authorizations.append(request.headers.get("Authorization"))

        if self.status_code >= 400:
            return httpx.Response(self.status_code, json={"error": "invalid_grant"})

        payload: dict[str, Any] = {
            "access_token": f"token-{len(self.requests)}",
            "token_type": "Bearer",
        }
        if self.expires_in is not None:
            payload["expires_in"] = self.expires_in
        if self.refresh_token is not None:
            payload["refresh_token"] = self.refresh_token
        return httpx.Response(200, json=payload)


__all__ = ["SAMPLE_CREDENTIALS", "TokenEndpoint"]
