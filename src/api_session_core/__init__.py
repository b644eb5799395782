"""API Session Core - authenticated httpx clients from a credential set.

Give the factory a base URI and the credential fields for one of six auth
schemes and get back an ``httpx.Client`` that authenticates every request:
- OAuth1 request signing
- OAuth2 with authorization code, password, client credentials or custom
  grants, plus optional refresh
- HTTP Basic, Digest and NTLM
- Bearer tokens

Credentials are validated up front; missing fields raise
``CredentialValidationError`` and no client is built.

Example:
    ```python
    from api_session_core import basic_auth, oauth2, oauth2_grants

    client = basic_auth("https://api.example.com", {"username": "jdoe", "password": "pw"})

    auth = oauth2_grants(
        "https://auth.example.com/oauth/token",
        {"client_id": "app", "client_secret": "s3cret"},
    )
    client = oauth2("https://api.example.com", auth, {"timeout": 10.0})
    ```
"""

from api_session_core.auth import AuthScheme, CredentialSet, CredentialValidationError
from api_session_core.client import ClientConfig
from api_session_core.factory import (
    basic_auth,
    bearer_token,
    build_config,
    create,
    digest,
    ntlm,
    oauth1,
    oauth2,
    oauth2_grants,
)

__version__ = "0.1.0"

__all__ = [
    "AuthScheme",
    "ClientConfig",
    "CredentialSet",
    "CredentialValidationError",
    "__version__",
    "basic_auth",
    "bearer_token",
    "build_config",
    "create",
    "digest",
    "ntlm",
    "oauth1",
    "oauth2",
    "oauth2_grants",
]
