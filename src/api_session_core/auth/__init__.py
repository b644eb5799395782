"""Authentication components for the client factory.

This package provides:
- Credential sets and their validation per auth scheme
- OAuth2 grant types and grant selection
- httpx auth handlers for OAuth1 signing and OAuth2 tokens
- Multi-source credential resolution (value → env → .env → default)

Example:
    ```python
    from api_session_core.auth import AuthScheme, check_credentials

    result = check_credentials(AuthScheme.BASIC.required_fields, {"username": "jdoe"})
    assert result.missing_fields == {"password"}
    ```
"""

from api_session_core.auth.credential_set import CredentialSet
from api_session_core.auth.credentials import CredentialResolver
from api_session_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
    CredentialValidationError,
)
from api_session_core.auth.grants import (
    AuthorizationCodeGrant,
    ClientCredentialsGrant,
    GrantKind,
    GrantType,
    PasswordCredentialsGrant,
    RefreshTokenGrant,
    grant_kind,
    resolve_grant_type,
)
from api_session_core.auth.oauth1 import OAuth1Auth
from api_session_core.auth.oauth2 import OAuth2Auth
from api_session_core.auth.schemes import AuthScheme
from api_session_core.auth.validation import ValidationResult, check_credentials, require_credentials

__all__ = [
    "AuthScheme",
    "AuthorizationCodeGrant",
    "ClientCredentialsGrant",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
    "CredentialSet",
    "CredentialValidationError",
    "GrantKind",
    "GrantType",
    "OAuth1Auth",
    "OAuth2Auth",
    "PasswordCredentialsGrant",
    "RefreshTokenGrant",
    "ValidationResult",
    "check_credentials",
    "grant_kind",
    "require_credentials",
    "resolve_grant_type",
]
