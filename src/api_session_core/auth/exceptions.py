"""Custom exceptions for credential resolution and validation.

This module defines exceptions used throughout the authentication system,
from resolving credential values to validating a credential set against
the requirements of an authentication scheme.

Example:
    ```python
    from api_session_core.auth.exceptions import CredentialValidationError

    try:
        client = basic_auth("https://api.example.com", {"username": "jdoe"})
    except CredentialValidationError as e:
        print(f"{e.scheme} is missing: {sorted(e.missing_fields)}")
    ```
"""

from collections.abc import Iterable


class CredentialError(Exception):
    """Base exception for credential-related errors.

    All credential-specific exceptions inherit from this class,
    making it easy to catch any credential-related error.
    """

    pass


class CredentialNotFoundError(CredentialError):
    """Raised when a required credential cannot be resolved.

    Attributes:
        env_var_name: The environment variable name that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """Raised when a credential file cannot be read."""

    pass


class CredentialValidationError(CredentialError):
    """Raised when a credential set does not satisfy an auth scheme.

    The message names the scheme, the exact list of required fields and the
    fields that were missing. A failed validation is always fatal to the
    client build that triggered it.

    Attributes:
        scheme: Display name of the auth scheme (e.g. ``"basic auth"``).
        required_fields: Fields the scheme requires, sorted.
        missing_fields: Required fields absent from the credential set.
    """

    def __init__(
        self,
        scheme: str,
        required_fields: Iterable[str],
        missing_fields: Iterable[str],
    ):
        self.scheme = scheme
        self.required_fields = sorted(required_fields)
        self.missing_fields = frozenset(missing_fields)
        super().__init__(
            f"{scheme} credentials must include exactly: {self.required_fields}; "
            f"missing: {sorted(self.missing_fields)}"
        )
