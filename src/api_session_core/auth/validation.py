"""Credential set validation against scheme requirements.

Validation is asymmetric: it flags required fields that are missing but
tolerates fields nobody asked for. An empty credential set (after optional
fields are set aside) is never valid.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from api_session_core.auth.credential_set import CredentialSet
from api_session_core.auth.exceptions import CredentialValidationError
from api_session_core.auth.schemes import AuthScheme


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a credential check.

    Attributes:
        valid: Whether the credential set satisfies the requirements.
        missing_fields: Required fields absent from the set.
    """

    valid: bool
    missing_fields: frozenset[str] = frozenset()

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def invalid(cls, missing_fields: Iterable[str]) -> "ValidationResult":
        return cls(valid=False, missing_fields=frozenset(missing_fields))

    def __bool__(self) -> bool:
        return self.valid


def check_credentials(
    required: Iterable[str],
    provided: Mapping[str, str],
    optional: Iterable[str] = (),
) -> ValidationResult:
    """Check that ``provided`` covers every ``required`` field.

    Args:
        required: Field names that must be present.
        provided: The candidate credential mapping. Not modified.
        optional: Field names set aside before the check.

    Returns:
        ``ValidationResult.ok()`` or an invalid result listing missing fields.
        When nothing remains after removing optional fields, every required
        field is reported missing.
    """
    required = frozenset(required)
    remaining = CredentialSet.coerce(provided).without(*optional)

    if not remaining:
        return ValidationResult.invalid(required)

    missing = required.difference(remaining)
    if missing:
        return ValidationResult.invalid(missing)
    return ValidationResult.ok()


def require_credentials(
    scheme: AuthScheme,
    provided: Mapping[str, str],
    required: Iterable[str] | None = None,
    optional: Iterable[str] | None = None,
) -> CredentialSet:
    """Validate ``provided`` for ``scheme`` and return it as a CredentialSet.

    ``required`` and ``optional`` default to the scheme's own field lists.

    Raises:
        CredentialValidationError: If any required field is missing.
    """
    required = scheme.required_fields if required is None else frozenset(required)
    optional = scheme.optional_fields if optional is None else frozenset(optional)
    credentials = CredentialSet.coerce(provided)

    result = check_credentials(required, credentials, optional)
    if not result:
        raise CredentialValidationError(scheme.display_name, required, result.missing_fields)
    return credentials
