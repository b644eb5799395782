"""Tests for credential sets, schemes and validation."""

import pytest

from api_session_core.auth import (
    AuthScheme,
    CredentialSet,
    CredentialValidationError,
    ValidationResult,
    check_credentials,
    require_credentials,
)


class TestCredentialSet:
    """Test the immutable credential mapping."""

    def test_copies_caller_mapping(self):
        """Test that later changes to the source mapping do not leak in."""
        source = {"username": "jdoe", "password": "pw"}
        creds = CredentialSet(source)
        source["password"] = "changed"

        assert creds["password"] == "pw"

    def test_is_read_only(self):
        """Test that items cannot be assigned."""
        creds = CredentialSet({"token": "abc"})

        with pytest.raises(TypeError):
            creds["token"] = "other"  # type: ignore[index]

    def test_repr_masks_values(self):
        """Test that secrets never appear in repr."""
        creds = CredentialSet({"token": "abc123"})

        assert "abc123" not in repr(creds)
        assert "token" in repr(creds)

    def test_equality_and_hash(self):
        """Test that equal contents compare and hash equal."""
        assert CredentialSet({"a": "1"}) == CredentialSet(a="1")
        assert CredentialSet({"a": "1"}) == {"a": "1"}
        assert hash(CredentialSet({"a": "1"})) == hash(CredentialSet(a="1"))

    def test_coerce_reuses_instances(self):
        """Test that coerce does not copy an existing CredentialSet."""
        creds = CredentialSet({"a": "1"})

        assert CredentialSet.coerce(creds) is creds


class TestAuthScheme:
    """Test scheme field requirements."""

    @pytest.mark.parametrize(
        ("scheme", "required"),
        [
            (AuthScheme.OAUTH1, {"consumer_key", "consumer_secret", "token", "token_secret"}),
            (AuthScheme.OAUTH2, {"client_id", "client_secret"}),
            (AuthScheme.BASIC, {"username", "password"}),
            (AuthScheme.DIGEST, {"username", "password", "digest"}),
            (AuthScheme.NTLM, {"username", "password", "ntlm"}),
            (AuthScheme.BEARER, {"token"}),
        ],
    )
    def test_required_fields(self, scheme, required):
        assert scheme.required_fields == required

    def test_only_oauth2_has_optional_fields(self):
        assert AuthScheme.OAUTH2.optional_fields == {"scope", "state", "redirect_uri", "code"}
        for scheme in AuthScheme:
            if scheme is not AuthScheme.OAUTH2:
                assert scheme.optional_fields == frozenset()

    def test_parse(self):
        assert AuthScheme.parse("Basic") is AuthScheme.BASIC
        assert AuthScheme.parse(AuthScheme.NTLM) is AuthScheme.NTLM

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unsupported auth scheme 'kerberos'"):
            AuthScheme.parse("kerberos")


class TestCheckCredentials:
    """Test the pure credential check."""

    def test_exact_required_fields_are_valid(self):
        result = check_credentials({"username", "password"}, {"username": "u", "password": "p"})

        assert result == ValidationResult.ok()
        assert result

    def test_missing_field_reported(self):
        result = check_credentials({"username", "password"}, {"username": "u"})

        assert not result
        assert result.missing_fields == {"password"}

    def test_empty_credentials_report_all_required(self):
        result = check_credentials({"username", "password"}, {})

        assert not result.valid
        assert result.missing_fields == {"username", "password"}

    def test_empty_credentials_invalid_even_without_requirements(self):
        """Test that an empty set is never valid."""
        result = check_credentials(set(), {})

        assert not result.valid
        assert result.missing_fields == frozenset()

    def test_only_optional_fields_counts_as_empty(self):
        """Test that optional fields are set aside before the emptiness check."""
        result = check_credentials({"client_id"}, {"scope": "read"}, optional={"scope"})

        assert not result.valid
        assert result.missing_fields == {"client_id"}

    def test_optional_field_cannot_satisfy_requirement(self):
        """Test that a field declared optional is not counted as provided."""
        result = check_credentials({"code"}, {"code": "x", "other": "y"}, optional={"code"})

        assert result.missing_fields == {"code"}

    def test_extra_fields_tolerated(self):
        result = check_credentials({"token"}, {"token": "abc", "unexpected": "x"})

        assert result.valid

    def test_keys_not_values_are_compared(self):
        """Test that a value equal to a field name does not satisfy it."""
        result = check_credentials({"password"}, {"username": "password"})

        assert result.missing_fields == {"password"}

    def test_does_not_mutate_input(self):
        provided = {"client_id": "a", "client_secret": "b", "scope": "read"}
        check_credentials({"client_id", "client_secret"}, provided, optional={"scope"})

        assert provided == {"client_id": "a", "client_secret": "b", "scope": "read"}


class TestRequireCredentials:
    """Test scheme-level validation that raises."""

    def test_returns_credential_set(self):
        creds = require_credentials(AuthScheme.BEARER, {"token": "abc"})

        assert isinstance(creds, CredentialSet)
        assert creds["token"] == "abc"

    def test_raises_with_scheme_and_missing_fields(self):
        with pytest.raises(CredentialValidationError) as exc_info:
            require_credentials(AuthScheme.DIGEST, {"username": "u", "password": "p"})

        assert exc_info.value.scheme == "digest auth"
        assert exc_info.value.missing_fields == {"digest"}
        assert exc_info.value.required_fields == ["digest", "password", "username"]
