"""Supported authentication schemes and their credential requirements."""

from enum import Enum


class AuthScheme(str, Enum):
    """The six authentication schemes the client factory can build.

    Each member carries the credential fields it requires and, for OAuth2,
    the fields it accepts on top of those.
    """

    OAUTH1 = "oauth1"
    OAUTH2 = "oauth2"
    BASIC = "basic"
    DIGEST = "digest"
    NTLM = "ntlm"
    BEARER = "bearer"

    @property
    def required_fields(self) -> frozenset[str]:
        return _REQUIRED_FIELDS[self]

    @property
    def optional_fields(self) -> frozenset[str]:
        return _OPTIONAL_FIELDS.get(self, frozenset())

    @property
    def display_name(self) -> str:
        """Human-readable name used in error messages."""
        return _DISPLAY_NAMES[self]

    @classmethod
    def parse(cls, value: "AuthScheme | str") -> "AuthScheme":
        """Coerce a scheme name (case-insensitive) to an AuthScheme.

        Raises:
            ValueError: If ``value`` names no supported scheme.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            supported = ", ".join(member.value for member in cls)
            raise ValueError(f"Unsupported auth scheme '{value}' (expected one of: {supported})") from None


_REQUIRED_FIELDS: dict[AuthScheme, frozenset[str]] = {
    AuthScheme.OAUTH1: frozenset({"consumer_key", "consumer_secret", "token", "token_secret"}),
    AuthScheme.OAUTH2: frozenset({"client_id", "client_secret"}),
    AuthScheme.BASIC: frozenset({"username", "password"}),
    AuthScheme.DIGEST: frozenset({"username", "password", "digest"}),
    AuthScheme.NTLM: frozenset({"username", "password", "ntlm"}),
    AuthScheme.BEARER: frozenset({"token"}),
}

_OPTIONAL_FIELDS: dict[AuthScheme, frozenset[str]] = {
    AuthScheme.OAUTH2: frozenset({"scope", "state", "redirect_uri", "code"}),
}

_DISPLAY_NAMES: dict[AuthScheme, str] = {
    AuthScheme.OAUTH1: "oAuth1",
    AuthScheme.OAUTH2: "oAuth2",
    AuthScheme.BASIC: "basic auth",
    AuthScheme.DIGEST: "digest auth",
    AuthScheme.NTLM: "ntlm auth",
    AuthScheme.BEARER: "bearer token",
}
