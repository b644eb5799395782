"""Immutable credential mapping handed to the client factory."""

from collections.abc import Iterator, Mapping
from typing import Any


class CredentialSet(Mapping[str, str]):
    """Read-only mapping of credential field names to string values.

    The caller's mapping is copied on construction, so later changes to it
    do not leak into a client that is already built. Values are masked in
    ``repr`` to keep secrets out of logs and tracebacks.

    Example:
        ```python
        creds = CredentialSet({"username": "jdoe", "password": "hunter2"})
        creds["username"]  # "jdoe"
        repr(creds)  # "CredentialSet({'password': '***', 'username': '***'})"
        ```
    """

    __slots__ = ("_fields",)

    def __init__(self, fields: Mapping[str, Any] | None = None, **kwargs: Any):
        merged = dict(fields or {})
        merged.update(kwargs)
        self._fields = {str(key): str(value) for key, value in merged.items()}

    @classmethod
    def coerce(cls, credentials: "Mapping[str, Any] | CredentialSet") -> "CredentialSet":
        """Return ``credentials`` as a CredentialSet, copying only when needed."""
        if isinstance(credentials, cls):
            return credentials
        return cls(credentials)

    def __getitem__(self, key: str) -> str:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __hash__(self) -> int:
        return hash(frozenset(self._fields.items()))

    def __repr__(self) -> str:
        masked = {key: "***" for key in sorted(self._fields)}
        return f"{type(self).__name__}({masked})"

    def without(self, *keys: str) -> "CredentialSet":
        """Return a new set with ``keys`` removed."""
        return CredentialSet({k: v for k, v in self._fields.items() if k not in keys})
