"""Client configuration assembled by the auth factory."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClientConfig:
    """Everything needed to construct an authenticated ``httpx.Client``.

    ``request_defaults`` are opaque ``httpx.Client`` keyword arguments merged
    last, so they win over ``base_url``, ``auth`` and ``headers`` when they
    set the same key.

    Attributes:
        base_uri: Base URI every relative request is resolved against.
        auth: The auth handler attached to the client, if any.
        headers: Default headers injected by the auth scheme.
        request_defaults: Extra ``httpx.Client`` options from the caller.
    """

    base_uri: str
    auth: httpx.Auth | None = None
    headers: Mapping[str, str] = field(default_factory=dict)
    request_defaults: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.base_uri, str) or not self.base_uri.strip():
            raise ValueError("base_uri must be a non-empty string")

    def client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``httpx.Client``, request defaults last."""
        kwargs: dict[str, Any] = {"base_url": self.base_uri}
        if self.auth is not None:
            kwargs["auth"] = self.auth
        if self.headers:
            kwargs["headers"] = dict(self.headers)
        kwargs.update(self.request_defaults)
        return kwargs

    def create_client(self) -> httpx.Client:
        """Build the configured client."""
        kwargs = self.client_kwargs()
        logger.debug(f"Creating client for {kwargs['base_url']} with options: {sorted(kwargs)}")
        return httpx.Client(**kwargs)
