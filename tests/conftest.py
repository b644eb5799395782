"""Pytest configuration and shared fixtures for api-session-core tests."""

import httpx
import pytest

from api_session_core.testing import SAMPLE_CREDENTIALS, TokenEndpoint


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear test-related environment variables before each test.

    This prevents test pollution when testing credential resolution.
    """
    import os

    test_prefixes = ("TEST_", "API_", "CLIENT_", "TIMESHEETS_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def sample_credentials():
    """Known-good credential sets keyed by scheme value."""
    return {scheme: dict(fields) for scheme, fields in SAMPLE_CREDENTIALS.items()}


@pytest.fixture
def token_endpoint():
    """Fake OAuth2 token endpoint."""
    return TokenEndpoint()


@pytest.fixture
def token_transport(token_endpoint):
    """Handshake client options routing token requests to ``token_endpoint``."""
    return {"transport": httpx.MockTransport(token_endpoint)}


@pytest.fixture
def api_requests():
    """Requests received by the fake API behind ``api_transport``."""
    return []


@pytest.fixture
def api_transport(api_requests):
    """Mock API that records requests and answers 200 with an empty JSON object."""

    def handler(request: httpx.Request) -> httpx.Response:
        api_requests.append(request)
        return httpx.Response(200, json={})

    return httpx.MockTransport(handler)
