"""Pytest configuration and fixtures."""

from typing import Callable, List

import httpx
import pytest
from fastapi.testclient import TestClient

from relaygate.app import create_app
from relaygate.config import Settings
from relaygate.services import RelayService


class FakeUpstream:
    """Upstream double recording every request it receives."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.handler: Callable[[httpx.Request], httpx.Response] = lambda request: (
            httpx.Response(
                200,
                headers={"content-type": "text/plain"},
                stream=httpx.ByteStream(b"ok"),
            )
        )

    @property
    def calls(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.handler(request)


@pytest.fixture
def upstream():
    """Fake upstream server."""
    return FakeUpstream()


@pytest.fixture
def http_client(upstream):
    """Upstream client routed to the fake upstream."""
    return httpx.AsyncClient(
        transport=httpx.MockTransport(upstream),
        follow_redirects=False,
        max_redirects=5,
    )


@pytest.fixture
def test_settings():
    """Settings for testing."""
    return Settings(allowed_origins=["example.com"], debug=True)


@pytest.fixture
def relay_service(http_client):
    """Relay service using the fake upstream."""
    return RelayService(http_client)


@pytest.fixture
def client(test_settings, http_client):
    """FastAPI test client with the fake upstream wired in."""
    app = create_app(test_settings, http_client=http_client)
    with TestClient(app) as test_client:
        yield test_client
