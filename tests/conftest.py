"""Pytest configuration - loads .env for integration tests and fakes the network for unit tests."""

import io
import json
import urllib.error
import urllib.request
from email.message import Message
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

TEST_API_KEY = "abc123-us18"


class FakeResponse:
    """Stand-in for the object returned by urllib.request.urlopen."""

    def __init__(self, body: bytes, status: int = 200):
        self._body = body
        self.status = status

    def read(self) -> bytes:
        return self._body

    def __enter__(self):
        return self

    def __exit__(self, *args):
        return False


class FakeTransport:
    """Records outgoing requests and replays a canned response or error."""

    def __init__(self):
        self.requests: list[urllib.request.Request] = []
        self.timeouts: list[float] = []
        self.body: bytes = b"{}"
        self.status = 200
        self.error: Exception | None = None

    def respond(self, data: Any, status: int = 200) -> None:
        self.body = data if isinstance(data, bytes) else json.dumps(data).encode("utf-8")
        self.status = status

    def fail(self, error: Exception) -> None:
        self.error = error

    def __call__(self, req: urllib.request.Request, timeout: float | None = None) -> FakeResponse:
        self.requests.append(req)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        if self.status >= 400:
            raise urllib.error.HTTPError(req.full_url, self.status, "error", Message(), io.BytesIO(self.body))
        return FakeResponse(self.body, self.status)

    @property
    def last(self) -> urllib.request.Request:
        return self.requests[-1]


@pytest.fixture
def transport(monkeypatch):
    """Replace urlopen with a recording fake."""
    fake = FakeTransport()
    monkeypatch.setattr(urllib.request, "urlopen", fake)
    return fake


@pytest.fixture
def api_key(monkeypatch):
    """Configure a well-formed credential through the environment."""
    monkeypatch.setenv("MAILCHIMP_API_KEY", TEST_API_KEY)
    monkeypatch.delenv("MAILCHIMP_TIMEOUT", raising=False)
    return TEST_API_KEY


@pytest.fixture
def no_api_key(monkeypatch):
    """Make sure no credential leaks in from the environment."""
    monkeypatch.delenv("MAILCHIMP_API_KEY", raising=False)
    monkeypatch.delenv("MAILCHIMP_TIMEOUT", raising=False)
