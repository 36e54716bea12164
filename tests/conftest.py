"""
Pytest configuration and fixtures for testing.

This module provides:
- A recording backend double built on httpx.MockTransport
- A fake meme model returning canned LLM text
- A FastAPI test client wired to both through dependency overrides
"""

import os
from typing import Callable, Generator, List

import httpx
import pytest

# Set test environment before importing app modules
os.environ["BACKEND_URL"] = "http://backend.test"
os.environ.pop("GEMINI_API_KEY", None)

from fastapi.testclient import TestClient

from src.api import app, get_backend_client, get_event_sink, get_meme_model
from src.clients import BackendClient
from src.events import RecordingSink
from src.outbound import MemeInferenceRequest


# =============================================================================
# EXTERNAL COLLABORATOR DOUBLES
# =============================================================================


class FakeBackend:
    """Records every request and answers with a configurable response."""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={})
        )

    def respond_with(self, status_code: int = 200, **kwargs) -> None:
        self.responder = lambda request: httpx.Response(status_code, **kwargs)

    def fail_with(self, exc: Exception) -> None:
        def _raise(request):
            raise exc
        self.responder = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)


class FakeMemeModel:
    """Returns canned model output and remembers the inference requests."""

    def __init__(self, text: str = ""):
        self.text = text
        self.requests: List[MemeInferenceRequest] = []

    def generate(self, req: MemeInferenceRequest) -> str:
        self.requests.append(req)
        return self.text


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def fake_meme_model() -> FakeMemeModel:
    return FakeMemeModel()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def backend_client(fake_backend: FakeBackend) -> Generator[BackendClient, None, None]:
    client = BackendClient("http://backend.test", transport=httpx.MockTransport(fake_backend))
    yield client
    client.close()


@pytest.fixture
def client(backend_client, fake_meme_model, sink) -> Generator[TestClient, None, None]:
    """Create a synchronous test client with the collaborators doubled."""
    app.dependency_overrides[get_backend_client] = lambda: backend_client
    app.dependency_overrides[get_meme_model] = lambda: fake_meme_model
    app.dependency_overrides[get_event_sink] = lambda: sink
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()
