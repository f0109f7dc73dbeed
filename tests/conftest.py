"""Pytest configuration and fixtures."""

import json
import random
from collections.abc import Callable, Iterator
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from awake.core.config import OpenRouterConfig
from awake.main import create_app
from awake.services.chat import ChatHandler
from awake.services.router import ModelRouter

TEST_API_KEY = "sk-or-test-0123456789abcdef"
TEST_BASE_URL = "https://openrouter.test/api/v1"


def completion_payload(content: Any = "Hello from the model") -> dict[str, Any]:
    """Build an OpenRouter-style completion reply."""
    return {
        "id": "gen-123",
        "model": "openai/gpt-4o",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
    }


class UpstreamStub:
    """Records upstream requests and answers them with a configurable responder."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = lambda request: (
            httpx.Response(200, json=completion_payload())
        )

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_body(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)

    def reply_with(self, status_code: int = 200, **kwargs: Any) -> None:
        self.responder = lambda request: httpx.Response(status_code, **kwargs)


@pytest.fixture(autouse=True)
def clear_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests independent of any OpenRouter key in the environment."""
    monkeypatch.delenv("OPENROUTER_API_KEY", raising=False)


@pytest.fixture
def openrouter_config() -> OpenRouterConfig:
    """Create OpenRouter config for testing."""
    return OpenRouterConfig(
        enabled=True,
        base_url=TEST_BASE_URL,
        referer="http://localhost:5000",
        title="AWAKE Meta-AI OS",
        timeout_seconds=5,
    )


@pytest.fixture
def upstream() -> UpstreamStub:
    """Simulated OpenRouter endpoint."""
    return UpstreamStub()


@pytest.fixture
def http_client(upstream: UpstreamStub) -> httpx.AsyncClient:
    """HTTP client whose requests are answered by the upstream stub."""
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def model_router(
    openrouter_config: OpenRouterConfig, http_client: httpx.AsyncClient
) -> ModelRouter:
    """Operational router wired to the upstream stub."""
    return ModelRouter(
        openrouter_config,
        TEST_API_KEY,
        client=http_client,
        rng=random.Random(1234),
    )


@pytest.fixture
def test_app(model_router: ModelRouter) -> Iterator[TestClient]:
    """
    Create a test client whose chat pipeline talks to the upstream stub.

    Yields:
        TestClient for making requests to the app
    """
    app = create_app()
    with TestClient(app) as client:
        app.state.model_router = model_router
        app.state.chat_handler = ChatHandler(model_router)
        yield client


@pytest.fixture
def degraded_app() -> Iterator[TestClient]:
    """Test client started without an OpenRouter key."""
    with TestClient(create_app()) as client:
        yield client
