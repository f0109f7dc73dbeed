"""Tests for chat handling."""

import pytest
from conftest import UpstreamStub, completion_payload
from fastapi.testclient import TestClient
from pytest_mock import MockerFixture

from awake.models.chat import ChatResponse
from awake.services.chat import ChatHandler, EmptyMessageError
from awake.services.router import (
    BackendError,
    DegradedModelRouter,
    InvalidModelError,
    ModelConfigurationError,
    ModelRouter,
)

CONCRETE_MODELS = {"gpt", "claude", "llama"}


@pytest.fixture
def chat_handler(model_router: ModelRouter) -> ChatHandler:
    """Create chat handler for testing."""
    return ChatHandler(model_router)


class TestChatHandler:
    """Test ChatHandler orchestration."""

    @pytest.mark.asyncio
    async def test_submit_builds_envelope(
        self, chat_handler: ChatHandler, upstream: UpstreamStub
    ) -> None:
        """Test a successful submission."""
        response = await chat_handler.submit("Please send an email to the team", "gpt")

        assert isinstance(response, ChatResponse)
        assert response.content == "Hello from the model"
        assert response.model == "gpt"
        assert [action.type for action in response.automations] == ["email"]
        assert response.id
        assert upstream.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("model", ["auto", "gpt", "claude", "llama"])
    async def test_every_model_yields_concrete_model_and_content(
        self, chat_handler: ChatHandler, upstream: UpstreamStub, model: str
    ) -> None:
        """Test the response model is never auto and content is never empty."""
        upstream.reply_with(200, json=completion_payload(content=""))

        response = await chat_handler.submit("Hello", model)

        assert response.model in CONCRETE_MODELS
        assert response.content

    @pytest.mark.asyncio
    async def test_explicit_model_is_stable(self, chat_handler: ChatHandler) -> None:
        """Test repeated requests for one model resolve identically."""
        models = {(await chat_handler.submit("Hello", "llama")).model for _ in range(10)}
        assert models == {"llama"}

    @pytest.mark.asyncio
    async def test_auto_spreads_across_models(self, chat_handler: ChatHandler) -> None:
        """Test auto eventually reaches every concrete model."""
        models = {(await chat_handler.submit("Hello", "auto")).model for _ in range(60)}
        assert models == CONCRETE_MODELS

    @pytest.mark.asyncio
    async def test_response_ids_are_unique(self, chat_handler: ChatHandler) -> None:
        ids = [(await chat_handler.submit("Hello", "gpt")).id for _ in range(25)]
        assert len(set(ids)) == len(ids)

    @pytest.mark.asyncio
    async def test_automations_use_original_message(
        self, chat_handler: ChatHandler, upstream: UpstreamStub
    ) -> None:
        """Test detection ignores the model's reply."""
        upstream.reply_with(200, json=completion_payload(content="I posted it to Slack"))

        response = await chat_handler.submit("Create a task", "claude")

        assert [action.type for action in response.automations] == ["task"]

    @pytest.mark.asyncio
    async def test_message_sent_untrimmed(
        self, chat_handler: ChatHandler, upstream: UpstreamStub
    ) -> None:
        await chat_handler.submit("  Hello  ", "gpt")
        assert upstream.last_body()["messages"] == [{"role": "user", "content": "  Hello  "}]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   ", "\n\t", None])
    async def test_blank_message_rejected_before_upstream(
        self, chat_handler: ChatHandler, upstream: UpstreamStub, message: str | None
    ) -> None:
        """Test blank messages never reach the upstream."""
        with pytest.raises(EmptyMessageError, match="Message is required"):
            await chat_handler.submit(message, "gpt")

        assert upstream.call_count == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("model", ["gpt5", "", "GPT", None])
    async def test_invalid_model_rejected_before_upstream(
        self, chat_handler: ChatHandler, upstream: UpstreamStub, model: str | None
    ) -> None:
        """Test unknown models never reach the upstream."""
        with pytest.raises(InvalidModelError, match="Valid model selection is required"):
            await chat_handler.submit("Hello", model)

        assert upstream.call_count == 0

    @pytest.mark.asyncio
    async def test_backend_failure_skips_detection(
        self, model_router: ModelRouter, upstream: UpstreamStub, mocker: MockerFixture
    ) -> None:
        """Test a failed upstream call propagates and automations are not detected."""
        upstream.reply_with(500, text="boom")
        detector = mocker.MagicMock(return_value=[])
        handler = ChatHandler(model_router, detector=detector)

        with pytest.raises(BackendError):
            await handler.submit("send an email", "gpt")

        detector.assert_not_called()
        assert upstream.call_count == 1

    @pytest.mark.asyncio
    async def test_uses_injected_id_factory(self, model_router: ModelRouter) -> None:
        handler = ChatHandler(model_router, id_factory=lambda: "fixed-id")
        response = await handler.submit("Hello", "gpt")
        assert response.id == "fixed-id"

    @pytest.mark.asyncio
    async def test_degraded_router(self) -> None:
        """Test the handler works unchanged with the degraded router."""
        handler = ChatHandler(DegradedModelRouter("missing key"))

        response = await handler.submit("Send a slack message", "auto")

        assert response.model == "fallback"
        assert "Service temporarily unavailable" in response.content
        assert [action.type for action in response.automations] == ["slack"]


class TestChatEndpoint:
    """Test chat API endpoint."""

    def test_chat_endpoint_success(self, test_app: TestClient, upstream: UpstreamStub) -> None:
        """Test successful chat request."""
        response = test_app.post(
            "/api/chat", json={"message": "email and slack please", "model": "claude"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["content"] == "Hello from the model"
        assert data["model"] == "claude"
        assert [item["type"] for item in data["automations"]] == ["email", "slack"]
        assert data["automations"][0] == {
            "type": "email",
            "message": "Action simulated: Email sent!",
            "icon": "📧",
        }
        assert data["id"]
        assert "X-Request-ID" in response.headers
        assert upstream.call_count == 1

    def test_chat_endpoint_auto(self, test_app: TestClient) -> None:
        response = test_app.post("/api/chat", json={"message": "Hi", "model": "auto"})

        assert response.status_code == 200
        assert response.json()["model"] in CONCRETE_MODELS

    def test_chat_endpoint_ids_are_unique(self, test_app: TestClient) -> None:
        ids = {
            test_app.post("/api/chat", json={"message": "Hi", "model": "gpt"}).json()["id"]
            for _ in range(5)
        }
        assert len(ids) == 5

    @pytest.mark.parametrize(
        ("body", "detail"),
        [
            ({"message": "   ", "model": "gpt"}, "Message is required"),
            ({"model": "gpt"}, "Message is required"),
            ({"message": "Hello", "model": "gpt5"}, "Valid model selection is required"),
            ({"message": "Hello"}, "Valid model selection is required"),
            ({}, "Message is required"),
        ],
    )
    def test_chat_endpoint_client_errors(
        self, test_app: TestClient, upstream: UpstreamStub, body: dict, detail: str
    ) -> None:
        """Test invalid input is a 400 and never reaches the upstream."""
        response = test_app.post("/api/chat", json=body)

        assert response.status_code == 400
        assert response.json()["detail"] == detail
        assert upstream.call_count == 0

    def test_chat_endpoint_backend_error(
        self, test_app: TestClient, upstream: UpstreamStub
    ) -> None:
        """Test upstream failures map to 502."""
        upstream.reply_with(429, text="rate limited")

        response = test_app.post("/api/chat", json={"message": "send an email", "model": "gpt"})

        assert response.status_code == 502
        detail = response.json()["detail"]
        assert detail.startswith("AI backend unavailable")
        assert "429" in detail
        assert upstream.call_count == 1

    def test_chat_endpoint_configuration_error(
        self, test_app: TestClient, mocker: MockerFixture
    ) -> None:
        """Test router misconfiguration maps to 500."""
        handler = test_app.app.state.chat_handler
        mocker.patch.object(
            handler.router, "chat", side_effect=ModelConfigurationError("Unsupported model: gpt")
        )

        response = test_app.post("/api/chat", json={"message": "Hi", "model": "gpt"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Model configuration error"

    def test_chat_endpoint_server_error(self, test_app: TestClient, mocker: MockerFixture) -> None:
        """Test unexpected failures map to 500."""
        mocker.patch.object(
            test_app.app.state.chat_handler, "submit", side_effect=Exception("Something broke")
        )

        response = test_app.post("/api/chat", json={"message": "Hi", "model": "gpt"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Chat request failed"

    def test_chat_endpoint_degraded(self, degraded_app: TestClient) -> None:
        """Test the service keeps answering without a backend key."""
        response = degraded_app.post("/api/chat", json={"message": "Hi", "model": "auto"})

        assert response.status_code == 200
        data = response.json()
        assert data["model"] == "fallback"
        assert "OPENROUTER_API_KEY" in data["content"]
        assert data["automations"] == []
