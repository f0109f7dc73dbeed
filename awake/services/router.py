"""Model routing against the OpenRouter chat-completion API."""

import random
from collections.abc import Mapping
from typing import Any, Final

import httpx

from awake.core.config import OpenRouterConfig
from awake.core.logging import get_logger
from awake.models.providers import (
    FALLBACK_MODEL,
    MODEL_MAPPINGS,
    SUPPORTED_MODELS,
    BackendHealth,
    ChatOutcome,
    LogicalModel,
    ModelChoice,
    lookup_provider_model,
)

logger = get_logger(__name__)

MAX_TOKENS: Final = 1000
TEMPERATURE: Final = 0.7
NO_RESPONSE_PLACEHOLDER: Final = "No response generated"


class ChatError(Exception):
    """Base exception for chat pipeline errors."""

    pass


class ClientValidationError(ChatError):
    """Raised when a chat request is rejected before routing."""

    pass


class InvalidModelError(ClientValidationError):
    """Raised when the model selection is missing or unknown."""

    def __init__(self, message: str = "Valid model selection is required") -> None:
        super().__init__(message)


class ModelConfigurationError(ChatError):
    """Raised when the router itself is misconfigured."""

    pass


class MissingCredentialError(ModelConfigurationError):
    """Raised when the upstream API key is not available."""

    pass


class BackendError(ChatError):
    """Raised when the upstream completion call fails."""

    def __init__(self, cause: str) -> None:
        super().__init__(f"AI backend unavailable: {cause}")
        self.cause = cause


def resolve_model(model: str | None, rng: random.Random) -> LogicalModel:
    """
    Resolve a model selection to a concrete logical model.

    Args:
        model: Requested model (auto, gpt, claude or llama)
        rng: Random source used for auto selection

    Returns:
        Logical model to route to

    Raises:
        InvalidModelError: If the selection is not recognized
    """
    try:
        choice = ModelChoice(model)
    except ValueError as exc:
        raise InvalidModelError() from exc

    if choice is ModelChoice.AUTO:
        return rng.choice(SUPPORTED_MODELS)
    return LogicalModel(choice.value)


def _extract_content(response: httpx.Response) -> str:
    """Pull the first completion's text out of an upstream reply."""
    try:
        data: Any = response.json()
    except ValueError as exc:
        raise BackendError(f"Malformed upstream payload: {exc}") from exc

    choices = data.get("choices") if isinstance(data, dict) else None
    if not isinstance(choices, list):
        raise BackendError("Malformed upstream payload: missing choices")
    if not choices:
        return NO_RESPONSE_PLACEHOLDER

    first = choices[0]
    if not isinstance(first, dict):
        raise BackendError("Malformed upstream payload: choice is not an object")

    message = first.get("message")
    content = message.get("content") if isinstance(message, dict) else None
    if not isinstance(content, str) or not content:
        return NO_RESPONSE_PLACEHOLDER
    return content


class ModelRouter:
    """
    Routes chat messages to OpenRouter.

    Resolves the caller's model choice, issues exactly one completion
    request and normalizes the reply. Failures surface as BackendError;
    there are no retries.
    """

    available = True

    def __init__(
        self,
        config: OpenRouterConfig,
        api_key: str | None,
        *,
        client: httpx.AsyncClient | None = None,
        rng: random.Random | None = None,
        mappings: Mapping[str, str] = MODEL_MAPPINGS,
    ) -> None:
        """
        Initialize the router.

        Args:
            config: OpenRouter configuration
            api_key: OpenRouter API key
            client: HTTP client to use; one is created (and owned) if omitted
            rng: Random source for auto selection
            mappings: Logical to provider model table

        Raises:
            MissingCredentialError: If no API key is given
            ModelConfigurationError: If the origin or product header is empty
        """
        if not api_key:
            raise MissingCredentialError(
                f"OpenRouter API key is required. Set the {config.api_key_env} "
                "environment variable."
            )
        if not config.referer or not config.title:
            raise ModelConfigurationError("OpenRouter referer and title must be configured")

        self.config = config
        self._endpoint = f"{config.base_url.rstrip('/')}/chat/completions"
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": config.referer,
            "X-Title": config.title,
        }
        self._mappings = mappings
        self._rng = rng or random.Random()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=config.timeout_seconds)

        logger.info(
            "OpenRouter router initialized",
            extra={"base_url": config.base_url, "models": [str(key) for key in mappings]},
        )

    async def chat(self, message: str, model: str) -> ChatOutcome:
        """
        Send a single-turn message upstream.

        Args:
            message: User message
            model: Model selection (auto, gpt, claude or llama)

        Returns:
            Reply content and the logical model that produced it

        Raises:
            InvalidModelError: If the model selection is not recognized
            ModelConfigurationError: If the model has no upstream mapping
            BackendError: If the upstream call fails
        """
        selected = resolve_model(model, self._rng)
        provider_model = lookup_provider_model(selected, self._mappings)
        if provider_model is None:
            raise ModelConfigurationError(f"Unsupported model: {selected.value}")

        payload = {
            "model": provider_model,
            "messages": [{"role": "user", "content": message}],
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        }

        logger.info(
            "Sending completion request",
            extra={
                "requested_model": str(model),
                "model": selected.value,
                "provider_model": provider_model,
            },
        )

        try:
            response = await self._client.post(self._endpoint, json=payload, headers=self._headers)
        except httpx.HTTPError as exc:
            cause = str(exc) or type(exc).__name__
            logger.warning("Upstream request failed", extra={"error": cause})
            raise BackendError(cause) from exc

        if not response.is_success:
            logger.warning(
                "Upstream returned error status",
                extra={"status_code": response.status_code},
            )
            raise BackendError(f"OpenRouter API error: {response.status_code} - {response.text}")

        content = _extract_content(response)
        return ChatOutcome(content=content, model_used=selected.value)

    def health(self) -> BackendHealth:
        """Report that the backend is configured."""
        return BackendHealth(
            available=True,
            api_key_present=True,
            reason="Backend is ready",
            models={str(key): value for key, value in self._mappings.items()},
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this router created it."""
        if self._owns_client:
            await self._client.aclose()


class DegradedModelRouter:
    """
    Stand-in router used when the backend cannot be configured.

    Answers every valid chat request with a fixed "service unavailable"
    reply so the rest of the service keeps working.
    """

    available = False

    def __init__(self, reason: str, api_key_present: bool = False) -> None:
        """
        Initialize the degraded router.

        Args:
            reason: Why the backend could not be configured
            api_key_present: Whether the backend credential was found
        """
        self.reason = reason
        self.api_key_present = api_key_present
        self._rng = random.Random()

    async def chat(self, message: str, model: str) -> ChatOutcome:
        """Return the unavailable reply for a valid model selection."""
        resolve_model(model, self._rng)
        logger.warning("Using degraded router", extra={"reason": self.reason})
        return ChatOutcome(
            content=(
                "Service temporarily unavailable. Please check your API configuration. "
                f"Error: {self.reason}"
            ),
            model_used=FALLBACK_MODEL,
        )

    def health(self) -> BackendHealth:
        """
        Report that the backend is unavailable.

        Returns:
            Backend health carrying the degradation reason
        """
        return BackendHealth(
            available=False, api_key_present=self.api_key_present, reason=self.reason
        )

    async def aclose(self) -> None:
        """Nothing to release; no HTTP client is held."""
        return None


ChatRouter = ModelRouter | DegradedModelRouter


def create_model_router(
    config: OpenRouterConfig, *, client: httpx.AsyncClient | None = None
) -> ChatRouter:
    """
    Build the router for the application.

    Falls back to a DegradedModelRouter when the backend is disabled or
    cannot be configured, instead of failing startup.

    Args:
        config: OpenRouter configuration
        client: Optional HTTP client passed to the operational router

    Returns:
        Operational or degraded router
    """
    if not config.enabled:
        logger.warning("OpenRouter backend disabled, using degraded router")
        return DegradedModelRouter(
            "OpenRouter backend is disabled",
            api_key_present=config.get_api_key() is not None,
        )

    try:
        return ModelRouter(config, config.get_api_key(), client=client)
    except ModelConfigurationError as exc:
        logger.error(
            "Failed to initialize OpenRouter router, using degraded router",
            extra={"error": str(exc)},
        )
        return DegradedModelRouter(str(exc), api_key_present=config.get_api_key() is not None)
