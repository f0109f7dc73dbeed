"""Chat request handling."""

from collections.abc import Callable

from awake.core.identifiers import generate_response_id
from awake.core.logging import get_logger
from awake.models.chat import AutomationAction, ChatResponse
from awake.models.providers import ModelChoice
from awake.services.automations import detect_automations
from awake.services.router import ChatRouter, ClientValidationError, InvalidModelError

logger = get_logger(__name__)

_VALID_MODELS = frozenset(choice.value for choice in ModelChoice)


class EmptyMessageError(ClientValidationError):
    """Raised when the message is missing or blank."""

    def __init__(self, message: str = "Message is required") -> None:
        super().__init__(message)


class ChatHandler:
    """
    Validates chat requests, routes them and assembles the response.

    The router runs first; automations are detected on the original message
    only after the router succeeds.
    """

    def __init__(
        self,
        router: ChatRouter,
        detector: Callable[[str], list[AutomationAction]] = detect_automations,
        id_factory: Callable[[], str] = generate_response_id,
    ) -> None:
        """
        Initialize the chat handler.

        Args:
            router: Operational or degraded model router
            detector: Automation detector applied to the message
            id_factory: Generator for response identifiers
        """
        self.router = router
        self._detector = detector
        self._id_factory = id_factory

    @staticmethod
    def validate(message: str | None, model: str | None) -> tuple[str, str]:
        """
        Reject requests that must not reach the router.

        Returns:
            The validated message and model

        Raises:
            EmptyMessageError: If the message is missing or blank
            InvalidModelError: If the model is missing or unknown
        """
        if message is None or not message.strip():
            raise EmptyMessageError()
        if model is None or model not in _VALID_MODELS:
            raise InvalidModelError()
        return message, model

    async def submit(self, message: str | None, model: str | None) -> ChatResponse:
        """
        Process a chat submission.

        Args:
            message: User message
            model: Model selection (auto, gpt, claude or llama)

        Returns:
            Response envelope with content, model used and automations

        Raises:
            ClientValidationError: If the request is invalid
            BackendError: If the upstream call fails
        """
        message, model = self.validate(message, model)

        logger.info(
            "Processing chat message",
            extra={"requested_model": model, "message_length": len(message)},
        )

        outcome = await self.router.chat(message, model)
        automations = self._detector(message)

        response = ChatResponse(
            id=self._id_factory(),
            content=outcome.content,
            model=outcome.model_used,
            automations=automations,
        )

        logger.info(
            "Chat message processed successfully",
            extra={
                "model": response.model,
                "content_length": len(response.content),
                "automations_count": len(automations),
            },
        )

        return response
