"""Chat endpoint."""

from fastapi import APIRouter, Depends, HTTPException, Request

from awake.core.logging import get_logger
from awake.models.chat import ChatRequest, ChatResponse
from awake.services.chat import ChatHandler
from awake.services.router import BackendError, ClientValidationError, ModelConfigurationError

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["chat"])


def get_chat_handler(request: Request) -> ChatHandler:
    """Return the chat handler created during application startup."""
    return request.app.state.chat_handler


@router.post("/chat", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    handler: ChatHandler = Depends(get_chat_handler),
) -> ChatResponse:
    """
    Send a message to the selected model and detect simulated automations.

    Args:
        payload: Chat request with message and model selection
        handler: Chat handler (injected)

    Returns:
        Response envelope with id, content, model and automations

    Raises:
        HTTPException: 400 for invalid input, 502 when the backend fails,
            500 for anything else
    """
    try:
        return await handler.submit(message=payload.message, model=payload.model)

    except ClientValidationError as e:
        logger.warning("Chat request rejected", extra={"error": str(e)})
        raise HTTPException(status_code=400, detail=str(e)) from e

    except BackendError as e:
        logger.error("AI backend unavailable", extra={"error": e.cause})
        raise HTTPException(status_code=502, detail=str(e)) from e

    except ModelConfigurationError as e:
        logger.error("Model configuration error", extra={"error": str(e)}, exc_info=True)
        raise HTTPException(status_code=500, detail="Model configuration error") from e

    except Exception as e:
        logger.error(
            "Chat request failed",
            extra={"error": str(e)},
            exc_info=True,
        )
        raise HTTPException(status_code=500, detail="Chat request failed") from e
