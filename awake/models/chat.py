"""Chat-related models."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field


class AutomationType(StrEnum):
    """Kinds of simulated automation."""

    EMAIL = "email"
    TASK = "task"
    SLACK = "slack"


class AutomationAction(BaseModel):
    """A simulated side effect triggered by a keyword in the message."""

    model_config = ConfigDict(frozen=True)

    type: AutomationType = Field(description="Automation kind")
    message: str = Field(description="Human-readable description of the action")
    icon: str = Field(description="Short glyph shown next to the action")


class ChatRequest(BaseModel):
    """
    Request model for chat endpoint.

    Fields are loosely typed so that empty messages and unknown models are
    rejected by the chat handler as client errors.
    """

    message: str | None = Field(default=None, description="User message to send upstream")
    model: str | None = Field(
        default=None, description="Model selection: auto, gpt, claude or llama"
    )


class ChatResponse(BaseModel):
    """Response model for chat endpoint."""

    id: str = Field(description="Unique identifier of this response")
    content: str = Field(description="Model reply")
    model: str = Field(description="Logical model that was used")
    automations: list[AutomationAction] = Field(
        default_factory=list, description="Simulated automations detected in the message"
    )
