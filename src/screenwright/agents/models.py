"""Data models for agent generation requests and outcomes."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AgentKind(str, Enum):
    """Writing agents available in the editor."""

    SCREENWRITER = "screenwriter"
    DIALOGUE = "dialogue"
    DIRECTOR = "director"
    REWRITE = "rewrite"


class OutcomeStatus(str, Enum):
    """How a generation ended."""

    SUCCESS = "success"
    CANCELLED = "cancelled"
    TRANSPORT_ERROR = "transport_error"
    VALIDATION_ERROR = "validation_error"
    EMPTY_CONTENT = "empty_content"


class ConversationMessage(BaseModel):
    """One prior turn sent as conversation history."""

    role: str
    content: str


class GenerationRequest(BaseModel):
    """Request sent to the streaming generation backend."""

    user_prompt: str
    system_prompt: str
    model_id: str
    conversation_history: list[ConversationMessage] = Field(default_factory=list)
    response_schema: dict[str, Any] | None = None
    scene_context: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the backend's camelCase wire format."""
        payload: dict[str, Any] = {
            "userPrompt": self.user_prompt,
            "systemPrompt": self.system_prompt,
            "desiredModelId": self.model_id,
            "conversationHistory": [m.model_dump() for m in self.conversation_history],
            "sceneContext": self.scene_context,
        }
        if self.response_schema is not None:
            payload["responseFormat"] = self.response_schema
        return payload


class GenerationOutcome(BaseModel):
    """Result of one agent run.

    ``content`` is only set on success; failures never carry partial text.
    """

    agent: AgentKind
    status: OutcomeStatus
    content: str = ""
    message: str = ""
    errors: list[str] = Field(default_factory=list)
    raw_response: str = ""

    @property
    def succeeded(self) -> bool:
        """Whether the content may be inserted into the editor."""
        return self.status is OutcomeStatus.SUCCESS


class SceneDirection(BaseModel):
    """One scene the director modal should write."""

    location: str
    scenario: str
    direction: str = ""


class DialogueForm(BaseModel):
    """Inputs of the dialogue modal."""

    scene_heading: str = ""
    act: str = ""
    characters: list[str] = Field(default_factory=list)
    conflict: str = ""
    tone: str = ""
    subtext: str = ""
    character_wants: str = ""
    power_dynamics: str = ""
    specific_lines: str = ""
