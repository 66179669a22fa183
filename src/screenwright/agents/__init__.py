"""Writing agents that generate screenplay content through a streaming backend."""

from __future__ import annotations

from .cancellation import CancellationToken
from .client import GenerationClient, HttpGenerationClient
from .models import (
    AgentKind,
    DialogueForm,
    GenerationOutcome,
    GenerationRequest,
    OutcomeStatus,
    SceneDirection,
)
from .runner import AgentRunner
from .session import AgentSession, LoggingNotifier, Notifier

__all__ = [
    "AgentKind",
    "AgentRunner",
    "AgentSession",
    "CancellationToken",
    "DialogueForm",
    "GenerationClient",
    "GenerationOutcome",
    "GenerationRequest",
    "HttpGenerationClient",
    "LoggingNotifier",
    "Notifier",
    "OutcomeStatus",
    "SceneDirection",
]
