"""Agent domain events."""

from .agent_events import (
    AgentError,
    AssistantMessage,
    SessionInit,
    ToolCompleted,
    ToolStarted,
    TurnCompleted,
    TurnFailed,
)

__all__ = [
    "SessionInit",
    "AssistantMessage",
    "ToolStarted",
    "ToolCompleted",
    "TurnCompleted",
    "TurnFailed",
    "AgentError",
]
