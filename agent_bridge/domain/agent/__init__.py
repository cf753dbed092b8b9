"""Agent domain module."""

from .entities.agent_run import AgentRun, RunStatus, SessionId
from .events.agent_events import (
    AgentError,
    AssistantMessage,
    SessionInit,
    ToolCompleted,
    ToolStarted,
    TurnCompleted,
    TurnFailed,
)
from .value_objects.agent_mode import AgentMode
from .value_objects.control import ControlRequest, ControlResponse, is_interactive_tool
from .value_objects.start_config import AgentStartConfig
from .value_objects.token_usage import TokenUsage

__all__ = [
    "AgentRun",
    "RunStatus",
    "SessionId",
    "AgentMode",
    "AgentStartConfig",
    "TokenUsage",
    "ControlRequest",
    "ControlResponse",
    "is_interactive_tool",
    "SessionInit",
    "AssistantMessage",
    "ToolStarted",
    "ToolCompleted",
    "TurnCompleted",
    "TurnFailed",
    "AgentError",
]
