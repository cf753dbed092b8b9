"""Agent domain events.

These are the only events a host ever sees from a session. Wire-level
events are translated into them by the agent CLI adapter.
"""

from typing import Any

from ...shared import DomainEvent
from ..value_objects import TokenUsage


class SessionInit(DomainEvent):
    """Event emitted when the agent binary reports its session id."""

    session_id: str
    model: str | None = None


class AssistantMessage(DomainEvent):
    """Event emitted when the agent narrates text."""

    text: str
    is_final: bool = True


class ToolStarted(DomainEvent):
    """Event emitted when the agent asks to run a tool."""

    tool_name: str
    tool_id: str
    arguments: dict[str, Any] = {}


class ToolCompleted(DomainEvent):
    """Event emitted when a tool run finishes."""

    tool_id: str
    success: bool
    result: str | None = None
    error: str | None = None


class TurnCompleted(DomainEvent):
    """Event emitted when a turn ends successfully."""

    usage: TokenUsage


class TurnFailed(DomainEvent):
    """Event emitted when a turn ends with an error."""

    error: str


class AgentError(DomainEvent):
    """Event emitted when the agent reports an error.

    ``is_fatal`` marks errors that end the session, as opposed to
    per-turn or per-tool failures.
    """

    message: str
    is_fatal: bool = False
