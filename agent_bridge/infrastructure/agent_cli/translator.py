"""Event translator: wire events in, domain events out.

``translate`` is a pure, total function. Every RawEvent maps to zero or
more domain events and only the failed-result case produces an error
pair (AgentError followed by TurnFailed).
"""

import json
from typing import Any

from agent_bridge.domain.agent import (
    AgentError,
    AssistantMessage,
    ControlRequest,
    SessionInit,
    TokenUsage,
    ToolCompleted,
    ToolStarted,
    TurnCompleted,
    TurnFailed,
)
from agent_bridge.domain.shared import DomainEvent

from .wire import (
    AssistantEvent,
    ContentBlock,
    ControlRequestEvent,
    RawEvent,
    ResultEvent,
    SystemEvent,
    ToolResultEvent,
    UserEvent,
)

AUTHENTICATION_FAILED = "authentication_failed"
AUTHENTICATION_FAILED_MESSAGE = (
    "Authentication failed. Run `claude /login` in your terminal to re-authenticate."
)
AGENT_ERROR_PREFIX = "agent error: "
UNKNOWN_ERROR = "Unknown error"


def translate(raw: RawEvent) -> list[DomainEvent]:
    """Translate one wire event into domain events."""
    if isinstance(raw, SystemEvent):
        return _translate_system(raw)
    if isinstance(raw, AssistantEvent):
        return _translate_assistant(raw)
    if isinstance(raw, UserEvent):
        return _translate_user(raw)
    if isinstance(raw, ToolResultEvent):
        return [_tool_completed(raw.tool_use_id, raw.content, raw.is_error)]
    if isinstance(raw, ResultEvent):
        return _translate_result(raw)
    # Control requests go to the control channel; unknown lines are dropped
    return []


def _translate_system(raw: SystemEvent) -> list[DomainEvent]:
    if raw.subtype == "init" and raw.session_id:
        return [SessionInit(session_id=raw.session_id, model=raw.model)]
    return []


def _translate_assistant(raw: AssistantEvent) -> list[DomainEvent]:
    if raw.error == AUTHENTICATION_FAILED:
        return [AgentError(message=AUTHENTICATION_FAILED_MESSAGE, is_fatal=True)]
    if raw.error:
        return [AgentError(message=AGENT_ERROR_PREFIX + raw.error, is_fatal=True)]
    if raw.message is None:
        return []

    events: list[DomainEvent] = []
    text = raw.message.text_content
    if text:
        events.append(AssistantMessage(text=text, is_final=True))
    events.extend(_tool_started(block) for block in raw.message.tool_use_blocks)
    return events


def _translate_user(raw: UserEvent) -> list[DomainEvent]:
    if raw.message is None:
        return []
    return [
        _tool_completed(block.tool_use_id, block.content, block.is_error)
        for block in raw.message.tool_result_blocks
    ]


def _translate_result(raw: ResultEvent) -> list[DomainEvent]:
    if raw.is_error:
        detail = _first_present(raw.result, raw.output, raw.error) or UNKNOWN_ERROR
        return [
            AgentError(message=AGENT_ERROR_PREFIX + detail, is_fatal=True),
            TurnFailed(error=detail),
        ]

    usage = raw.usage
    return [
        TurnCompleted(
            usage=TokenUsage(
                input_tokens=(usage.input_tokens or 0) if usage else 0,
                output_tokens=(usage.output_tokens or 0) if usage else 0,
            )
        )
    ]


def _tool_started(block: ContentBlock) -> ToolStarted:
    return ToolStarted(
        tool_name=block.name or "",
        tool_id=block.id or "",
        arguments=block.input or {},
    )


def _tool_completed(tool_use_id: str | None, content: Any, is_error: bool | None) -> ToolCompleted:
    text = _content_text(content)
    success = not is_error
    return ToolCompleted(
        tool_id=tool_use_id or "",
        success=success,
        result=text if success else None,
        error=None if success else text,
    )


def _content_text(content: Any) -> str | None:
    """Flatten tool result content into a string."""
    if content is None or isinstance(content, str):
        return content
    if isinstance(content, list) and all(
        isinstance(block, dict) and block.get("type") == "text" for block in content
    ):
        return "\n".join(str(block.get("text", "")) for block in content)
    return json.dumps(content, separators=(",", ":"), default=str)


def _first_present(*values: str | None) -> str | None:
    for value in values:
        if value is not None:
            return value
    return None


def to_control_request(raw: ControlRequestEvent) -> ControlRequest:
    """Lift a wire control request into the host-facing value object."""
    request = raw.request
    proposed = request.get("input")
    tool_use_id = request.get("tool_use_id")
    callback_id = request.get("callback_id")
    return ControlRequest(
        request_id=raw.request_id,
        subtype=str(request.get("subtype") or ""),
        tool_name=str(request.get("tool_name") or ""),
        proposed_arguments=proposed if isinstance(proposed, dict) else {},
        tool_use_id=tool_use_id if isinstance(tool_use_id, str) else None,
        callback_id=callback_id if isinstance(callback_id, str) else None,
    )
