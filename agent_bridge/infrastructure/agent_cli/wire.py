"""Wire-level events emitted by the agent binary.

Each stdout line is one JSON object whose ``type`` field selects the
variant. These models never leave the agent CLI adapter; the translator
turns them into domain events. Anything that does not fit becomes an
UnknownEvent instead of an error.
"""

import json
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class WireModel(BaseModel):
    """Base for wire shapes: immutable, tolerant of extra fields."""

    model_config = ConfigDict(frozen=True, extra="ignore")


class ContentBlock(WireModel):
    """One block of message content: text, tool_use, tool_result or other."""

    type: str = ""
    text: str | None = None
    id: str | None = None
    name: str | None = None
    input: dict[str, Any] | None = None
    tool_use_id: str | None = None
    content: Any = None
    is_error: bool | None = None


class WireUsage(WireModel):
    input_tokens: int | None = None
    output_tokens: int | None = None


class WireMessage(WireModel):
    """Message body of an assistant or user event."""

    id: str | None = None
    role: str | None = None
    model: str | None = None
    content: list[ContentBlock] | str | None = None
    stop_reason: str | None = None
    usage: WireUsage | None = None

    def _blocks(self, block_type: str) -> list[ContentBlock]:
        if not isinstance(self.content, list):
            return []
        return [block for block in self.content if block.type == block_type]

    @property
    def text_content(self) -> str:
        """All text blocks joined with newlines."""
        if isinstance(self.content, str):
            return self.content
        return "\n".join(block.text for block in self._blocks("text") if block.text is not None)

    @property
    def tool_use_blocks(self) -> list[ContentBlock]:
        """Tool invocations in the order the agent listed them."""
        return self._blocks("tool_use")

    @property
    def tool_result_blocks(self) -> list[ContentBlock]:
        """Tool results in the order the agent listed them."""
        return self._blocks("tool_result")


class SystemEvent(WireModel):
    type: Literal["system"]
    subtype: str | None = None
    session_id: str | None = None
    model: str | None = None
    tools: list[str] | None = None
    cwd: str | None = None


class AssistantEvent(WireModel):
    type: Literal["assistant"]
    message: WireMessage | None = None
    session_id: str | None = None
    error: str | None = None


class UserEvent(WireModel):
    """User turn echoed by the binary; usually carries tool results."""

    type: Literal["user"]
    message: WireMessage | None = None
    session_id: str | None = None


class ToolResultEvent(WireModel):
    """Standalone tool result (alternative format)."""

    type: Literal["tool_result"]
    tool_use_id: str | None = None
    content: Any = None
    is_error: bool | None = None


class ResultEvent(WireModel):
    """Terminal event of a turn."""

    type: Literal["result"]
    subtype: str | None = None
    result: str | None = None
    output: str | None = None
    error: str | None = None
    is_error: bool | None = None
    session_id: str | None = None
    usage: WireUsage | None = None
    total_cost_usd: float | None = None
    duration_ms: int | None = None
    num_turns: int | None = None


class ControlRequestEvent(WireModel):
    """The binary asking the host a question, e.g. permission to run a tool."""

    type: Literal["control_request"]
    request_id: str
    request: dict[str, Any] = {}


class UnknownEvent(WireModel):
    """Any line that did not match a known shape."""

    type: str = ""
    raw: str = ""


RawEvent = Union[
    SystemEvent,
    AssistantEvent,
    UserEvent,
    ToolResultEvent,
    ResultEvent,
    ControlRequestEvent,
    UnknownEvent,
]

_KnownEvent = Annotated[
    Union[
        SystemEvent,
        AssistantEvent,
        UserEvent,
        ToolResultEvent,
        ResultEvent,
        ControlRequestEvent,
    ],
    Field(discriminator="type"),
]

_known_event_adapter: TypeAdapter[Any] = TypeAdapter(_KnownEvent)


def parse_raw_event(data: Any) -> RawEvent:
    """Parse a decoded JSON value into a RawEvent. Never raises."""
    if not isinstance(data, dict):
        return UnknownEvent(raw=json.dumps(data, default=str))
    try:
        return _known_event_adapter.validate_python(data)
    except ValidationError:
        event_type = data.get("type")
        return UnknownEvent(
            type=event_type if isinstance(event_type, str) else "",
            raw=json.dumps(data, default=str),
        )


def parse_raw_line(line: str) -> RawEvent:
    """Parse one stdout line into a RawEvent. Never raises."""
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return UnknownEvent(raw=line)
    return parse_raw_event(data)
