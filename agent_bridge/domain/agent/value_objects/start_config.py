"""Agent start configuration value object."""

from pathlib import Path
from typing import Any

from pydantic import Field, field_validator

from ...shared import ValueObject
from .agent_mode import AgentMode

STREAM_JSON = "stream-json"


class AgentStartConfig(ValueObject):
    """Everything needed to launch one agent subprocess.

    Built by the host once per launch. Immutable; the invocation builder
    only reads it.
    """

    prompt: str = ""
    mode: AgentMode = AgentMode.BUILD
    allowed_tools: tuple[str, ...] = ()
    resume_session_id: str | None = None
    model: str | None = None
    input_format: str | None = None
    stdin_payload: str | None = None
    working_directory: Path = Field(default_factory=Path.cwd)
    extra_args: tuple[str, ...] = ()

    @field_validator("allowed_tools", mode="before")
    @classmethod
    def deduplicate_tools(cls, v: Any) -> tuple[str, ...]:
        """Drop empty and repeated tool names, keeping first-seen order."""
        if v is None:
            return ()
        names = [v] if isinstance(v, str) else list(v)
        seen: dict[str, None] = {}
        for name in names:
            name = str(name).strip()
            if name:
                seen.setdefault(name, None)
        return tuple(seen)

    @field_validator("resume_session_id", "model", "input_format")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat blank optional strings as absent."""
        if v is None or not v.strip():
            return None
        return v

    @property
    def streaming_input(self) -> bool:
        """True when the prompt is streamed to the binary as JSON lines."""
        return self.input_format == STREAM_JSON

    def __str__(self) -> str:
        return f"[{self.mode.value}] {self.prompt[:50]}"
