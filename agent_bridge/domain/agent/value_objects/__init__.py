"""Agent value objects."""

from .agent_mode import PERMISSION_MODES, AgentMode
from .control import INTERACTIVE_TOOLS, ControlRequest, ControlResponse, is_interactive_tool
from .start_config import STREAM_JSON, AgentStartConfig
from .token_usage import TokenUsage

__all__ = [
    "AgentMode",
    "PERMISSION_MODES",
    "AgentStartConfig",
    "STREAM_JSON",
    "TokenUsage",
    "ControlRequest",
    "ControlResponse",
    "INTERACTIVE_TOOLS",
    "is_interactive_tool",
]
