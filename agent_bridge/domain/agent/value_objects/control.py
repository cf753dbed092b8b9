"""Control request/response value objects."""

from typing import Any

from ...shared import ValueObject

# Tools that always need a person to answer before the agent may proceed.
INTERACTIVE_TOOLS: frozenset[str] = frozenset({"AskUserQuestion", "ExitPlanMode"})


def is_interactive_tool(tool_name: str) -> bool:
    """Return True if the tool needs a user-facing approval prompt."""
    return tool_name in INTERACTIVE_TOOLS


class ControlRequest(ValueObject):
    """A question the agent binary asks the host over the control channel."""

    request_id: str
    subtype: str = "can_use_tool"
    tool_name: str = ""
    proposed_arguments: dict[str, Any] = {}
    tool_use_id: str | None = None
    callback_id: str | None = None

    @property
    def requires_user_prompt(self) -> bool:
        """Check if the host must ask the user before answering."""
        return is_interactive_tool(self.tool_name)


class ControlResponse(ValueObject):
    """The host's answer to a ControlRequest, correlated by request id."""

    request_id: str
    response_payload: dict[str, Any] = {}

    def to_envelope(self) -> dict[str, Any]:
        """Wrap the payload in the fixed control_response envelope."""
        return {
            "type": "control_response",
            "response": {
                "subtype": "success",
                "request_id": self.request_id,
                "response": self.response_payload,
            },
        }
