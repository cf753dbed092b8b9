"""Tool approval policy.

The adapter only classifies control requests. Whether a non-interactive
tool is approved silently is the host's call, expressed here as an
auto-approve list.
"""

from collections.abc import Iterable
from typing import Any

import structlog

from ...domain.agent import ControlRequest, is_interactive_tool

logger = structlog.get_logger()

ALL_TOOLS = "*"


def allow_payload(
    proposed_arguments: dict[str, Any],
    updated_input: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the response payload that lets a tool run."""
    return {
        "behavior": "allow",
        "updatedInput": updated_input if updated_input is not None else proposed_arguments,
    }


def deny_payload(message: str) -> dict[str, Any]:
    """Build the response payload that refuses a tool run."""
    return {"behavior": "deny", "message": message}


class ToolApprovalPolicy:
    """Decides which control requests may be answered without the user."""

    def __init__(self, auto_approve_tools: Iterable[str] = ()):
        self._auto_approve = frozenset(name.strip() for name in auto_approve_tools if name.strip())

    @property
    def auto_approve_tools(self) -> frozenset[str]:
        return self._auto_approve

    def can_auto_approve(self, tool_name: str) -> bool:
        """Check if a tool may be approved without asking the user."""
        if not tool_name or is_interactive_tool(tool_name):
            return False
        return ALL_TOOLS in self._auto_approve or tool_name in self._auto_approve

    def decide(self, request: ControlRequest) -> dict[str, Any] | None:
        """Return an automatic answer, or None when the user must decide."""
        if request.subtype != "can_use_tool":
            return None
        if not self.can_auto_approve(request.tool_name):
            return None

        logger.info(
            "tool_auto_approved",
            request_id=request.request_id,
            tool_name=request.tool_name,
        )
        return allow_payload(request.proposed_arguments)
