"""Application services."""

from .tool_approval import ALL_TOOLS, ToolApprovalPolicy, allow_payload, deny_payload

__all__ = ["ALL_TOOLS", "ToolApprovalPolicy", "allow_payload", "deny_payload"]
