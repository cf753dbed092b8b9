"""Agent entities."""

from .agent_run import TERMINAL_STATUSES, AgentRun, RunStatus, SessionId

__all__ = ["AgentRun", "RunStatus", "SessionId", "TERMINAL_STATUSES"]
