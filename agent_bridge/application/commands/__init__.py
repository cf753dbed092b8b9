"""Application commands."""

from .start_agent_session import (
    BinaryLocatorService,
    SessionLauncher,
    StartAgentSessionCommand,
    StartAgentSessionHandler,
)

__all__ = [
    "BinaryLocatorService",
    "SessionLauncher",
    "StartAgentSessionCommand",
    "StartAgentSessionHandler",
]
