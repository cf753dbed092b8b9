"""Agent operating mode value object."""

from enum import Enum


class AgentMode(str, Enum):
    """Operating mode the agent binary is launched in."""

    BUILD = "build"
    PLAN = "plan"

    @property
    def permission_mode(self) -> str:
        """Permission-mode flag value understood by the agent binary."""
        return PERMISSION_MODES[self]


# Must cover every AgentMode member; tests enforce it.
PERMISSION_MODES: dict[AgentMode, str] = {
    AgentMode.BUILD: "acceptEdits",
    AgentMode.PLAN: "plan",
}
