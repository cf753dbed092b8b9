"""Process-level errors raised by the agent CLI adapter.

Agent-reported failures travel as domain events. These exceptions cover
what the event stream cannot describe: the binary is missing, could not
be spawned, went away without finishing its turn, or its stdin is gone.
"""


class AgentProcessError(Exception):
    """Base class for agent subprocess failures."""


class AgentBinaryNotFoundError(AgentProcessError):
    """Raised when the agent binary cannot be located."""

    def __init__(self, binary_name: str, searched: list[str] | None = None):
        self.binary_name = binary_name
        self.searched = searched or []
        super().__init__(
            f"{binary_name} CLI not found. Please ensure it is installed and on PATH."
        )


class ProcessStartError(AgentProcessError):
    """Raised when the agent process cannot be spawned."""


class ProcessTerminatedError(AgentProcessError):
    """Raised when the process exits non-zero without a terminal result."""

    def __init__(self, exit_code: int, stderr: str = ""):
        self.exit_code = exit_code
        self.stderr = stderr
        super().__init__(f"Agent process terminated with exit code {exit_code}")


class ControlChannelUnavailableError(AgentProcessError):
    """Raised when a control response cannot be sent because stdin is not open."""


class StdinWriteError(AgentProcessError):
    """Raised when writing to the agent's stdin fails."""
