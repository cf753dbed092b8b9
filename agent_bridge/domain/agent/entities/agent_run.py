"""Agent Run entity."""

from datetime import datetime, timezone
from enum import Enum
from typing import Annotated
from uuid import uuid4

from ...shared import AggregateRoot, DomainEvent
from ..events import SessionInit, TurnCompleted, TurnFailed
from ..value_objects import TokenUsage


class RunStatus(str, Enum):
    """Lifecycle status of one agent subprocess."""

    STARTING = "starting"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    KILLED = "killed"


TERMINAL_STATUSES = frozenset({RunStatus.COMPLETED, RunStatus.FAILED, RunStatus.KILLED})


def _generate_run_id() -> str:
    """Generate a new unique run id."""
    return f"run-{uuid4().hex[:12]}"


def _now() -> datetime:
    return datetime.now(timezone.utc)


# Session ids are minted by the agent binary, never by us
SessionId = Annotated[str, "SessionId"]


class AgentRun(AggregateRoot[str]):
    """Agent Run entity - Aggregate Root.

    Tracks the state machine of one subprocess:
    STARTING -> RUNNING -> {COMPLETED, FAILED, KILLED}.
    Terminal states are sticky.
    """

    id: str
    status: RunStatus = RunStatus.STARTING
    agent_session_id: SessionId | None = None
    model: str | None = None
    usage: TokenUsage | None = None
    exit_code: int | None = None
    error: str | None = None
    ended_at: datetime | None = None

    def mark_running(self) -> None:
        """Record that the subprocess handle exists."""
        if self.status != RunStatus.STARTING:
            raise ValueError(f"Run cannot start from status {self.status.value}")
        self._transition(RunStatus.RUNNING)

    def apply(self, event: DomainEvent) -> None:
        """Fold a translated domain event into the run state."""
        if self.is_terminal:
            return

        if isinstance(event, SessionInit):
            self.agent_session_id = event.session_id
            self.model = event.model
            self.updated_at = _now()
        elif isinstance(event, TurnCompleted):
            self.usage = event.usage
            self._finish(RunStatus.COMPLETED)
        elif isinstance(event, TurnFailed):
            self.error = event.error
            self._finish(RunStatus.FAILED)

    def mark_exited(self, exit_code: int) -> None:
        """Record the process exit status."""
        self.exit_code = exit_code
        if self.is_terminal:
            return
        if exit_code == 0:
            self._finish(RunStatus.COMPLETED)
        else:
            self.error = f"agent process exited with code {exit_code}"
            self._finish(RunStatus.FAILED)

    def mark_killed(self) -> None:
        """Record a host-initiated termination."""
        if self.is_terminal:
            raise ValueError(f"Run already ended with status {self.status.value}")
        self._finish(RunStatus.KILLED)

    @property
    def is_terminal(self) -> bool:
        """Check if the run has ended."""
        return self.status in TERMINAL_STATUSES

    def _finish(self, status: RunStatus) -> None:
        self.ended_at = _now()
        self._transition(status)

    def _transition(self, status: RunStatus) -> None:
        self.status = status
        self.updated_at = _now()
        self.increment_version()

    @classmethod
    def create(cls) -> "AgentRun":
        """Factory method to create a new AgentRun."""
        now = _now()
        return cls(
            id=_generate_run_id(),
            created_at=now,
            updated_at=now,
        )
