"""Start Agent Session Command and Handler."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

import structlog

from ...domain.agent import AgentMode, AgentStartConfig

logger = structlog.get_logger()


class BinaryLocatorService(Protocol):
    """Protocol for locating the agent executable."""

    def locate(self) -> str:
        """Return the executable path."""
        ...


class SessionLauncher(Protocol):
    """Protocol for spawning an agent session."""

    async def launch(self, config: AgentStartConfig, binary_path: str) -> object:
        """Start a session and return its handle."""
        ...


@dataclass(frozen=True)
class StartAgentSessionCommand:
    """Command to launch the agent binary for one turn."""

    prompt: str
    working_directory: Path
    mode: AgentMode = AgentMode.BUILD
    allowed_tools: tuple[str, ...] = ()
    resume_session_id: str | None = None
    model: str | None = None
    input_format: str | None = None
    stdin_payload: str | None = None
    extra_args: tuple[str, ...] = ()


class StartAgentSessionHandler:
    """Handler for StartAgentSessionCommand.

    Orchestrates a launch:
    1. Build the start configuration, filling in configured defaults
    2. Locate the agent binary
    3. Spawn the session
    """

    def __init__(
        self,
        binary_locator: BinaryLocatorService,
        launcher: SessionLauncher,
        default_model: str | None = None,
        default_extra_args: tuple[str, ...] = (),
    ):
        self._binary_locator = binary_locator
        self._launcher = launcher
        self._default_model = default_model
        self._default_extra_args = default_extra_args

    def build_config(self, command: StartAgentSessionCommand) -> AgentStartConfig:
        """Build the immutable start configuration for a command."""
        return AgentStartConfig(
            prompt=command.prompt,
            mode=command.mode,
            allowed_tools=command.allowed_tools,
            resume_session_id=command.resume_session_id,
            model=command.model or self._default_model,
            input_format=command.input_format,
            stdin_payload=command.stdin_payload,
            working_directory=command.working_directory,
            extra_args=(*command.extra_args, *self._default_extra_args),
        )

    async def handle(self, command: StartAgentSessionCommand) -> object:
        """Handle the start command and return the running session."""
        config = self.build_config(command)
        binary_path = self._binary_locator.locate()

        logger.info(
            "agent_session_requested",
            mode=config.mode.value,
            working_directory=str(config.working_directory),
            resume_session_id=config.resume_session_id,
        )
        return await self._launcher.launch(config, binary_path)
