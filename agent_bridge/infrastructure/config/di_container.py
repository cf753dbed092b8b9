"""Dependency Injection Container.

Provides centralized dependency management for the application.
Implements a simple service locator pattern with lazy initialization.
"""

from functools import cached_property

import structlog

from agent_bridge.application.commands import StartAgentSessionHandler
from agent_bridge.application.services import ToolApprovalPolicy
from agent_bridge.infrastructure.agent_cli.binary_locator import BinaryLocator
from agent_bridge.infrastructure.agent_cli.process_session import ProcessSessionLauncher
from agent_bridge.infrastructure.config.settings import Settings
from agent_bridge.infrastructure.observability import configure_logging

logger = structlog.get_logger()


class DIContainer:
    """Dependency Injection Container.

    Provides lazy-loaded access to application services and their dependencies.
    Services are created once and reused throughout the application lifecycle.

    Example usage:
        ```python
        container = DIContainer()

        handler = container.start_session_handler
        session = await handler.handle(command)
        ```
    """

    def __init__(self, settings: Settings | None = None):
        """Initialize the container.

        Args:
            settings: Application settings (loads from env if not provided)
        """
        self._settings = settings or Settings()

    @property
    def settings(self) -> Settings:
        """Get application settings."""
        return self._settings

    @cached_property
    def binary_locator(self) -> BinaryLocator:
        """Get the agent binary locator."""
        return BinaryLocator(
            binary_name=self._settings.binary_name,
            binary_path=self._settings.binary_path,
            additional_paths=self._settings.additional_paths,
        )

    @cached_property
    def session_launcher(self) -> ProcessSessionLauncher:
        """Get the process session launcher."""
        logger.info(
            "initializing_session_launcher",
            terminate_grace_seconds=self._settings.terminate_grace_seconds,
        )
        return ProcessSessionLauncher(
            additional_paths=self._settings.additional_paths,
            terminate_grace_seconds=self._settings.terminate_grace_seconds,
            stream_limit=self._settings.stream_read_limit,
        )

    @cached_property
    def tool_approval_policy(self) -> ToolApprovalPolicy:
        """Get the tool approval policy."""
        return ToolApprovalPolicy(auto_approve_tools=self._settings.auto_approve_tools)

    @cached_property
    def start_session_handler(self) -> StartAgentSessionHandler:
        """Get the StartAgentSession command handler."""
        return StartAgentSessionHandler(
            binary_locator=self.binary_locator,
            launcher=self.session_launcher,
            default_model=self._settings.default_model,
            default_extra_args=tuple(self._settings.extra_args),
        )


# Global container instance (lazy initialization)
_container: DIContainer | None = None


def get_container() -> DIContainer:
    """Get the global DI container instance.

    The first call also configures logging from the loaded settings.
    """
    global _container
    if _container is None:
        _container = DIContainer()
        configure_logging(_container.settings.log_level, _container.settings.log_json)
    return _container


def reset_container() -> None:
    """Reset the global container (useful for testing)."""
    global _container
    _container = None
