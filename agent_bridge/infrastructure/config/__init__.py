"""Infrastructure configuration module.

Contains application settings and the DI container.
"""

from agent_bridge.infrastructure.config.di_container import (
    DIContainer,
    get_container,
    reset_container,
)
from agent_bridge.infrastructure.config.settings import Settings

__all__ = [
    "Settings",
    "DIContainer",
    "get_container",
    "reset_container",
]
