"""Locating the agent binary and preparing the child environment."""

import os
import shutil
from collections.abc import Mapping, Sequence
from pathlib import Path

import structlog

from .errors import AgentBinaryNotFoundError

logger = structlog.get_logger()


def default_binary_dirs() -> list[str]:
    """Directories the agent CLI is commonly installed into."""
    home = Path.home()
    return [
        str(home / ".claude" / "local"),
        "/usr/local/bin",
        "/opt/homebrew/bin",
        "/usr/bin",
        str(home / ".nvm" / "current" / "bin"),
    ]


def build_environment(
    additional_paths: Sequence[str] = (),
    base: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Inherit the host environment with a dumb terminal and an extended PATH."""
    environment = dict(os.environ if base is None else base)
    environment["TERM"] = "dumb"

    search_path = os.pathsep.join([*additional_paths, *default_binary_dirs()])
    existing = environment.get("PATH")
    environment["PATH"] = f"{search_path}{os.pathsep}{existing}" if existing else search_path
    return environment


class BinaryLocator:
    """Finds the agent executable.

    Search order: explicit path, additional directories, default install
    directories, then PATH lookup.
    """

    def __init__(
        self,
        binary_name: str = "claude",
        binary_path: str | None = None,
        additional_paths: Sequence[str] = (),
    ):
        self._binary_name = binary_name
        self._binary_path = binary_path
        self._additional_paths = list(additional_paths)

    @property
    def additional_paths(self) -> list[str]:
        """Extra directories, also prepended to the child's PATH."""
        return list(self._additional_paths)

    def candidates(self) -> list[str]:
        """Every file path checked before falling back to PATH lookup."""
        paths = [self._binary_path] if self._binary_path else []
        for directory in [*self._additional_paths, *default_binary_dirs()]:
            paths.append(os.path.join(directory, self._binary_name))
        return paths

    def locate(self) -> str:
        """Return the path of the agent executable.

        Raises:
            AgentBinaryNotFoundError: If no executable candidate exists
        """
        candidates = self.candidates()
        for candidate in candidates:
            if os.path.isfile(candidate) and os.access(candidate, os.X_OK):
                logger.debug("agent_binary_found", path=candidate)
                return candidate

        found = shutil.which(self._binary_name)
        if found:
            logger.debug("agent_binary_found_on_path", path=found)
            return found

        logger.error("agent_binary_not_found", binary=self._binary_name, searched=candidates)
        raise AgentBinaryNotFoundError(self._binary_name, candidates)
