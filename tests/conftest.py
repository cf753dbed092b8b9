"""Pytest configuration and fixtures."""

import json
import stat
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from agent_bridge.domain.agent import AgentMode, AgentStartConfig
from agent_bridge.infrastructure.config import Settings, reset_container


@pytest.fixture(autouse=True)
def _reset_container():
    """Give every test a fresh global container."""
    reset_container()
    yield
    reset_container()


@pytest.fixture
def mock_settings() -> Settings:
    """Create test settings that ignore the environment."""
    return Settings(
        binary_name="claude",
        binary_path=None,
        additional_paths=[],
        terminate_grace_seconds=0.5,
        auto_approve_tools=["Read", "Grep"],
    )


@pytest.fixture
def mock_start_config(tmp_path: Path) -> AgentStartConfig:
    """Create a one-shot start config."""
    return AgentStartConfig(
        prompt="Explain the build system",
        mode=AgentMode.BUILD,
        working_directory=tmp_path,
    )


@pytest.fixture
def wire_line() -> Callable[..., str]:
    """Encode one wire event as a JSON line."""

    def _encode(**fields: Any) -> str:
        return json.dumps(fields)

    return _encode


@pytest.fixture
def fake_agent(tmp_path: Path) -> Callable[[str], str]:
    """Write a stand-in agent binary that runs the given Python body.

    A /bin/sh wrapper execs the current interpreter so the shebang stays short.
    Helpers ``emit(**fields)`` and ``json``/``sys``/``os``/``time`` are in scope.
    """

    def _make(body: str, name: str = "fake-agent") -> str:
        script = tmp_path / f"{name}.py"
        script.write_text(
            "import json, os, sys, time\n"
            "def emit(**fields):\n"
            "    print(json.dumps(fields), flush=True)\n"
            f"{body}\n"
        )
        wrapper = tmp_path / name
        wrapper.write_text(f'#!/bin/sh\nexec "{sys.executable}" "{script}" "$@"\n')
        wrapper.chmod(wrapper.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(wrapper)

    return _make
