"""Tests for agent value objects."""

from pathlib import Path

import pytest

from agent_bridge.domain.agent import (
    AgentMode,
    AgentStartConfig,
    ControlRequest,
    ControlResponse,
    TokenUsage,
    is_interactive_tool,
)
from agent_bridge.domain.agent.value_objects import PERMISSION_MODES


class TestAgentMode:
    """Tests for AgentMode enum."""

    def test_every_mode_has_a_permission_mode(self):
        """Test the permission mapping covers the whole enum."""
        assert set(PERMISSION_MODES) == set(AgentMode)

    def test_permission_mode_values(self):
        """Test AgentMode permission-mode strings."""
        assert AgentMode.BUILD.permission_mode == "acceptEdits"
        assert AgentMode.PLAN.permission_mode == "plan"


class TestAgentStartConfig:
    """Tests for AgentStartConfig value object."""

    def test_defaults(self):
        """Test default values."""
        config = AgentStartConfig(prompt="hi", working_directory=Path("/tmp"))

        assert config.mode == AgentMode.BUILD
        assert config.allowed_tools == ()
        assert config.resume_session_id is None
        assert config.extra_args == ()
        assert config.streaming_input is False

    def test_allowed_tools_deduplicated_in_order(self):
        """Test duplicate tool names are dropped while order is kept."""
        config = AgentStartConfig(allowed_tools=["Read", "Bash", "Read", " ", "Edit", "Bash"])

        assert config.allowed_tools == ("Read", "Bash", "Edit")

    def test_blank_optionals_become_none(self):
        """Test blank resume id and model are treated as absent."""
        config = AgentStartConfig(resume_session_id="  ", model="")

        assert config.resume_session_id is None
        assert config.model is None

    def test_optionals_passed_through_unchanged(self):
        """Test non-blank optional values keep their exact text."""
        config = AgentStartConfig(resume_session_id=" sess-1 ", model="sonnet ", input_format=" text")

        assert config.resume_session_id == " sess-1 "
        assert config.model == "sonnet "
        assert config.input_format == " text"

    def test_streaming_input(self):
        """Test stream-json input format is detected."""
        config = AgentStartConfig(input_format="stream-json")
        assert config.streaming_input is True

    def test_config_is_immutable(self):
        """Test the config cannot be changed after construction."""
        config = AgentStartConfig(prompt="hi")

        with pytest.raises(ValueError):
            config.prompt = "changed"

    def test_configs_with_same_values_are_equal(self):
        """Test value equality and hashing."""
        a = AgentStartConfig(prompt="hi", allowed_tools=["Read"], working_directory=Path("/w"))
        b = AgentStartConfig(prompt="hi", allowed_tools=("Read",), working_directory=Path("/w"))

        assert a == b
        assert hash(a) == hash(b)


class TestTokenUsage:
    """Tests for TokenUsage value object."""

    def test_total_is_sum_of_input_and_output(self):
        """Test total_tokens is derived."""
        usage = TokenUsage(input_tokens=10, output_tokens=5)

        assert usage.total_tokens == 15
        assert usage.cached_tokens == 0

    def test_explicit_total_is_ignored(self):
        """Test an inconsistent total cannot be constructed."""
        usage = TokenUsage(input_tokens=1, output_tokens=2, total_tokens=99)
        assert usage.total_tokens == 3

    def test_negative_tokens_rejected(self):
        """Test token counts must not be negative."""
        with pytest.raises(ValueError):
            TokenUsage(input_tokens=-1)

    def test_addition(self):
        """Test usages can be summed across turns."""
        total = TokenUsage(input_tokens=1, output_tokens=2) + TokenUsage(input_tokens=3, output_tokens=4)

        assert total.input_tokens == 4
        assert total.output_tokens == 6
        assert total.total_tokens == 10


class TestInteractiveTools:
    """Tests for is_interactive_tool."""

    @pytest.mark.parametrize("tool_name", ["AskUserQuestion", "ExitPlanMode"])
    def test_interactive_tools(self, tool_name: str):
        """Test the two prompting tools are interactive."""
        assert is_interactive_tool(tool_name) is True

    @pytest.mark.parametrize("tool_name", ["", "Bash", "Edit", "askuserquestion", "ExitPlanMode "])
    def test_other_tools_are_not_interactive(self, tool_name: str):
        """Test every other name is not interactive."""
        assert is_interactive_tool(tool_name) is False

    def test_control_request_requires_user_prompt(self):
        """Test ControlRequest exposes the classification."""
        assert ControlRequest(request_id="r1", tool_name="AskUserQuestion").requires_user_prompt
        assert not ControlRequest(request_id="r2", tool_name="Bash").requires_user_prompt


class TestControlResponse:
    """Tests for ControlResponse value object."""

    def test_envelope(self):
        """Test the fixed control_response envelope."""
        response = ControlResponse(request_id="r1", response_payload={"approved": True})

        assert response.to_envelope() == {
            "type": "control_response",
            "response": {
                "subtype": "success",
                "request_id": "r1",
                "response": {"approved": True},
            },
        }
