"""Tests for the invocation builder and control-response encoder."""

import json
from pathlib import Path

import pytest

from agent_bridge.domain.agent import AgentMode, AgentStartConfig
from agent_bridge.infrastructure.agent_cli import build_invocation, encode_control_response


def _config(**overrides) -> AgentStartConfig:
    values = {"prompt": "Fix the tests", "working_directory": Path("/work")}
    values.update(overrides)
    return AgentStartConfig(**values)


class TestBuildInvocation:
    """Tests for build_invocation."""

    def test_one_shot_prompt(self):
        """Test the minimal one-shot argument vector."""
        invocation = build_invocation(_config())

        assert invocation.argv == (
            "-p",
            "--output-format",
            "stream-json",
            "--verbose",
            "--permission-mode",
            "acceptEdits",
            "--",
            "Fix the tests",
        )
        assert invocation.cwd == Path("/work")
        assert invocation.stdio.stdin_piped is False
        assert invocation.stdio.stdout_piped is True
        assert invocation.stdio.stderr_piped is True

    def test_all_options_in_order(self):
        """Test every optional flag lands in the fixed order."""
        invocation = build_invocation(
            _config(
                mode=AgentMode.PLAN,
                allowed_tools=["Read", "Grep", "Read"],
                resume_session_id="sess-42",
                model="opus",
                extra_args=["--max-turns", "3"],
            )
        )

        assert invocation.argv == (
            "-p",
            "--output-format",
            "stream-json",
            "--verbose",
            "--permission-mode",
            "plan",
            "--allowedTools",
            "Read,Grep",
            "--resume",
            "sess-42",
            "--model",
            "opus",
            "--max-turns",
            "3",
            "--",
            "Fix the tests",
        )

    def test_streaming_input(self):
        """Test stream-json input drops -p and the prompt and pipes stdin."""
        invocation = build_invocation(_config(input_format="stream-json"))

        assert invocation.argv == (
            "--output-format",
            "stream-json",
            "--verbose",
            "--permission-prompt-tool",
            "stdio",
            "--permission-mode",
            "acceptEdits",
            "--input-format",
            "stream-json",
        )
        assert invocation.stdio.stdin_piped is True

    def test_other_input_format_is_passed_through(self):
        """Test a non-streaming input format keeps -p and the prompt."""
        argv = build_invocation(_config(input_format="text")).argv

        assert argv[0] == "-p"
        assert "--permission-prompt-tool" not in argv
        assert argv[-4:] == ("--input-format", "text", "--", "Fix the tests")

    def test_stdin_payload_pipes_stdin(self):
        """Test a raw stdin payload enables stdin without streaming input."""
        invocation = build_invocation(_config(stdin_payload="extra context"))

        assert invocation.stdio.stdin_piped is True
        assert invocation.argv[0] == "-p"

    def test_empty_prompt_has_no_end_of_options(self):
        """Test no positional prompt is emitted for an empty prompt."""
        argv = build_invocation(_config(prompt="")).argv

        assert "--" not in argv
        assert argv[0] == "-p"

    def test_prompt_that_looks_like_a_flag(self):
        """Test a leading-hyphen prompt follows the end-of-options marker."""
        prompt = "- [ ] update the changelog"
        argv = build_invocation(_config(prompt=prompt)).argv

        assert argv.count(prompt) == 1
        assert argv.index("--") == argv.index(prompt) - 1
        assert argv[-1] == prompt

    @pytest.mark.parametrize(
        "overrides",
        [
            {},
            {"input_format": "stream-json"},
            {"mode": AgentMode.PLAN, "prompt": ""},
            {"stdin_payload": "x", "extra_args": ["--debug"]},
        ],
    )
    def test_output_format_and_verbose_always_together(self, overrides):
        """Test structured output is never emitted without --verbose."""
        argv = build_invocation(_config(**overrides)).argv

        index = argv.index("--output-format")
        assert argv[index + 1] == "stream-json"
        assert "--verbose" in argv

    def test_config_is_not_mutated(self):
        """Test the builder only reads the config."""
        config = _config(allowed_tools=["Read"], extra_args=["--debug"])
        before = config.model_dump()

        build_invocation(config)
        build_invocation(config)

        assert config.model_dump() == before
        assert build_invocation(config) == build_invocation(config)


class TestEncodeControlResponse:
    """Tests for encode_control_response."""

    def test_envelope_round_trip(self):
        """Test the line parses back to the fixed envelope."""
        line = encode_control_response("r1", {"approved": True})

        assert line.endswith("\n")
        assert line.count("\n") == 1
        assert json.loads(line) == {
            "type": "control_response",
            "response": {
                "subtype": "success",
                "request_id": "r1",
                "response": {"approved": True},
            },
        }

    def test_payload_with_newlines_stays_on_one_line(self):
        """Test multi-line strings in the payload are escaped."""
        line = encode_control_response("r2", {"message": "line one\nline two"})

        assert line.count("\n") == 1
        assert json.loads(line)["response"]["response"]["message"] == "line one\nline two"
