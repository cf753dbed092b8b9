"""Invocation builder for the agent binary.

Turns an AgentStartConfig into the argument vector and stdio wiring of
one subprocess, and encodes control responses written back to its stdin.
Both are pure functions.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from agent_bridge.domain.agent import AgentStartConfig, ControlResponse
from agent_bridge.domain.agent.value_objects import STREAM_JSON

PRINT_FLAG = "-p"
OUTPUT_FORMAT_FLAG = "--output-format"
VERBOSE_FLAG = "--verbose"
PERMISSION_PROMPT_TOOL_FLAG = "--permission-prompt-tool"
PERMISSION_PROMPT_TOOL_STDIO = "stdio"
PERMISSION_MODE_FLAG = "--permission-mode"
ALLOWED_TOOLS_FLAG = "--allowedTools"
RESUME_FLAG = "--resume"
MODEL_FLAG = "--model"
INPUT_FORMAT_FLAG = "--input-format"
END_OF_OPTIONS = "--"


@dataclass(frozen=True)
class StdioPlan:
    """How the child's standard streams are wired."""

    stdin_piped: bool
    stdout_piped: bool = True
    stderr_piped: bool = True


@dataclass(frozen=True)
class Invocation:
    """Arguments (without the executable) plus stdio wiring for one launch."""

    argv: tuple[str, ...]
    stdio: StdioPlan
    cwd: Path


def build_invocation(config: AgentStartConfig) -> Invocation:
    """Build the invocation for a launch.

    Flag order matters to the binary's parser, so it is fixed here.
    """
    streaming_input = config.input_format == STREAM_JSON
    args: list[str] = []

    if not streaming_input:
        args.append(PRINT_FLAG)

    # stream-json output is rejected by the binary without --verbose
    args.extend([OUTPUT_FORMAT_FLAG, STREAM_JSON, VERBOSE_FLAG])

    if streaming_input:
        args.extend([PERMISSION_PROMPT_TOOL_FLAG, PERMISSION_PROMPT_TOOL_STDIO])

    args.extend([PERMISSION_MODE_FLAG, config.mode.permission_mode])

    if config.allowed_tools:
        args.extend([ALLOWED_TOOLS_FLAG, ",".join(config.allowed_tools)])

    if config.resume_session_id is not None:
        args.extend([RESUME_FLAG, config.resume_session_id])

    if config.model is not None:
        args.extend([MODEL_FLAG, config.model])

    if config.input_format is not None:
        args.extend([INPUT_FORMAT_FLAG, config.input_format])

    args.extend(config.extra_args)

    # "--" keeps prompts such as "- [ ] fix tests" from being read as options
    if not streaming_input and config.prompt:
        args.extend([END_OF_OPTIONS, config.prompt])

    return Invocation(
        argv=tuple(args),
        stdio=StdioPlan(stdin_piped=streaming_input or config.stdin_payload is not None),
        cwd=config.working_directory,
    )


def encode_control_response(request_id: str, payload: dict[str, Any]) -> str:
    """Encode one control response as a single newline-terminated JSON line."""
    response = ControlResponse(request_id=request_id, response_payload=payload)
    return json.dumps(response.to_envelope(), separators=(",", ":")) + "\n"
