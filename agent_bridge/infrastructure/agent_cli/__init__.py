"""Adapter for the headless agent CLI.

Builds the invocation, parses and translates its JSON-lines output and
runs the control protocol over its stdin.
"""

from .binary_locator import BinaryLocator, build_environment, default_binary_dirs
from .errors import (
    AgentBinaryNotFoundError,
    AgentProcessError,
    ControlChannelUnavailableError,
    ProcessStartError,
    ProcessTerminatedError,
    StdinWriteError,
)
from .invocation import Invocation, StdioPlan, build_invocation, encode_control_response
from .process_session import ProcessSession, ProcessSessionLauncher
from .translator import to_control_request, translate
from .wire import RawEvent, parse_raw_event, parse_raw_line

__all__ = [
    "BinaryLocator",
    "build_environment",
    "default_binary_dirs",
    "AgentProcessError",
    "AgentBinaryNotFoundError",
    "ProcessStartError",
    "ProcessTerminatedError",
    "ControlChannelUnavailableError",
    "StdinWriteError",
    "Invocation",
    "StdioPlan",
    "build_invocation",
    "encode_control_response",
    "ProcessSession",
    "ProcessSessionLauncher",
    "RawEvent",
    "parse_raw_event",
    "parse_raw_line",
    "translate",
    "to_control_request",
]
