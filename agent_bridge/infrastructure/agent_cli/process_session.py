"""Process Session.

Owns one agent subprocess. A stdout pump decodes JSON lines, translates
them and feeds two independent queues: domain events and control
requests. The host answers control requests through ``respond``, which
shares a single lock with every other stdin write.
"""

import asyncio
from collections.abc import AsyncIterator, Sequence
from types import TracebackType
from typing import Any

import structlog

from agent_bridge.domain.agent import (
    AgentRun,
    AgentStartConfig,
    ControlRequest,
    RunStatus,
    SessionInit,
    TokenUsage,
)
from agent_bridge.domain.shared import DomainEvent

from .binary_locator import build_environment
from .errors import (
    AgentProcessError,
    ControlChannelUnavailableError,
    ProcessStartError,
    ProcessTerminatedError,
    StdinWriteError,
)
from .invocation import Invocation, build_invocation, encode_control_response
from .translator import to_control_request, translate
from .wire import ControlRequestEvent, UnknownEvent, parse_raw_line

logger = structlog.get_logger()

DEFAULT_STREAM_LIMIT = 16 * 1024 * 1024
DEFAULT_TERMINATE_GRACE_SECONDS = 2.0
STDERR_CHUNK_SIZE = 4096


class ProcessSession:
    """One running agent subprocess.

    Example usage:
        ```python
        session = await ProcessSession.start(config, binary_path="/usr/local/bin/claude")
        async with session:
            async for event in session.events():
                ...
        ```

    Control requests are read from ``control_requests()`` concurrently with
    ``events()``; neither stream waits for the other to be drained.
    """

    def __init__(
        self,
        process: asyncio.subprocess.Process,
        invocation: Invocation,
        *,
        run: AgentRun | None = None,
        terminate_grace_seconds: float = DEFAULT_TERMINATE_GRACE_SECONDS,
    ):
        self._process = process
        self._invocation = invocation
        self._run = run or AgentRun.create()
        self._grace = terminate_grace_seconds

        self._events: asyncio.Queue[DomainEvent | None] = asyncio.Queue()
        self._controls: asyncio.Queue[ControlRequest | None] = asyncio.Queue()
        self._stdin_lock = asyncio.Lock()
        self._stdin_open = invocation.stdio.stdin_piped and process.stdin is not None
        self._stderr_chunks: list[str] = []
        self._failure: AgentProcessError | None = None
        self._closed = False

        self._stdout_task: asyncio.Task[None] | None = None
        self._stderr_task: asyncio.Task[None] | None = None
        self._log = logger.bind(run_id=self._run.id, pid=process.pid)

    @classmethod
    async def start(
        cls,
        config: AgentStartConfig,
        binary_path: str,
        *,
        additional_paths: Sequence[str] = (),
        terminate_grace_seconds: float = DEFAULT_TERMINATE_GRACE_SECONDS,
        stream_limit: int = DEFAULT_STREAM_LIMIT,
    ) -> "ProcessSession":
        """Spawn the agent binary and start pumping its output.

        Args:
            config: Launch configuration
            binary_path: Path of the agent executable
            additional_paths: Directories prepended to the child's PATH
            terminate_grace_seconds: Wait after closing stdin before killing
            stream_limit: Longest stdout line accepted, in bytes

        Returns:
            A session in the RUNNING state

        Raises:
            ProcessStartError: If the process cannot be spawned
        """
        invocation = build_invocation(config)
        run = AgentRun.create()
        log = logger.bind(run_id=run.id)
        log.info(
            "agent_process_starting",
            binary=binary_path,
            cwd=str(invocation.cwd),
            mode=config.mode.value,
            streaming_input=config.streaming_input,
            resume_session_id=config.resume_session_id,
            prompt=config.prompt[:50],
        )

        try:
            process = await asyncio.create_subprocess_exec(
                binary_path,
                *invocation.argv,
                stdin=(
                    asyncio.subprocess.PIPE
                    if invocation.stdio.stdin_piped
                    else asyncio.subprocess.DEVNULL
                ),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=str(invocation.cwd),
                env=build_environment(additional_paths),
                limit=stream_limit,
            )
        except OSError as e:
            log.error("agent_process_start_failed", error=str(e), binary=binary_path)
            raise ProcessStartError(f"Failed to start agent process: {e}") from e

        session = cls(
            process,
            invocation,
            run=run,
            terminate_grace_seconds=terminate_grace_seconds,
        )
        session._begin()

        if config.stdin_payload is not None:
            session._write_initial_payload(
                config.stdin_payload,
                keep_open=config.streaming_input,
            )
        return session

    # Host-facing API

    async def events(self) -> AsyncIterator[DomainEvent]:
        """Domain events in stdout order.

        Ends when stdout closes or the session is terminated.

        Raises:
            ProcessTerminatedError: If the process exited non-zero before
                reporting a terminal result
        """
        while True:
            event = await self._events.get()
            if event is None:
                # Leave the sentinel for any later iteration
                self._events.put_nowait(None)
                if self._failure is not None:
                    raise self._failure
                return
            yield event

    async def control_requests(self) -> AsyncIterator[ControlRequest]:
        """Control requests that need an answer through ``respond``."""
        while True:
            request = await self._controls.get()
            if request is None:
                self._controls.put_nowait(None)
                return
            yield request

    async def respond(self, request_id: str, payload: dict[str, Any]) -> None:
        """Answer a control request.

        Raises:
            ControlChannelUnavailableError: If stdin is not piped or already closed
            StdinWriteError: If the pipe is broken
        """
        await self._write_stdin(encode_control_response(request_id, payload))
        self._log.info("control_response_sent", request_id=request_id)

    async def terminate(self) -> None:
        """Stop the session: close stdin, wait the grace period, then kill."""
        if not self._run.is_terminal:
            self._run.mark_killed()
            self._log.info("agent_process_terminating", grace_seconds=self._grace)

        self._close_stdin()

        if self._process.returncode is None:
            try:
                await asyncio.wait_for(self._process.wait(), timeout=self._grace)
            except asyncio.TimeoutError:
                self._log.warning("agent_process_killed", grace_seconds=self._grace)
                self._abort_stdin()
                try:
                    self._process.kill()
                except ProcessLookupError:
                    pass
                await self._process.wait()

        await self._cancel_pumps()
        if self._process.returncode is not None:
            self._run.mark_exited(self._process.returncode)
        self._finish()

    async def wait(self) -> int:
        """Wait for the process to exit and its output to be consumed."""
        returncode = await self._process.wait()
        if self._stdout_task is not None:
            await asyncio.gather(self._stdout_task, return_exceptions=True)
        return returncode

    async def __aenter__(self) -> "ProcessSession":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._process.returncode is None:
            await self.terminate()
        else:
            await self.wait()

    @property
    def run(self) -> AgentRun:
        """The run aggregate tracking this session's state."""
        return self._run

    @property
    def state(self) -> RunStatus:
        return self._run.status

    @property
    def session_id(self) -> str | None:
        """Session id reported by the agent binary, once known."""
        return self._run.agent_session_id

    @property
    def model(self) -> str | None:
        return self._run.model

    @property
    def usage(self) -> TokenUsage | None:
        return self._run.usage

    @property
    def returncode(self) -> int | None:
        return self._process.returncode

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def invocation(self) -> Invocation:
        return self._invocation

    @property
    def stderr_output(self) -> str:
        return "".join(self._stderr_chunks)

    # Pumps

    def _begin(self) -> None:
        self._run.mark_running()
        self._stdout_task = asyncio.create_task(self._pump_stdout())
        self._stderr_task = asyncio.create_task(self._pump_stderr())
        self._log.info("agent_process_started")

    async def _pump_stdout(self) -> None:
        stdout = self._process.stdout
        if stdout is None:
            raise RuntimeError("agent stdout is not piped")

        try:
            while True:
                try:
                    raw_line = await stdout.readline()
                except ValueError as e:
                    # Line exceeded the stream limit; the reader already dropped it
                    self._log.warning("agent_stdout_line_too_long", error=str(e))
                    continue
                if not raw_line:
                    break
                line = raw_line.decode("utf-8", errors="replace").strip()
                if line:
                    await self._dispatch(line)

            await self._on_stdout_closed()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self._log.exception("agent_stdout_pump_failed")
            self._failure = AgentProcessError(f"Reading agent output failed: {e}")
            self._finish()

    async def _pump_stderr(self) -> None:
        stderr = self._process.stderr
        if stderr is None:
            return
        while True:
            chunk = await stderr.read(STDERR_CHUNK_SIZE)
            if not chunk:
                break
            text = chunk.decode("utf-8", errors="replace")
            self._stderr_chunks.append(text)
            self._log.debug("agent_stderr", output=text)

    async def _dispatch(self, line: str) -> None:
        if self._closed:
            return

        raw = parse_raw_line(line)
        if isinstance(raw, ControlRequestEvent):
            request = to_control_request(raw)
            self._log.info(
                "control_request_received",
                request_id=request.request_id,
                subtype=request.subtype,
                tool_name=request.tool_name,
                requires_user_prompt=request.requires_user_prompt,
            )
            self._controls.put_nowait(request)
            return

        if isinstance(raw, UnknownEvent):
            self._log.debug("agent_stdout_unrecognized", event_type=raw.type, line=line[:200])
            return

        was_terminal = self._run.is_terminal
        for event in translate(raw):
            if isinstance(event, SessionInit):
                self._log.info("agent_session_initialized", session_id=event.session_id)
            self._run.apply(event)
            self._events.put_nowait(event)

        if not was_terminal and self._run.is_terminal:
            self._log.info("agent_turn_finished", status=self._run.status.value)
            # The turn is over; EOF lets a streaming-input process exit
            self._close_stdin()

    async def _on_stdout_closed(self) -> None:
        returncode = await self._process.wait()
        if self._stderr_task is not None:
            try:
                await asyncio.wait_for(asyncio.shield(self._stderr_task), timeout=self._grace)
            except asyncio.TimeoutError:
                self._log.warning("agent_stderr_still_open")

        was_terminal = self._run.is_terminal
        self._run.mark_exited(returncode)

        if not was_terminal and returncode != 0:
            self._failure = ProcessTerminatedError(returncode, self.stderr_output)
            self._log.error(
                "agent_process_terminated",
                exit_code=returncode,
                stderr=self.stderr_output[-2000:],
            )
        else:
            self._log.info(
                "agent_process_exited",
                exit_code=returncode,
                status=self._run.status.value,
            )
        self._finish()

    async def _cancel_pumps(self) -> None:
        tasks = [task for task in (self._stdout_task, self._stderr_task) if task is not None]
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _finish(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._events.put_nowait(None)
        self._controls.put_nowait(None)

    # Stdin: single writer
    #
    # Each line is handed to the pipe transport in one synchronous write, so
    # lines never interleave and closing never waits on a writer blocked in
    # drain(). The lock only orders drains.

    def _write_initial_payload(self, payload: str, *, keep_open: bool) -> None:
        stdin = self._process.stdin
        if not self._stdin_open or stdin is None:
            return
        data = payload if payload.endswith("\n") else payload + "\n"
        stdin.write(data.encode("utf-8"))
        self._log.debug("agent_stdin_payload_written", size=len(data))
        if not keep_open:
            self._close_stdin()

    async def _write_stdin(self, data: str) -> None:
        stdin = self._process.stdin
        if not self._stdin_open or stdin is None:
            raise ControlChannelUnavailableError(
                "Agent stdin is not open. Launch with input format 'stream-json' "
                "to answer control requests."
            )
        stdin.write(data.encode("utf-8"))
        async with self._stdin_lock:
            try:
                await stdin.drain()
            except (BrokenPipeError, ConnectionResetError) as e:
                self._stdin_open = False
                self._log.error("agent_stdin_write_failed", error=str(e))
                raise StdinWriteError(f"Failed to write to agent stdin: {e}") from e

    def _close_stdin(self) -> None:
        """Signal EOF once buffered bytes are flushed."""
        if not self._stdin_open:
            return
        self._stdin_open = False
        stdin = self._process.stdin
        if stdin is None:
            return
        stdin.close()
        self._log.debug("agent_stdin_closed")

    def _abort_stdin(self) -> None:
        """Drop unsent bytes so blocked drains return and the pipe can close."""
        self._stdin_open = False
        stdin = self._process.stdin
        if stdin is None:
            return
        transport = stdin.transport
        if transport.get_write_buffer_size():
            self._log.warning(
                "agent_stdin_aborted",
                unsent_bytes=transport.get_write_buffer_size(),
            )
            transport.abort()


class ProcessSessionLauncher:
    """Starts ProcessSessions with fixed process settings."""

    def __init__(
        self,
        additional_paths: Sequence[str] = (),
        terminate_grace_seconds: float = DEFAULT_TERMINATE_GRACE_SECONDS,
        stream_limit: int = DEFAULT_STREAM_LIMIT,
    ):
        self._additional_paths = list(additional_paths)
        self._grace = terminate_grace_seconds
        self._stream_limit = stream_limit

    async def launch(self, config: AgentStartConfig, binary_path: str) -> ProcessSession:
        """Start one session for the given config."""
        return await ProcessSession.start(
            config,
            binary_path,
            additional_paths=self._additional_paths,
            terminate_grace_seconds=self._grace,
            stream_limit=self._stream_limit,
        )
