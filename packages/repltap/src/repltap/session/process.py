"""Interpreter session - one subprocess, one ordered input transport.

PUBLIC API:
  - Session: Subprocess lifecycle plus single-writer stdin transport
"""

import logging
import os
import shlex
import subprocess
import threading
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from pathlib import Path
from typing import Optional, Sequence

from ..exceptions import (
    AlreadyRunningError,
    EncodingError,
    NotRunningError,
    SpawnFailedError,
    TransportClosedError,
)
from ..types import Chunk, SessionState
from .control import _close_quietly, _kill_process, _send_interrupt, _terminate_process
from .relay import OutputRelay
from .sink import DisplaySink

__all__ = ["Session"]

logger = logging.getLogger(__name__)


class Session:
    """Owns the interpreter subprocess and the only writer to its stdin.

    State machine: STOPPED -> STARTING -> RUNNING -> STOPPED. Writes go
    through a single worker thread, so concurrent callers queue in the order
    they passed the state check and a multi-chunk write is never interleaved
    with another. The output relay reports the end of the process, which
    moves the session back to STOPPED without anyone calling stop().

    Attributes:
        command: argv used to spawn the interpreter.
        sink: Display sink fed by the output relay.
        write_timeout: Seconds a write may take before the session is
            considered wedged and killed.
        stop_timeout: Seconds to wait for the process after SIGTERM.
    """

    def __init__(
        self,
        command: Sequence[str],
        sink: DisplaySink,
        cwd: Optional[Path] = None,
        env: Optional[dict[str, str]] = None,
        encoding: str = "utf-8",
        write_timeout: float = 5.0,
        stop_timeout: float = 2.0,
    ):
        if not command:
            raise ValueError("command must not be empty")

        self.command = list(command)
        self.sink = sink
        self.cwd = cwd
        self.env = env or {}
        self.encoding = encoding
        self.write_timeout = write_timeout
        self.stop_timeout = stop_timeout

        self._state = SessionState.STOPPED
        self._lock = threading.RLock()
        self._stopped = threading.Event()
        self._stopped.set()

        self._proc: Optional[subprocess.Popen] = None
        self._relay: Optional[OutputRelay] = None
        self._writer: Optional[ThreadPoolExecutor] = None

        # Set when the process went away without stop()
        self._lost = False
        self._exit_code: Optional[int] = None

    @classmethod
    def from_config(cls, config, sink: DisplaySink) -> "Session":
        """Build a session from a ReplConfig."""
        return cls(
            config.command,
            sink,
            cwd=config.cwd,
            env=config.env,
            encoding=config.encoding,
            write_timeout=config.write_timeout,
            stop_timeout=config.stop_timeout,
        )

    # Introspection

    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state == SessionState.RUNNING

    @property
    def pid(self) -> Optional[int]:
        with self._lock:
            return self._proc.pid if self._proc else None

    @property
    def returncode(self) -> Optional[int]:
        """Exit code of a process that ended on its own."""
        with self._lock:
            return self._exit_code

    def wait_until_stopped(self, timeout: Optional[float] = None) -> bool:
        """Block until the session reaches STOPPED.

        Returns:
            True if stopped within timeout.
        """
        return self._stopped.wait(timeout)

    # Lifecycle

    def start(self, boot: Sequence[Chunk] = ()) -> None:
        """Spawn the interpreter and start relaying its output.

        Args:
            boot: Chunks written before any other caller can write.

        Raises:
            AlreadyRunningError: If the session is not stopped.
            SpawnFailedError: If the executable cannot be started.
            TransportClosedError: If the boot chunks cannot be written.
            EncodingError: If the boot chunks cannot be encoded.
        """
        encoded_boot = self._encode(boot)

        with self._lock:
            if self._state != SessionState.STOPPED:
                raise AlreadyRunningError()
            self._state = SessionState.STARTING
            self._stopped.clear()

        logger.info(f"Starting interpreter: {shlex.join(self.command)}")
        env = {**os.environ, **self.env} if self.env else None

        try:
            proc = subprocess.Popen(
                self.command,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                cwd=self.cwd,
                env=env,
            )
        except OSError as e:
            with self._lock:
                self._state = SessionState.STOPPED
                self._stopped.set()
            reason = e.strerror or str(e)
            logger.error(f"Failed to start {self.command[0]}: {reason}")
            raise SpawnFailedError(f"failed to start {self.command[0]}: {reason}") from e

        writer = ThreadPoolExecutor(max_workers=1, thread_name_prefix="repltap-writer")
        relay = OutputRelay(
            proc.stdout,
            self.sink,
            on_exit=lambda: self._on_stream_end(proc),
            encoding=self.encoding,
            name=f"repltap-relay-{proc.pid}",
        )

        boot_future = None
        with self._lock:
            self._proc = proc
            self._writer = writer
            self._relay = relay
            self._lost = False
            self._exit_code = None
            self._state = SessionState.RUNNING
            relay.start()
            if encoded_boot:
                boot_future = writer.submit(self._write_all, proc, encoded_boot)

        logger.info(f"Interpreter running (PID {proc.pid})")

        if boot_future is not None:
            self._wait(boot_future, proc)

    def stop(self) -> Optional[int]:
        """Terminate the interpreter and release its pipes.

        Returns:
            Exit code of the terminated process, if it could be reaped.

        Raises:
            NotRunningError: If the session is not running.
        """
        with self._lock:
            if self._state != SessionState.RUNNING:
                raise NotRunningError()
            proc, relay, writer = self._detach()
            self._lost = False
            self._exit_code = None

        logger.info(f"Stopping interpreter PID {proc.pid}")
        code = self._release(proc, writer)
        if relay and not relay.join(self.stop_timeout):
            logger.warning(f"Output relay for PID {proc.pid} did not finish")
        return code

    def close(self) -> None:
        """Stop the session if it is running."""
        try:
            self.stop()
        except NotRunningError:
            pass

    def __enter__(self) -> "Session":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def interrupt(self) -> None:
        """Send SIGINT to the interpreter. State is unchanged.

        Raises:
            NotRunningError: If there is no live process.
        """
        with self._lock:
            self._reap_if_exited()
            if self._state != SessionState.RUNNING or self._proc is None:
                raise NotRunningError()
            proc = self._proc

        if not _send_interrupt(proc):
            self._mark_lost(proc, proc.poll())
            raise NotRunningError("no session running (interpreter vanished)")

    # Transport

    def write(self, payload: str) -> None:
        """Write one string as a single chunk."""
        self.write_chunks([Chunk(0, payload)])

    def write_chunks(self, chunks: Sequence[Chunk]) -> None:
        """Write chunks in order, contiguously, and wait until they are sent.

        Raises:
            NotRunningError: If the session was never started or was stopped.
            TransportClosedError: If the interpreter went away, or the write
                did not complete within write_timeout.
            EncodingError: If a chunk cannot be encoded, nothing is sent.
        """
        encoded = self._encode(chunks)
        if not encoded:
            return

        with self._lock:
            self._check_writable()
            proc = self._proc
            future = self._writer.submit(self._write_all, proc, encoded)

        self._wait(future, proc)

    def _check_writable(self) -> None:
        """Consume a pending exit before trusting RUNNING. Caller holds lock."""
        self._reap_if_exited()
        if self._state == SessionState.RUNNING:
            return
        if self._lost:
            raise TransportClosedError(self._lost_message())
        raise NotRunningError()

    def _wait(self, future: Future, proc: subprocess.Popen) -> None:
        try:
            future.result(timeout=self.write_timeout)
        except FutureTimeoutError:
            logger.error(f"Write to PID {proc.pid} blocked for {self.write_timeout}s, killing interpreter")
            _kill_process(proc, self.stop_timeout)
            self._mark_lost(proc, proc.poll())
            raise TransportClosedError(
                f"write blocked for more than {self.write_timeout:g}s; session terminated"
            )
        except CancelledError:
            raise TransportClosedError(self._lost_message())

    def _encode(self, chunks: Sequence[Chunk]) -> list[tuple[Chunk, bytes]]:
        try:
            return [(c, c.text.encode(self.encoding)) for c in chunks]
        except UnicodeEncodeError as e:
            bad = e.object[e.start : e.end]
            raise EncodingError(f"cannot encode {bad!r} as {self.encoding}; nothing sent") from e

    def _write_all(self, proc: subprocess.Popen, encoded: list[tuple[Chunk, bytes]]) -> None:
        """Runs on the writer thread."""
        with self._lock:
            if proc is not self._proc:
                raise TransportClosedError(self._lost_message())
            self._reap_if_exited()
            if self._state != SessionState.RUNNING:
                raise TransportClosedError(self._lost_message())

        try:
            for c, data in encoded:
                proc.stdin.write(data)
                proc.stdin.flush()
                logger.debug(f"Wrote chunk {c.index} ({len(data)} bytes) to PID {proc.pid}")
        except (OSError, ValueError) as e:
            logger.warning(f"Write to PID {proc.pid} failed: {e}")
            self._mark_lost(proc, proc.poll())
            raise TransportClosedError(f"interpreter input closed: {e}") from e

    # Teardown

    def _detach(self) -> tuple[subprocess.Popen, Optional[OutputRelay], Optional[ThreadPoolExecutor]]:
        """Forget the current process and mark STOPPED. Caller holds lock."""
        proc, relay, writer = self._proc, self._relay, self._writer
        self._proc = None
        self._relay = None
        self._writer = None
        self._state = SessionState.STOPPED
        self._stopped.set()
        return proc, relay, writer

    def _release(self, proc: subprocess.Popen, writer: Optional[ThreadPoolExecutor]) -> Optional[int]:
        """Cancel queued writes, reap the process and close stdin."""
        if writer:
            writer.shutdown(wait=False, cancel_futures=True)
        code = _terminate_process(proc, self.stop_timeout)
        _close_quietly(proc.stdin, "stdin")
        return code

    def _reap_if_exited(self) -> None:
        """Handle an exit the relay has not reported yet. Caller holds lock."""
        if self._state == SessionState.RUNNING and self._proc is not None:
            code = self._proc.poll()
            if code is not None:
                self._mark_lost(self._proc, code)

    def _mark_lost(self, proc: subprocess.Popen, code: Optional[int]) -> bool:
        """Move to STOPPED after the process went away on its own.

        Returns:
            False if proc is no longer the session's process.
        """
        with self._lock:
            if proc is not self._proc:
                return False
            _, _, writer = self._detach()
            self._lost = True
            self._exit_code = code

        logger.warning(f"Interpreter PID {proc.pid} exited unexpectedly (code {code})")
        reaped = self._release(proc, writer)

        with self._lock:
            if self._lost and self._proc is None and self._exit_code is None:
                self._exit_code = reaped
        return True

    def _on_stream_end(self, proc: subprocess.Popen) -> None:
        """Output relay callback, runs on the relay thread."""
        try:
            code = proc.wait(timeout=self.stop_timeout)
        except subprocess.TimeoutExpired:
            # Output closed but the process lingers
            code = None

        self._mark_lost(proc, code)
        if code is None:
            code = proc.poll()
        self.sink.write(f"\n[process exited with code {code}]\n")

    def _lost_message(self) -> str:
        if not self._lost:
            return "session stopped before the write was sent"
        if self._exit_code is None:
            return "interpreter input closed; start a new session"
        return f"interpreter exited with code {self._exit_code}; start a new session"
