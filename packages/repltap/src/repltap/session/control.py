"""Process control operations.

Internal module - not part of public API.
Contains utilities for signalling and terminating the interpreter.
All functions are prefixed with underscore to indicate internal use.
"""

import logging
import signal
import subprocess

logger = logging.getLogger(__name__)


def _send_interrupt(proc: subprocess.Popen) -> bool:
    """Send SIGINT to the interpreter.

    Args:
        proc: Interpreter process

    Returns:
        True if the signal was delivered
    """
    try:
        proc.send_signal(signal.SIGINT)
        logger.info(f"Sent interrupt to PID {proc.pid}")
        return True
    except ProcessLookupError:
        logger.error(f"Process {proc.pid} not found")
        return False
    except PermissionError:
        logger.error(f"Permission denied to signal process {proc.pid}")
        return False


def _terminate_process(proc: subprocess.Popen, timeout: float = 2.0) -> int | None:
    """Terminate the interpreter, escalating to SIGKILL after timeout.

    Args:
        proc: Interpreter process
        timeout: Seconds to wait after SIGTERM

    Returns:
        Exit code, or None if the process could not be reaped
    """
    if proc.poll() is not None:
        return proc.returncode

    try:
        proc.terminate()
        return proc.wait(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.warning(f"PID {proc.pid} ignored SIGTERM, killing")
    except ProcessLookupError:
        return proc.poll()

    return _kill_process(proc, timeout)


def _kill_process(proc: subprocess.Popen, timeout: float = 2.0) -> int | None:
    """Kill the interpreter with SIGKILL and reap it.

    Args:
        proc: Interpreter process
        timeout: Seconds to wait for the kernel to reap it

    Returns:
        Exit code, or None if the process could not be reaped
    """
    try:
        proc.kill()
        return proc.wait(timeout=timeout)
    except ProcessLookupError:
        return proc.poll()
    except subprocess.TimeoutExpired:
        logger.error(f"PID {proc.pid} survived SIGKILL")
        return None


def _close_quietly(stream, name: str) -> None:
    """Close a pipe, tolerating one that is already broken."""
    if stream is None:
        return
    try:
        stream.close()
    except (OSError, ValueError) as e:
        logger.debug(f"Failed to close {name}: {e}")
