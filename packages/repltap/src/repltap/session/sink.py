"""Display sinks - where interpreter output ends up.

PUBLIC API:
  - DisplaySink: Protocol implemented by anything that accepts output
  - BufferSink: Thread-safe ring buffer that tails the newest output
"""

import threading
from collections import deque
from typing import Optional, Protocol

from rich.console import Console

__all__ = ["DisplaySink", "BufferSink"]


class DisplaySink(Protocol):
    """Append-only output destination."""

    def write(self, text: str) -> None: ...


class BufferSink:
    """Ring buffer of output lines.

    Written from the relay thread, read from command handlers. Complete
    lines live in a bounded deque; the trailing partial line is kept apart
    until its newline arrives.

    Attributes:
        max_lines: Number of complete lines retained.
        console: Optional rich console that echoes increments as they arrive.
    """

    def __init__(self, max_lines: int = 5000, console: Optional[Console] = None):
        self.max_lines = max_lines
        self.console = console
        self._lines: deque[str] = deque(maxlen=max_lines)
        self._partial = ""
        self._total = 0  # complete lines ever appended
        self._read_mark = 0
        self._lock = threading.Lock()

    def write(self, text: str) -> None:
        if not text:
            return

        with self._lock:
            parts = (self._partial + text).split("\n")
            self._partial = parts.pop()
            self._lines.extend(parts)
            self._total += len(parts)

        if self.console:
            self.console.print(text, end="", markup=False, highlight=False, soft_wrap=True)

    @property
    def line_count(self) -> int:
        """Complete lines currently retained."""
        with self._lock:
            return len(self._lines)

    def _snapshot(self, since_total: Optional[int] = None) -> list[str]:
        """Copy retained lines, optionally only those after a total count."""
        lines = list(self._lines)
        if since_total is not None:
            base = self._total - len(lines)
            lines = lines[max(since_total - base, 0) :]
        if self._partial:
            lines.append(self._partial)
        return lines

    def tail(self, lines: int = 50) -> str:
        """Read the newest lines, including a pending partial line."""
        with self._lock:
            snapshot = self._snapshot()
        if lines > 0:
            snapshot = snapshot[-lines:]
        return "\n".join(snapshot)

    def read_since_last(self) -> str:
        """Read complete lines appended since the previous call.

        A partial line is shown but not marked as read, so it is returned
        again once complete.
        """
        with self._lock:
            snapshot = self._snapshot(since_total=self._read_mark)
            self._read_mark = self._total
        return "\n".join(snapshot)

    def clear(self) -> None:
        """Drop all buffered output."""
        with self._lock:
            self._lines.clear()
            self._partial = ""
            self._read_mark = self._total
