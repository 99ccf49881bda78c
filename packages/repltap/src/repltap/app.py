"""repltap ReplKit2 application - session-first architecture.

Main application entry point providing dual REPL/MCP functionality for
driving a live-coding interpreter subprocess. Built on ReplKit2 framework;
all session state lives in the Dispatcher held by the application state.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from replkit2 import App
from rich.console import Console

from .config import get_config
from .dispatcher import Dispatcher
from .session import BufferSink


def _create_dispatcher() -> Dispatcher:
    """Build the dispatcher from repltap.toml."""
    config = get_config()
    console = Console() if config.echo_output else None
    return Dispatcher(config, BufferSink(config.max_output_lines, console=console))


@dataclass
class ReplTapState:
    """Application state for repltap.

    Attributes:
        dispatcher: Owns the interpreter session and its output buffer.
        document: Last file loaded, searched by run_slot when no path is given.
    """

    dispatcher: Dispatcher = field(default_factory=_create_dispatcher)
    document: Optional[Path] = None


# Must be created before command imports for decorator registration
app = App(
    "repltap",
    ReplTapState,
    uri_scheme="repltap",
    fastmcp={
        "description": "Live-coding interpreter session manager",
        "tags": {"repl", "live-coding", "interpreter"},
    },
)


# Formatter and command imports trigger decorator registration
from . import formatters  # noqa: E402, F401
from .commands import lifecycle  # noqa: E402, F401
from .commands import send  # noqa: E402, F401
from .commands import output  # noqa: E402, F401
from .commands import keys  # noqa: E402, F401


if __name__ == "__main__":
    import sys

    if "--mcp" in sys.argv:
        app.mcp.run()
    else:
        app.run(title="repltap")
