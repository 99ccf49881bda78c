"""Session lifecycle commands.

PUBLIC API:
  - start: Start the interpreter
  - stop: Stop the interpreter
  - interrupt: Interrupt the current evaluation
  - status: Show session state
"""

import shlex
from typing import Any

from ..app import app
from ..errors import error_response
from ..exceptions import ReplTapError
from ..registry import describe
from ._helpers import build_hint


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"session"}, "description": describe("start")},
)
def start(state) -> dict[str, Any]:
    """Start the interpreter session.

    Spawns the configured interpreter and sends the boot script command
    before anything else.

    Args:
        state: Application state.

    Returns:
        Markdown formatted result with the spawned command and PID.
    """
    dispatcher = state.dispatcher

    try:
        boot = dispatcher.start()
    except ReplTapError as e:
        return error_response(e)

    command = shlex.join(dispatcher.config.command)
    elements = [{"type": "text", "content": f"Started `{command}`"}]

    if boot:
        elements.append({"type": "code_block", "content": boot.payload.rstrip("\n"), "language": "text"})

    elements.append(build_hint())

    return {
        "elements": elements,
        "frontmatter": {
            "action": "start",
            "status": dispatcher.state.value,
            "pid": dispatcher.session.pid,
        },
    }


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"session"}, "description": describe("stop")},
)
def stop(state) -> dict[str, Any]:
    """Stop the interpreter session.

    Stopping when nothing runs is reported as an error.

    Args:
        state: Application state.

    Returns:
        Markdown formatted result with the exit code.
    """
    try:
        code = state.dispatcher.stop()
    except ReplTapError as e:
        return error_response(e)

    return {
        "elements": [{"type": "text", "content": f"Interpreter stopped (exit code {code})"}],
        "frontmatter": {"action": "stop", "status": "stopped", "exit_code": code},
    }


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"session", "control"}, "description": describe("interrupt")},
)
def interrupt(state) -> dict[str, Any]:
    """Send interrupt signal to the interpreter.

    Args:
        state: Application state.

    Returns:
        Markdown formatted result with interrupt status.
    """
    dispatcher = state.dispatcher

    try:
        dispatcher.interrupt()
    except ReplTapError as e:
        return error_response(e)

    return {
        "elements": [{"type": "text", "content": "Interrupt sent"}, build_hint()],
        "frontmatter": {"action": "interrupt", "status": "sent", "pid": dispatcher.session.pid},
    }


@app.command(
    display="markdown",
    fastmcp={"type": "resource", "mime_type": "text/markdown", "tags": {"session"}, "description": describe("status")},
)
def status(state) -> dict[str, Any]:
    """Show interpreter session state.

    Args:
        state: Application state.

    Returns:
        Markdown formatted session summary.
    """
    dispatcher = state.dispatcher
    session = dispatcher.session
    config = dispatcher.config

    frontmatter = {
        "status": session.state.value,
        "command": shlex.join(config.command),
        "pid": session.pid,
        "chunk_size": config.chunk_size,
        "literate": config.literate,
    }
    if session.returncode is not None:
        frontmatter["last_exit_code"] = session.returncode
    if state.document:
        frontmatter["document"] = str(state.document)

    return {
        "elements": [{"type": "text", "content": f"Session is {session.state.value}"}],
        "frontmatter": frontmatter,
    }
