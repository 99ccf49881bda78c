"""Send commands - feed source text to the interpreter.

PUBLIC API:
  - run_line: Send one line
  - run_region: Send a block of lines as one statement
  - run_slot: Run the block that defines a slot
  - stop_slot: Silence one slot
  - stop_all: Silence every slot
  - load_file: Load a source file
  - run_main: Run the program's main entry point
"""

from pathlib import Path
from typing import Any, Optional

from ..app import app
from ..errors import error_response, markdown_error_response
from ..exceptions import ReplTapError
from ..registry import describe
from ._helpers import build_send_response, read_document


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"execution"}, "description": describe("run-line")},
)
def run_line(state, text: str, context: Optional[str] = None) -> dict[str, Any]:
    """Send one line of source to the interpreter.

    Args:
        state: Application state.
        text: Source line. Literate markers are stripped in literate contexts.
        context: Editing context name from repltap.toml. Defaults to None.

    Returns:
        Markdown formatted result with the sent payload.
    """
    try:
        result = state.dispatcher.run_line(text, context=context)
    except ReplTapError as e:
        return error_response(e)

    return build_send_response(result)


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"execution"}, "description": describe("run-region")},
)
def run_region(
    state,
    text: str = "",
    path: Optional[str] = None,
    start: Optional[int] = None,
    end: Optional[int] = None,
    context: Optional[str] = None,
) -> dict[str, Any]:
    """Send a region as one compound statement wrapped in block markers.

    The region is either given as text or read from a file, optionally
    limited to a line range.

    Args:
        state: Application state.
        text: Region text. Ignored when path is given.
        path: File to read the region from. Defaults to None.
        start: First line of the region (1-based). Defaults to None.
        end: Last line of the region (inclusive). Defaults to None.
        context: Editing context name from repltap.toml. Defaults to None.

    Returns:
        Markdown formatted result with the sent payload.

    Examples:
        run_region("d1 $ sound \\"bd sn\\"\\n  # speed 2")
        run_region(path="live.tidal", start=10, end=14)
    """
    dispatcher = state.dispatcher
    document = None

    try:
        if path:
            document, text = read_document(path, start, end)
        literate = dispatcher.config.is_literate(context, document)
        result = dispatcher.run_region(text, literate=literate, context=context)
    except ReplTapError as e:
        return error_response(e)

    if document:
        return build_send_response(result, document=str(document))
    return build_send_response(result)


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"execution", "slot"}, "description": describe("run-slot")},
)
def run_slot(state, slot: str, path: Optional[str] = None, context: Optional[str] = None) -> dict[str, Any]:
    """Run the block holding the first occurrence of a slot.

    Searches the given file, or the last file loaded with load_file.

    Args:
        state: Application state.
        slot: Slot identifier, e.g. "d1" or "1".
        path: Document to search. Defaults to the loaded document.
        context: Editing context name from repltap.toml. Defaults to None.

    Returns:
        Markdown formatted result with the sent block.
    """
    dispatcher = state.dispatcher
    source = path or state.document

    if not source:
        return markdown_error_response("no document to search; pass path or run load_file first")

    try:
        document, text = read_document(source)
        literate = dispatcher.config.is_literate(context, document)
        result = dispatcher.run_named_slot(slot, text, literate=literate, context=context)
    except ReplTapError as e:
        return error_response(e)

    return build_send_response(result, document=str(document))


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"execution", "slot"}, "description": describe("stop-slot")},
)
def stop_slot(state, slot: str) -> dict[str, Any]:
    """Silence one slot.

    Args:
        state: Application state.
        slot: Slot identifier, e.g. "d1" or "1".

    Returns:
        Markdown formatted result with the sent block.
    """
    try:
        result = state.dispatcher.stop_named_slot(slot)
    except ReplTapError as e:
        return error_response(e)

    return build_send_response(result)


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"execution", "slot"}, "description": describe("stop-all")},
)
def stop_all(state) -> dict[str, Any]:
    """Silence every slot."""
    try:
        result = state.dispatcher.stop_all()
    except ReplTapError as e:
        return error_response(e)

    return build_send_response(result)


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"execution"}, "description": describe("load-file")},
)
def load_file(state, path: str) -> dict[str, Any]:
    """Load a source file into the interpreter.

    The file also becomes the document run_slot searches by default.

    Args:
        state: Application state.
        path: File to load.

    Returns:
        Markdown formatted result with the load command.
    """
    try:
        result = state.dispatcher.load_file(path)
    except ReplTapError as e:
        return error_response(e)

    state.document = Path(path).expanduser().resolve()
    return build_send_response(result, document=str(state.document))


@app.command(
    display="markdown",
    fastmcp={"type": "tool", "tags": {"execution"}, "description": describe("run-main")},
)
def run_main(state) -> dict[str, Any]:
    """Run the program's main entry point."""
    try:
        result = state.dispatcher.run_main()
    except ReplTapError as e:
        return error_response(e)

    return build_send_response(result)
