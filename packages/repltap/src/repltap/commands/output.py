"""Read interpreter output.

PUBLIC API:
  - output: Show the newest interpreter output
"""

from typing import Any

from ..app import app
from ..errors import codeblock_error_response
from ..registry import describe


@app.command(
    display="codeblock",
    fastmcp={"type": "tool", "tags": {"inspection", "output"}, "description": describe("output")},
)
def output(state, lines: int = 50, since_last: bool = False) -> dict[str, Any]:
    """Show the newest interpreter output.

    Output keeps arriving in the background; this reads what the relay has
    buffered so far.

    Args:
        state: Application state.
        lines: Number of newest lines to show. Defaults to 50.
        since_last: Only show output since the previous since_last read.
            Defaults to False.

    Returns:
        Rich data dict:
        - Display fields: content, process, state
        - Metadata: lines, buffered
    """
    dispatcher = state.dispatcher
    sink = dispatcher.sink

    if not hasattr(sink, "tail"):
        return codeblock_error_response("display sink does not keep output")

    content = sink.read_since_last() if since_last else sink.tail(lines)

    return {
        "content": content,
        "process": "text",
        "state": dispatcher.state.value,
        "lines": lines,
        "buffered": sink.line_count,
    }
