"""Custom formatters for repltap displays."""

from typing import Any
from replkit2.types.core import CommandMeta
from replkit2.textkit.formatter import TextFormatter

from .app import app


@app.formatter.register("codeblock")  # pyright: ignore[reportAttributeAccessIssue]
def format_codeblock(data: Any, meta: CommandMeta, formatter: TextFormatter) -> str:
    """Render interpreter output as a fenced block, newest lines last.

    Expects data dict with:
    - content: Output text
    - process: Fence language hint (optional)
    - state: Session state; anything but "running" is noted under the block

    Other fields preserved for programmatic use.
    """
    if not isinstance(data, dict) or "content" not in data:
        return f"```\n{data}\n```"

    fence = data.get("process") or "text"
    content = str(data.get("content") or "").rstrip()
    block = f"```{fence}\n{content or '[No output]'}\n```"

    state = data.get("state")
    if state and state != "running":
        block += f"\n[session {state}]"
    return block
