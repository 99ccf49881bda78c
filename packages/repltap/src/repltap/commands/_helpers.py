"""Shared helper functions for commands.

PUBLIC API:
  - build_hint: Build "check output" hint for send commands
  - build_send_response: Build markdown response for an accepted send
  - read_document: Read a document file for region and slot commands
"""

from pathlib import Path
from typing import Any, Optional

from ..exceptions import DocumentNotFoundError
from ..types import SendResult

__all__ = ["build_hint", "build_send_response", "read_document"]

# Longest payload echoed back in full
PREVIEW_CHARS = 400


def build_hint() -> dict[str, str]:
    """Build "check output" hint for send commands.

    Returns:
        Markdown blockquote element with hint
    """
    return {
        "type": "blockquote",
        "content": "Use `output()` to see what the interpreter printed",
    }


def build_send_response(result: SendResult, **frontmatter: Any) -> dict[str, Any]:
    """Build markdown response for an accepted send.

    Args:
        result: Send acknowledgement from the dispatcher
        **frontmatter: Extra frontmatter fields

    Returns:
        Markdown display dict with the payload preview
    """
    preview = result.payload.rstrip("\n")
    if len(preview) > PREVIEW_CHARS:
        preview = preview[:PREVIEW_CHARS] + "\n..."

    return {
        "elements": [{"type": "code_block", "content": preview, "language": "text"}, build_hint()],
        "frontmatter": {
            "action": result.operation,
            "status": "sent",
            "lines": result.lines,
            "chunks": result.chunks,
            "elapsed": round(result.elapsed, 3),
            **frontmatter,
        },
    }


def read_document(path: str | Path, start: Optional[int] = None, end: Optional[int] = None) -> tuple[Path, str]:
    """Read a document, optionally only lines start..end (1-based, inclusive).

    Args:
        path: File to read
        start: First line, defaults to the beginning
        end: Last line, defaults to the end

    Returns:
        (resolved path, text)

    Raises:
        DocumentNotFoundError: If path is not a readable file
    """
    resolved = Path(path).expanduser().resolve()
    if not resolved.is_file():
        raise DocumentNotFoundError(f"no such file: {path}")

    try:
        text = resolved.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DocumentNotFoundError(f"cannot read {path}: {e}") from e

    if start is None and end is None:
        return resolved, text

    lines = text.splitlines(keepends=True)
    first = max((start or 1) - 1, 0)
    last = len(lines) if end is None else end
    return resolved, "".join(lines[first:last])
