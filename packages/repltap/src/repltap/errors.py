"""Shared error handling utilities for repltap commands.

Commands catch ReplTapError at their boundary and turn it into a display
response; nothing propagates to the REPL loop or the MCP server.

PUBLIC API:
  - markdown_error_response: Create error response for markdown display
  - table_error_response: Create error response for table display
  - codeblock_error_response: Create error response for codeblock display
  - error_response: Map a ReplTapError to a markdown response
"""

from logging import getLogger
from typing import Any

from .exceptions import EmptyInputError, ReplTapError
from .types import SendStatus

logger = getLogger(__name__)


def markdown_error_response(message: str, status: SendStatus = "error") -> dict[str, Any]:
    """Create error response for markdown display commands.

    Args:
        message: The error message to display
        status: Frontmatter status value

    Returns:
        Markdown display dict with error element
    """
    prefix = "Error: " if status == "error" else ""
    return {
        "elements": [{"type": "text", "content": f"{prefix}{message}"}],
        "frontmatter": {"error": message, "status": status} if status == "error" else {"status": status},
    }


def table_error_response(message: str) -> list[dict[str, Any]]:
    """Create error response for table display commands.

    Args:
        message: The error message (will be logged)

    Returns:
        Empty list (tables show nothing on error)
    """
    logger.warning(f"Command failed: {message}")
    return []


def codeblock_error_response(message: str) -> dict[str, Any]:
    """Create error response for codeblock display commands."""
    return {"content": f"Error: {message}", "process": "text", "status": "error"}


def error_response(error: ReplTapError) -> dict[str, Any]:
    """Map a repltap exception to a markdown response.

    Empty input is a skipped no-op, reported with status "empty".
    """
    if isinstance(error, EmptyInputError):
        return markdown_error_response(f"Nothing sent: {error}", status="empty")

    logger.warning(f"Command failed: {error}")
    return markdown_error_response(str(error))
