"""Keys command - show the command registry."""

from ..app import app
from ..errors import table_error_response
from ..registry import describe, key_bindings


@app.command(
    display="table",
    headers=["Operation", "Command", "Key", "Menu", "Description"],
    fastmcp={"type": "resource", "mime_type": "text/markdown", "description": describe("keys")},
)
def keys(state):
    """List operations with their key bindings and menu entries."""
    try:
        rows = key_bindings(state.dispatcher.config.keys)
    except KeyError as e:
        return table_error_response(str(e))

    return [
        {
            "Operation": entry.name,
            "Command": entry.command,
            "Key": entry.key,
            "Menu": entry.menu,
            "Description": entry.description,
        }
        for entry in rows
    ]
