"""Command registry - operation names, key bindings and menu entries.

Pure configuration. Editors bind ``key`` to the operation; the REPL and MCP
surfaces use ``command`` and ``description``.

PUBLIC API:
  - CommandEntry: One row of the registry
  - COMMANDS: The static registry table
  - get_entry: Look up an entry by operation or command name
  - describe: Description for an operation
  - key_bindings: Registry rows with user key overrides applied
"""

from dataclasses import dataclass, replace
from typing import Mapping, Optional

__all__ = ["CommandEntry", "COMMANDS", "get_entry", "describe", "key_bindings"]


@dataclass(frozen=True)
class CommandEntry:
    """Operation name mapped to its bindings."""

    name: str  # e.g. "run-line"
    command: str  # replkit2 command function, e.g. "run_line"
    key: str
    menu: str
    description: str


COMMANDS: tuple[CommandEntry, ...] = (
    CommandEntry("start", "start", "C-c C-s", "Start interpreter", "Start the interpreter session"),
    CommandEntry("stop", "stop", "C-c C-q", "Quit interpreter", "Stop the interpreter session"),
    CommandEntry("interrupt", "interrupt", "C-c C-i", "Interrupt", "Interrupt the current evaluation"),
    CommandEntry("run-line", "run_line", "C-c C-c", "Run line", "Send one line to the interpreter"),
    CommandEntry("run-region", "run_region", "C-c C-r", "Run region", "Send a block of lines as one statement"),
    CommandEntry("run-slot", "run_slot", "C-c C-<n>", "Run slot", "Run the block that defines slot d<n>"),
    CommandEntry("stop-slot", "stop_slot", "C-v C-<n>", "Stop slot", "Silence slot d<n>"),
    CommandEntry("stop-all", "stop_all", "C-c C-h", "Hush", "Silence every slot"),
    CommandEntry("load-file", "load_file", "C-c C-l", "Load file", "Load a source file into the interpreter"),
    CommandEntry("run-main", "run_main", "C-c C-m", "Run main", "Run the program's main entry point"),
    CommandEntry("output", "output", "C-c C-v", "See output", "Show the newest interpreter output"),
    CommandEntry("status", "status", "C-c C-?", "Status", "Show session state"),
    CommandEntry("keys", "keys", "C-c C-k", "Key bindings", "List operations and their key bindings"),
)


def get_entry(name: str) -> Optional[CommandEntry]:
    """Look up an entry by operation name ("run-line") or command ("run_line")."""
    for entry in COMMANDS:
        if name in (entry.name, entry.command):
            return entry
    return None


def describe(name: str) -> str:
    """Get the description for an operation.

    Raises:
        KeyError: If the operation is not registered.
    """
    entry = get_entry(name)
    if entry is None:
        raise KeyError(f"Unknown operation: {name}")
    return entry.description


def key_bindings(overrides: Optional[Mapping[str, str]] = None) -> list[CommandEntry]:
    """Registry rows with key overrides applied.

    Args:
        overrides: Operation or command name to key, e.g. {"run-line": "C-RET"}.

    Raises:
        KeyError: If an override names an unknown operation.
    """
    overrides = dict(overrides or {})
    for name in overrides:
        if get_entry(name) is None:
            raise KeyError(f"Unknown operation in key overrides: {name}")

    rows = []
    for entry in COMMANDS:
        key = overrides.get(entry.name, overrides.get(entry.command, entry.key))
        rows.append(replace(entry, key=key))
    return rows
