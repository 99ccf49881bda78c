"""Type definitions for repltap - session-first architecture.

One interpreter subprocess per session. Everything sent to it is a framed
payload cut into indexed chunks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Literal


# Slot identifiers as typed by the user, e.g. "d3" or 3
type SlotID = str | int

# Payload shapes understood by the framing layer
type PayloadKind = Literal["line", "block"]

# Command result states reported to the REPL/MCP surface
type SendStatus = Literal["sent", "empty", "error"]


class SessionState(Enum):
    """Lifecycle of the interpreter subprocess."""

    STOPPED = "stopped"
    STARTING = "starting"
    RUNNING = "running"


class TextMode(Enum):
    """How caller text is treated before framing."""

    RAW = "raw"
    LITERATE = "literate"

    @classmethod
    def from_flag(cls, literate: bool) -> "TextMode":
        return cls.LITERATE if literate else cls.RAW


@dataclass(frozen=True)
class Chunk:
    """A bounded slice of a framed payload.

    Attributes:
        index: Position within the payload, starting at 0.
        text: The slice itself.
    """

    index: int
    text: str

    def __len__(self) -> int:
        return len(self.text)


@dataclass(frozen=True)
class SendResult:
    """Synchronous acknowledgement of an accepted send.

    Only says the payload reached the subprocess input, never how the
    interpreter evaluated it.
    """

    operation: str
    payload: str
    chunks: int
    elapsed: float

    @property
    def lines(self) -> int:
        return self.payload.count("\n")
