"""Payload framing for line-oriented interpreter front ends.

A payload is either a single line or a block of lines wrapped in begin/end
markers so the interpreter reads it as one compound statement.

PUBLIC API:
  - FramedPayload: Framed text ready to be cut into chunks
  - frame_line: Frame text as a single unit
  - frame_block: Wrap text in block markers
  - normalize_slot: Turn a user slot reference into its token
  - find_slot_block: Locate the paragraph holding a slot's first occurrence
"""

import re
from dataclasses import dataclass

from ..exceptions import EmptyInputError, SlotNotFoundError
from ..types import Chunk, PayloadKind, SlotID
from .chunker import chunk

__all__ = ["FramedPayload", "frame_line", "frame_block", "normalize_slot", "find_slot_block"]

DEFAULT_BLOCK_BEGIN = ":{"
DEFAULT_BLOCK_END = ":}"


@dataclass(frozen=True)
class FramedPayload:
    """Text framed for transmission.

    Attributes:
        kind: "line" for a single unit, "block" for marker-wrapped text.
        body: Payload body, always terminated by a newline.
        begin: Opening marker for blocks.
        end: Closing marker for blocks.
    """

    kind: PayloadKind
    body: str
    begin: str | None = None
    end: str | None = None

    @property
    def text(self) -> str:
        """Full payload exactly as the subprocess will receive it."""
        if self.kind == "block":
            return f"{self.begin}\n{self.body}{self.end}\n"
        return self.body

    def chunks(self, max_len: int) -> list[Chunk]:
        """Cut the payload into indexed chunks.

        Block markers always travel as whole chunks of their own, whatever
        max_len is. Only the body is subject to max_len.
        """
        pieces = []
        if self.kind == "block":
            pieces.append(f"{self.begin}\n")
        pieces.extend(chunk(self.body, max_len))
        if self.kind == "block":
            pieces.append(f"{self.end}\n")
        return [Chunk(index, piece) for index, piece in enumerate(pieces)]


def _trim(text: str) -> str:
    """Drop trailing line terminators, refusing blank input."""
    trimmed = text.rstrip("\r\n")
    if not trimmed.strip():
        raise EmptyInputError()
    return trimmed


def frame_line(text: str) -> FramedPayload:
    """Frame text as a single unit terminated by one newline.

    Raises:
        EmptyInputError: If text is blank.
    """
    return FramedPayload(kind="line", body=_trim(text) + "\n")


def frame_block(text: str, begin: str = DEFAULT_BLOCK_BEGIN, end: str = DEFAULT_BLOCK_END) -> FramedPayload:
    """Wrap text in block markers.

    Raises:
        EmptyInputError: If text is blank.
    """
    return FramedPayload(kind="block", body=_trim(text) + "\n", begin=begin, end=end)


def normalize_slot(slot: SlotID) -> str:
    """Turn ``3``, ``"3"`` or ``"d3"`` into the slot token ``"d3"``.

    Raises:
        EmptyInputError: If no slot is given.
    """
    if isinstance(slot, int) and not isinstance(slot, bool):
        return f"d{slot}"

    token = str(slot).strip()
    if not token:
        raise EmptyInputError("no slot given")
    if token.isdigit():
        return f"d{token}"
    return token


def _is_blank(line: str) -> bool:
    return not line.strip()


def find_slot_block(document: str, slot: SlotID) -> str:
    """Return the paragraph around the first occurrence of a slot token.

    Paragraphs are separated by blank lines. The token must stand on its own,
    so "d1" does not match inside "d10" or "hd1".

    Args:
        document: Text to search, as supplied by the editor.
        slot: Slot reference.

    Returns:
        The enclosing paragraph, without surrounding blank lines.

    Raises:
        SlotNotFoundError: If the token does not occur.
    """
    token = normalize_slot(slot)
    match = re.search(rf"(?<![\w']){re.escape(token)}(?![\w'])", document)
    if not match:
        raise SlotNotFoundError(token)

    lines = document.splitlines(keepends=True)
    offset = 0
    hit = 0
    for hit, line in enumerate(lines):
        if offset + len(line) > match.start():
            break
        offset += len(line)

    first = hit
    while first > 0 and not _is_blank(lines[first - 1]):
        first -= 1

    last = hit
    while last + 1 < len(lines) and not _is_blank(lines[last + 1]):
        last += 1

    return "".join(lines[first : last + 1])
