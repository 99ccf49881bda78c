"""Text preparation - everything that happens before bytes hit stdin.

PUBLIC API:
  - chunk: Partition a string into bounded pieces
  - unliterate: Strip literate line markers
  - FramedPayload: Framed text ready for chunking
  - frame_line: Frame text as a single unit
  - frame_block: Wrap text in block markers
  - normalize_slot: Normalize slot references to tokens
  - find_slot_block: Locate a slot's enclosing paragraph
"""

from .chunker import chunk, DEFAULT_CHUNK_SIZE
from .literate import unliterate, DEFAULT_LITERATE_PREFIX
from .framing import (
    FramedPayload,
    frame_line,
    frame_block,
    normalize_slot,
    find_slot_block,
    DEFAULT_BLOCK_BEGIN,
    DEFAULT_BLOCK_END,
)

__all__ = [
    "chunk",
    "unliterate",
    "FramedPayload",
    "frame_line",
    "frame_block",
    "normalize_slot",
    "find_slot_block",
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_LITERATE_PREFIX",
    "DEFAULT_BLOCK_BEGIN",
    "DEFAULT_BLOCK_END",
]
