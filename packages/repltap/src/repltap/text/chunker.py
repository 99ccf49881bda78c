"""Split outgoing text into pieces the interpreter front end can swallow.

PUBLIC API:
  - chunk: Partition a string into pieces of bounded length
  - DEFAULT_CHUNK_SIZE: Safe per-write size for line-oriented front ends
"""

__all__ = ["chunk", "DEFAULT_CHUNK_SIZE"]

DEFAULT_CHUNK_SIZE = 64


def _cut_point(s: str, start: int, max_len: int) -> int:
    """Find where the piece starting at ``start`` should end.

    Prefers the position just after the last newline in the window. Falls
    back to a hard cut, stepping back one character rather than separating a
    CRLF pair.
    """
    end = start + max_len
    if end >= len(s):
        return len(s)

    newline = s.rfind("\n", start, end)
    if newline > start:
        return newline + 1

    if max_len > 1 and s[end - 1] == "\r" and s[end] == "\n":
        return end - 1
    return end


def chunk(s: str, max_len: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Partition ``s`` into ordered pieces no longer than ``max_len``.

    Joining the result gives back ``s`` exactly. Empty input yields an empty
    list.

    Args:
        s: Text to split.
        max_len: Maximum characters per piece. Must be positive.

    Returns:
        Ordered, non-overlapping pieces of ``s``.

    Raises:
        ValueError: If max_len is not a positive integer.
    """
    if isinstance(max_len, bool) or not isinstance(max_len, int) or max_len < 1:
        raise ValueError(f"max_len must be a positive integer, got {max_len!r}")

    pieces = []
    start = 0
    while start < len(s):
        end = _cut_point(s, start, max_len)
        pieces.append(s[start:end])
        start = end
    return pieces
