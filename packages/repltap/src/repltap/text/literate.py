"""Literate source unwrapping."""

__all__ = ["unliterate", "DEFAULT_LITERATE_PREFIX"]

# Bird-track marker used by literate Haskell
DEFAULT_LITERATE_PREFIX = "> "


def _strip_line(line: str, prefix: str) -> str:
    while line.startswith(prefix):
        line = line[len(prefix) :]

    # A bare marker (">" for "> ") is an empty code line
    bare = prefix.rstrip()
    if bare and line.rstrip("\r") == bare:
        line = line[len(bare) :]
    return line


def unliterate(s: str, prefix: str = DEFAULT_LITERATE_PREFIX) -> str:
    """Remove the literate marker from every line that starts with it.

    Unmarked lines pass through untouched and line terminators are kept, so
    the transformation is idempotent.

    Args:
        s: Literate source text.
        prefix: Marker at line start. Empty disables stripping.

    Returns:
        Source with markers removed.
    """
    if not prefix or not s:
        return s
    return "\n".join(_strip_line(line, prefix) for line in s.split("\n"))
