"""repltap exceptions.

PUBLIC API:
  - ReplTapError: Base exception for all repltap operations
  - AlreadyRunningError: Session start requested while one is active
  - NotRunningError: Operation requires a running session
  - TransportClosedError: Subprocess input went away mid-session
  - SpawnFailedError: Interpreter could not be launched
  - EmptyInputError: Nothing to send
  - EncodingError: Input not representable in the session encoding
  - SlotNotFoundError: Slot token not present in the supplied document
  - DocumentNotFoundError: File to load or search does not exist
  - ConfigError: Invalid repltap.toml value
"""


class ReplTapError(Exception):
    """Base exception for all repltap operations."""

    pass


class AlreadyRunningError(ReplTapError):
    """Raised when starting a session that is not stopped."""

    def __init__(self, message: str = "a session is already running"):
        super().__init__(message)


class NotRunningError(ReplTapError):
    """Raised when an operation needs a running session and there is none."""

    def __init__(self, message: str = "no session running"):
        super().__init__(message)


class TransportClosedError(ReplTapError):
    """Raised when the subprocess input can no longer be written."""

    pass


class SpawnFailedError(ReplTapError):
    """Raised when the interpreter executable cannot be started."""

    pass


class EmptyInputError(ReplTapError):
    """Raised when there is no text to send."""

    def __init__(self, message: str = "nothing to send"):
        super().__init__(message)


class EncodingError(ReplTapError):
    """Raised when input text cannot be encoded for the interpreter."""

    pass


class SlotNotFoundError(EmptyInputError):
    """Raised when a slot token does not occur in the searched document."""

    def __init__(self, slot: str):
        self.slot = slot
        super().__init__(f"slot {slot} not found in document")


class DocumentNotFoundError(ReplTapError):
    """Raised when a document path does not point at a file."""

    pass


class ConfigError(ReplTapError):
    """Raised for invalid configuration values."""

    pass
