"""Session module - the interpreter subprocess and its pipes.

PUBLIC API:
  - Session: Subprocess lifecycle and single-writer stdin transport
  - OutputRelay: Background pump from stdout to a display sink
  - DisplaySink: Protocol for output destinations
  - BufferSink: Thread-safe ring buffer sink
"""

from .process import Session
from .relay import OutputRelay
from .sink import DisplaySink, BufferSink

__all__ = ["Session", "OutputRelay", "DisplaySink", "BufferSink"]
