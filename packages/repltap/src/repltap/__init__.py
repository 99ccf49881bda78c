"""Live-coding interpreter session manager with MCP support.

Owns one long-running interpreter subprocess and feeds it lines, regions and
slot blocks from source documents, chunked and framed so line-oriented
front ends accept them. Built on ReplKit2 for dual REPL/MCP functionality.

PUBLIC API:
  - app: ReplKit2 application instance with repltap commands
  - Dispatcher: High-level operations over one interpreter session
  - Session: Subprocess lifecycle and stdin transport
  - ReplConfig: Session settings
"""

from .app import app
from .config import ReplConfig
from .dispatcher import Dispatcher
from .session import Session

__version__ = "0.1.0"
__all__ = ["app", "Dispatcher", "Session", "ReplConfig"]
