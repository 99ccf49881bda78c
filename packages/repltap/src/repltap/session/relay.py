"""Output relay - pumps interpreter output into a display sink.

PUBLIC API:
  - OutputRelay: Background reader with one-shot end-of-stream callback
"""

import codecs
import logging
import threading
from collections.abc import Callable
from typing import BinaryIO, Optional

from .sink import DisplaySink

__all__ = ["OutputRelay"]

logger = logging.getLogger(__name__)


class OutputRelay:
    """Drains a subprocess output stream on its own daemon thread.

    Every increment is decoded and handed to the sink as soon as it is read.
    When the stream ends the relay closes it and calls ``on_exit`` exactly
    once.
    """

    def __init__(
        self,
        stream: BinaryIO,
        sink: DisplaySink,
        on_exit: Optional[Callable[[], None]] = None,
        encoding: str = "utf-8",
        read_size: int = 4096,
        name: str = "repltap-relay",
    ):
        """Initialize relay.

        Args:
            stream: Readable binary stream (subprocess stdout).
            sink: Display sink receiving decoded text.
            on_exit: Called once when the stream ends.
            encoding: Output encoding. Invalid bytes are replaced.
            read_size: Maximum bytes per read.
            name: Thread name.
        """
        self.stream = stream
        self.sink = sink
        self.on_exit = on_exit
        self.encoding = encoding
        self.read_size = read_size
        self.bytes_read = 0

        self._thread = threading.Thread(target=self._pump, name=name, daemon=True)
        self._finished = threading.Event()

    def start(self) -> None:
        """Start pumping."""
        self._thread.start()

    @property
    def is_alive(self) -> bool:
        return self._thread.is_alive()

    @property
    def finished(self) -> bool:
        """True once the stream has ended and on_exit has been called."""
        return self._finished.is_set()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the pump to finish.

        Returns:
            True if the relay finished within timeout.
        """
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def _read(self) -> bytes:
        read1 = getattr(self.stream, "read1", None)
        if read1 is not None:
            return read1(self.read_size)
        return self.stream.read(self.read_size)

    def _forward(self, text: str) -> None:
        if not text:
            return
        try:
            self.sink.write(text)
        except Exception as e:
            logger.error(f"Display sink failed: {e}")

    def _pump(self) -> None:
        decoder = codecs.getincrementaldecoder(self.encoding)(errors="replace")
        try:
            while True:
                data = self._read()
                if not data:
                    break
                self.bytes_read += len(data)
                self._forward(decoder.decode(data))
            self._forward(decoder.decode(b"", final=True))
        except (OSError, ValueError) as e:
            # Stream closed underneath us during shutdown
            logger.debug(f"Relay stopped reading: {e}")
        finally:
            try:
                self.stream.close()
            except OSError as e:
                logger.debug(f"Failed to close output stream: {e}")

            logger.debug(f"Relay finished after {self.bytes_read} bytes")
            self._finished.set()
            if self.on_exit:
                try:
                    self.on_exit()
                except Exception as e:
                    logger.error(f"Exit notification failed: {e}")
