"""Dispatcher - named live-coding operations on top of a Session.

Every operation transforms caller text, frames it, cuts it into chunks and
hands the chunks to the session in one contiguous write. Results only say the
text was accepted by the interpreter's input; evaluation is fire and forget.

PUBLIC API:
  - Dispatcher: High-level operations over one interpreter session
"""

import logging
import time
from pathlib import Path
from typing import Optional

from .config import ReplConfig
from .exceptions import DocumentNotFoundError
from .session import BufferSink, DisplaySink, Session
from .text import FramedPayload, find_slot_block, frame_block, frame_line, normalize_slot, unliterate
from .types import SendResult, SessionState, SlotID, TextMode

__all__ = ["Dispatcher"]

logger = logging.getLogger(__name__)


def _fill(template: str, **fields: object) -> str:
    """Substitute ``{name}`` placeholders; other braces such as Haskell's
    ``{- comment -}`` pass through untouched."""
    for name, value in fields.items():
        template = template.replace(f"{{{name}}}", str(value))
    return template


class Dispatcher:
    """Translates operations into framed payloads for one Session.

    Attributes:
        config: Session settings.
        sink: Display sink the session's output relay writes to.
        session: The interpreter session owned by this dispatcher.
    """

    def __init__(
        self,
        config: Optional[ReplConfig] = None,
        sink: Optional[DisplaySink] = None,
        session: Optional[Session] = None,
    ):
        """Initialize dispatcher.

        Args:
            config: Session settings. Defaults to ReplConfig().
            sink: Output sink. Defaults to a BufferSink sized from config.
            session: Prebuilt session, mainly for tests. Built from config
                when omitted.
        """
        self.config = config or ReplConfig()
        self.sink = sink if sink is not None else BufferSink(self.config.max_output_lines)
        self.session = session or Session.from_config(self.config, self.sink)

    @property
    def state(self) -> SessionState:
        return self.session.state

    # Lifecycle

    def start(self) -> Optional[SendResult]:
        """Start the interpreter, sending the boot command first if configured.

        Returns:
            SendResult for the boot command, or None without a boot script.
        """
        boot = self._boot_payload()
        started = time.time()

        if boot is None:
            self.session.start()
            return None

        chunks = boot.chunks(self.config.chunk_size)
        self.session.start(boot=chunks)
        return self._result("boot", boot, len(chunks), started)

    def stop(self) -> Optional[int]:
        """Stop the interpreter. Returns its exit code."""
        return self.session.stop()

    def interrupt(self) -> None:
        """Interrupt whatever the interpreter is evaluating."""
        self.session.interrupt()

    # Sending

    def run_line(self, text: str, literate: Optional[bool] = None, context: Optional[str] = None) -> SendResult:
        """Send text as a single unit.

        Raises:
            EmptyInputError: If nothing is left after transformation.
        """
        payload = frame_line(self._transform(text, literate, context))
        return self._send("run-line", payload)

    def run_region(self, text: str, literate: Optional[bool] = None, context: Optional[str] = None) -> SendResult:
        """Send text as one compound block wrapped in block markers."""
        payload = frame_block(
            self._transform(text, literate, context),
            self.config.block_begin,
            self.config.block_end,
        )
        return self._send("run-region", payload)

    def run_named_slot(
        self,
        slot: SlotID,
        document: str,
        literate: Optional[bool] = None,
        context: Optional[str] = None,
    ) -> SendResult:
        """Run the paragraph holding the first occurrence of a slot.

        Args:
            slot: Slot reference, e.g. "d1" or 1.
            document: Search scope supplied by the caller.

        Raises:
            SlotNotFoundError: If the slot does not occur in document.
        """
        block = find_slot_block(document, slot)
        payload = frame_block(
            self._transform(block, literate, context),
            self.config.block_begin,
            self.config.block_end,
        )
        return self._send(f"run-slot {normalize_slot(slot)}", payload)

    def stop_named_slot(self, slot: SlotID) -> SendResult:
        """Silence one slot."""
        token = normalize_slot(slot)
        payload = frame_block(
            _fill(self.config.silence_template, slot=token),
            self.config.block_begin,
            self.config.block_end,
        )
        return self._send(f"stop-slot {token}", payload)

    def stop_all(self) -> SendResult:
        """Silence everything."""
        return self._send("stop-all", frame_line(self.config.stop_all_command))

    def load_file(self, path: Path | str) -> SendResult:
        """Ask the interpreter to load a source file.

        Raises:
            DocumentNotFoundError: If path is not a file.
        """
        resolved = Path(path).expanduser().resolve()
        if not resolved.is_file():
            raise DocumentNotFoundError(f"no such file: {path}")
        return self._send("load-file", frame_line(_fill(self.config.load_template, path=resolved)))

    def run_main(self) -> SendResult:
        """Invoke the program's main entry point."""
        return self._send("run-main", frame_line(self.config.main_command))

    # Internals

    def _boot_payload(self) -> Optional[FramedPayload]:
        boot_script = self.config.boot_script
        if boot_script is None:
            return None
        return frame_line(_fill(self.config.boot_template, path=boot_script))

    def _transform(self, text: str, literate: Optional[bool], context: Optional[str]) -> str:
        if literate is None:
            literate = self.config.is_literate(context)
        if TextMode.from_flag(literate) is TextMode.RAW:
            return text
        return unliterate(text, self.config.literate_prefix_for(context))

    def _send(self, operation: str, payload: FramedPayload) -> SendResult:
        started = time.time()
        chunks = payload.chunks(self.config.chunk_size)
        self.session.write_chunks(chunks)
        result = self._result(operation, payload, len(chunks), started)
        logger.debug(f"{operation}: sent {result.chunks} chunks ({len(result.payload)} chars)")
        return result

    def _result(self, operation: str, payload: FramedPayload, chunks: int, started: float) -> SendResult:
        return SendResult(
            operation=operation,
            payload=payload.text,
            chunks=chunks,
            elapsed=time.time() - started,
        )
