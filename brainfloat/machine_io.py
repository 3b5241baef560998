"""
I/O collaborators for the Brainfloat interpreter.

The interpreter talks to the outside world only through a ``MachineIO``:
it asks for input bytes, hands over output bytes and memory dumps, and
polls for cancellation.
"""

import asyncio
import sys
import threading
from typing import List, Optional, Sequence, Tuple


class _Cancelled:
    """Marker returned from ``request_input_byte`` to stop execution."""

    def __repr__(self):
        return "CANCELLED"


CANCELLED = _Cancelled()

DUMP_ROW_WIDTH = 8


def format_memory_dump(tape: Sequence[int], pointer: int) -> str:
    """Render the tape as hex cells, eight per row, with '>' at the pointer."""
    rows = []
    for start in range(0, len(tape), DUMP_ROW_WIDTH):
        cells = []
        for index in range(start, min(start + DUMP_ROW_WIDTH, len(tape))):
            marker = ">" if index == pointer else " "
            cells.append(f"{marker}{tape[index]:02x}")
        rows.append(f"{start:04x}:" + "".join(cells))
    return "\n".join(rows)


class MachineIO:
    """
    Base I/O contract. With no overrides, input always reads 0 and
    output and dumps are dropped.
    """

    async def request_input_byte(self):
        """Return the next input value, or CANCELLED."""
        return 0

    def emit_output_byte(self, value: int):
        pass

    def emit_memory_dump(self, tape: Sequence[int], pointer: int):
        pass

    def is_cancellation_requested(self) -> bool:
        return False


class QueueIO(MachineIO):
    """
    In-memory I/O backed by an asyncio queue.

    Input can be fed while the program runs; ``cancel()`` wakes a pending
    input request with CANCELLED. When ``eof`` is set, an empty queue yields
    that value instead of waiting.
    """

    def __init__(self, data: bytes = b"", eof=None):
        self.inputs: asyncio.Queue = asyncio.Queue()
        self.eof = eof
        self.cancelled = False
        self.input_requests = 0
        self.output: List[int] = []
        self.dumps: List[Tuple[List[int], int]] = []
        self.feed(data)

    def feed(self, data: bytes):
        for value in data:
            self.inputs.put_nowait(value)

    def cancel(self):
        self.cancelled = True
        self.inputs.put_nowait(CANCELLED)

    async def request_input_byte(self):
        self.input_requests += 1
        if self.cancelled:
            return CANCELLED
        if self.inputs.empty() and self.eof is not None:
            return self.eof
        return await self.inputs.get()

    def emit_output_byte(self, value: int):
        self.output.append(value)

    def emit_memory_dump(self, tape: Sequence[int], pointer: int):
        self.dumps.append((list(tape), pointer))

    def is_cancellation_requested(self) -> bool:
        return self.cancelled

    def output_bytes(self) -> bytes:
        return bytes(value & 0xFF for value in self.output)


class StreamIO(MachineIO):
    """
    Text-stream I/O for terminals: one character per cell value.
    End of input reads as 0. Dumps go to ``dump_stream``.

    Each input request reads on a daemon thread, so a cancelled request
    can be abandoned while the read is still blocked.
    """

    def __init__(self, input_stream=None, output_stream=None, dump_stream=None):
        self.input_stream = input_stream or sys.stdin
        self.output_stream = output_stream or sys.stdout
        self.dump_stream = dump_stream or sys.stderr
        self.cancelled = False
        self.reader: Optional[threading.Thread] = None
        self._pending = None

    def cancel(self):
        """Request cancellation; safe to call from a signal handler."""
        self.cancelled = True
        pending = self._pending
        if pending is not None:
            loop, future = pending
            loop.call_soon_threadsafe(_settle, future, CANCELLED)

    async def request_input_byte(self):
        if self.cancelled:
            return CANCELLED
        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._pending = (loop, future)
        self.reader = threading.Thread(target=self._read, args=(loop, future), daemon=True)
        self.reader.start()
        try:
            char = await future
        finally:
            self._pending = None
        if char is CANCELLED or self.cancelled:
            return CANCELLED
        if not char:
            return 0
        return ord(char)

    def _read(self, loop, future):
        try:
            result = self.input_stream.read(1)
        except (OSError, ValueError) as e:
            result = e
        try:
            loop.call_soon_threadsafe(_settle, future, result)
        except RuntimeError:
            # The loop has closed: the request was cancelled and abandoned.
            pass

    def emit_output_byte(self, value: int):
        self.output_stream.write(chr(value % 0x110000))
        self.output_stream.flush()

    def emit_memory_dump(self, tape: Sequence[int], pointer: int):
        print(format_memory_dump(tape, pointer), file=self.dump_stream)
        self.dump_stream.flush()

    def is_cancellation_requested(self) -> bool:
        return self.cancelled


def _settle(future, result):
    if future.done():
        return
    if isinstance(result, BaseException):
        future.set_exception(result)
    else:
        future.set_result(result)
