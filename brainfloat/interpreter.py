"""
Interpreter for Brainfloat instruction trees.

Execution walks an explicit stack of frames rather than recursing, so the
engine can suspend between any two instructions (on input, or to yield to
the event loop) and resume with its whole state intact.
"""

import asyncio
import logging
import time
from typing import List, Optional

from .ast_nodes import Counter, Instruction, InstructionKind
from .config import ExecutionConfig
from .errors import RuntimeError
from .machine_io import CANCELLED, MachineIO


logger = logging.getLogger(__name__)


class Tape:
    """Right-growing memory with a selected cell."""

    def __init__(self):
        self.cells: List[int] = [0]
        self.pointer = 0

    @property
    def value(self) -> int:
        return self.cells[self.pointer]

    @value.setter
    def value(self, value: int):
        self.cells[self.pointer] = value

    def move_left(self):
        if self.pointer > 0:
            self.pointer -= 1

    def move_right(self):
        self.pointer += 1
        if len(self.cells) <= self.pointer:
            self.cells.append(0)

    def __len__(self):
        return len(self.cells)


class Frame:
    """A block being executed and the index of its next instruction."""

    __slots__ = ("block", "cursor")

    def __init__(self, block: List[Instruction], cursor: int = 0):
        self.block = block
        self.cursor = cursor

    def at_end(self) -> bool:
        return self.cursor == len(self.block)

    def __repr__(self):
        return f"Frame(cursor={self.cursor}/{len(self.block)})"


class Interpreter:
    """
    Tape machine for parsed Brainfloat programs.
    One execution at a time; use separate instances to run programs side by side.
    """

    def __init__(self, config: Optional[ExecutionConfig] = None, io: Optional[MachineIO] = None):
        self.config = config or ExecutionConfig()
        self.io = io or MachineIO()
        self.wrap = self.config.wrap_function()
        self.tape = Tape()
        self.frames: List[Frame] = []
        self.running = False
        self.cancelled = False
        self.steps = 0
        self.last_yield = 0.0

    async def execute(self, program: List[Instruction]):
        """Run a program to completion or cancellation."""
        if self.running:
            raise RuntimeError("Interpreter is already executing a program")

        self.running = True
        self.cancelled = False
        self.tape = Tape()
        self.frames = [Frame(program)]
        self.steps = 0
        self.last_yield = time.monotonic()
        logger.debug("Starting execution of %d instructions", Counter().count(program))

        try:
            await self._run()
        finally:
            self.running = False

        if self.cancelled:
            logger.debug("Execution cancelled after %d steps", self.steps)
        else:
            logger.debug("Execution finished after %d steps", self.steps)

    async def _run(self):
        frames = self.frames
        tape = self.tape
        io = self.io
        wrap = self.wrap

        while frames:
            frame = frames[-1]

            if frame.at_end():
                # The top-level block ends the program; there is nothing left to cancel.
                if len(frames) == 1:
                    frames.pop()
                    continue
                if await self._end_of_body():
                    return
                if tape.value != 0:
                    frame.cursor = 0
                else:
                    frames.pop()
                continue

            instruction = frame.block[frame.cursor]
            frame.cursor += 1
            self.steps += 1
            kind = instruction.kind

            if kind is InstructionKind.INCREMENT:
                tape.value = wrap(tape.value + 1)
            elif kind is InstructionKind.DECREMENT:
                tape.value = wrap(tape.value - 1)
            elif kind is InstructionKind.MOVE_LEFT:
                tape.move_left()
            elif kind is InstructionKind.MOVE_RIGHT:
                tape.move_right()
            elif kind is InstructionKind.OUTPUT:
                io.emit_output_byte(tape.value)
            elif kind is InstructionKind.INPUT:
                value = await io.request_input_byte()
                if value is CANCELLED:
                    self.cancelled = True
                    return
                tape.value = wrap(value)
                self.last_yield = time.monotonic()
            elif kind is InstructionKind.DUMP:
                io.emit_memory_dump(tape.cells, tape.pointer)
            elif kind is InstructionKind.LOOP:
                if tape.value != 0:
                    frames.append(Frame(instruction.body))

    async def _end_of_body(self) -> bool:
        """Yield and poll for cancellation. Returns True if execution must stop."""
        if self.io.is_cancellation_requested():
            self.cancelled = True
            return True

        if self.config.yields:
            now = time.monotonic()
            if (now - self.last_yield) * 1000 > self.config.yield_interval_ms:
                await asyncio.sleep(0)
                self.last_yield = now
                if self.io.is_cancellation_requested():
                    self.cancelled = True
                    return True
        return False
