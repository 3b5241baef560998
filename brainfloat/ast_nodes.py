"""
Instruction tree definitions for Brainfloat.
A parsed program is a list of instructions; loops own their body.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import List


class InstructionKind(Enum):
    INCREMENT = "+"
    DECREMENT = "-"
    MOVE_LEFT = "<"
    MOVE_RIGHT = ">"
    OUTPUT = "."
    INPUT = ","
    DUMP = "~"
    LOOP = "["


# Leaf kinds keyed by their wire symbol
COMMAND_SYMBOLS = {
    kind.value: kind for kind in InstructionKind if kind is not InstructionKind.LOOP
}


class Instruction(ABC):
    """Base class for all instruction nodes."""

    kind: InstructionKind

    @abstractmethod
    def accept(self, visitor):
        """Accept visitor for visitor pattern implementation."""
        pass


class Command(Instruction):
    """A single non-loop instruction."""

    def __init__(self, kind: InstructionKind):
        self.kind = kind

    def accept(self, visitor):
        return visitor.visit_command(self)

    def __eq__(self, other):
        return isinstance(other, Command) and other.kind == self.kind

    def __repr__(self):
        return f"Command({self.kind.name})"


class Loop(Instruction):
    """A loop and the instructions in its body."""

    kind = InstructionKind.LOOP

    def __init__(self, body: List[Instruction] = None):
        self.body = body if body is not None else []

    def accept(self, visitor):
        return visitor.visit_loop(self)

    def __eq__(self, other):
        return isinstance(other, Loop) and other.body == self.body

    def __repr__(self):
        return f"Loop({self.body!r})"


class InstructionVisitor(ABC):
    """Abstract visitor for instruction trees."""

    @abstractmethod
    def visit_command(self, node: Command):
        pass

    @abstractmethod
    def visit_loop(self, node: Loop):
        pass


class SourceWriter(InstructionVisitor):
    """Renders an instruction tree back into wire-format text."""

    def write(self, block: List[Instruction]) -> str:
        return "".join(node.accept(self) for node in block)

    def visit_command(self, node: Command) -> str:
        return node.kind.value

    def visit_loop(self, node: Loop) -> str:
        return "[" + self.write(node.body) + "]"


class Counter(InstructionVisitor):
    """Counts the instructions in a tree, loops included."""

    def count(self, block: List[Instruction]) -> int:
        return sum(node.accept(self) for node in block)

    def visit_command(self, node: Command) -> int:
        return 1

    def visit_loop(self, node: Loop) -> int:
        return 1 + self.count(node.body)
