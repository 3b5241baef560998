"""
Parser for Brainfloat instruction text.
Turns a flat symbol string into a nested instruction tree.
"""

from typing import List

from .ast_nodes import COMMAND_SYMBOLS, Command, Instruction, Loop
from .errors import UnmatchedBracket


class Parser:
    """
    Stack-based parser: one open block per unclosed ``[``.
    Characters outside the instruction alphabet are ignored.
    """

    def __init__(self, source: str):
        self.source = source

    def parse(self) -> List[Instruction]:
        """Parse the source, failing on unbalanced brackets."""
        program: List[Instruction] = []
        stack = [program]

        for position, char in enumerate(self.source):
            block = stack[-1]

            kind = COMMAND_SYMBOLS.get(char)
            if kind is not None:
                block.append(Command(kind))
            elif char == "[":
                loop = Loop()
                block.append(loop)
                stack.append(loop.body)
            elif char == "]":
                if len(stack) == 1:
                    raise UnmatchedBracket("Unmatched close bracket", position=position)
                stack.pop()

        if len(stack) > 1:
            raise UnmatchedBracket(f"Unmatched open bracket ({len(stack) - 1} unclosed)")
        return program


def parse(source: str) -> List[Instruction]:
    """Parse instruction text into a block tree."""
    return Parser(source).parse()
