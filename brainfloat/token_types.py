"""
Token definitions for the Brainfloat macro language.
"""

from enum import Enum, auto


class TokenType(Enum):
    # Base-language instruction text
    SYMBOL = auto()

    # Rewrite directives
    REPEAT = auto()
    MACRO_CALL = auto()


# The base instruction alphabet, in wire format
SYMBOLS = "+-<>.,[]~"
