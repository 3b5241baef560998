"""
Token class for representing lexed macro text.
"""

from .token_types import TokenType


class Token:
    """A single lexed unit of macro content.

    ``value`` holds the payload: instruction text for symbols, the count for
    repeats and the macro name for macro calls. Macro calls also carry their
    argument strings in ``arguments``.
    """

    def __init__(self, token_type, value, arguments=None, position=0):
        self.type = token_type
        self.value = value
        self.arguments = list(arguments) if arguments is not None else []
        self.position = position

    def __str__(self):
        if self.type == TokenType.MACRO_CALL:
            return f"Token({self.type.name}, {self.value!r}, {self.arguments!r}, @{self.position})"
        return f"Token({self.type.name}, {self.value!r}, @{self.position})"

    def __repr__(self):
        return self.__str__()

    def __eq__(self, other):
        if not isinstance(other, Token):
            return NotImplemented
        return (self.type, self.value, self.arguments) == (other.type, other.value, other.arguments)

    def is_symbol(self):
        """Check if token is already plain instruction text."""
        return self.type == TokenType.SYMBOL
