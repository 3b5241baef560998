"""
Macro compiler for Brainfloat.
Expands a macro into plain instruction text by rewriting repeat and
macro-call tokens until only symbols remain.
"""

import logging
from typing import List, Mapping, Optional, Sequence

from .errors import InvalidRepeat, UnmatchedToken
from .lexer import MacroLexer, build_variables
from .macros import MacroSource, as_macro_set
from .token import Token
from .token_types import TokenType


logger = logging.getLogger(__name__)

ENTRY_MACRO = "program"


class MacroCompiler:
    """
    Compiles macros from a fixed macro set and constant table.

    Macro calls recurse into ``compile_macro``; a macro that calls itself
    without end recurses without end.
    """

    def __init__(self, macros: MacroSource, constants: Optional[Mapping[str, str]] = None):
        self.macros = as_macro_set(macros)
        self.constants = dict(constants or {})

    def compile(self, entry: str = ENTRY_MACRO) -> str:
        """Compile the entry macro into an instruction string."""
        return self.compile_macro(entry)

    def compile_macro(self, name: str, arguments: Sequence[str] = (),
                      caller: Optional[str] = None) -> str:
        """Compile one macro invocation with the given positional arguments."""
        macro = self.macros.get(name, caller)
        logger.debug("Expanding macro %s with arguments %r", name, list(arguments))

        lexer = MacroLexer(macro.content, name, build_variables(arguments, self.constants))
        tokens = self.rewrite(lexer.tokenize(), name)
        return self.assemble(tokens, name)

    def rewrite(self, tokens: List[Token], macro_name: Optional[str] = None) -> List[Token]:
        """
        Rewrite tokens until none but symbols remain.

        The leftmost repeat is always handled before any macro call.
        """
        tokens = list(tokens)
        while True:
            index = self.find(tokens, TokenType.REPEAT)
            if index is not None:
                self.expand_repeat(tokens, index, macro_name)
                continue

            index = self.find(tokens, TokenType.MACRO_CALL)
            if index is not None:
                self.expand_call(tokens, index, macro_name)
                continue

            return tokens

    @staticmethod
    def find(tokens: List[Token], token_type: TokenType) -> Optional[int]:
        for index, token in enumerate(tokens):
            if token.type == token_type:
                return index
        return None

    def expand_repeat(self, tokens: List[Token], index: int, macro_name: Optional[str]):
        """Replace a repeat and the token before it with N copies of that token."""
        if index < 1:
            raise InvalidRepeat("Can't repeat nothing", macro_name, tokens[index].position)
        repeated = tokens[index - 1]
        count = tokens[index].value
        tokens[index - 1:index + 1] = [repeated] * count

    def expand_call(self, tokens: List[Token], index: int, macro_name: Optional[str]):
        """Replace a macro call with the text it compiles to."""
        call = tokens[index]
        text = self.compile_macro(call.value, call.arguments, macro_name)
        tokens[index] = Token(TokenType.SYMBOL, text, position=call.position)

    def assemble(self, tokens: List[Token], macro_name: Optional[str] = None) -> str:
        """Concatenate symbol payloads into the final instruction string."""
        parts = []
        for token in tokens:
            if not token.is_symbol():
                raise UnmatchedToken(token.type.name.lower(), macro_name)
            parts.append(token.value)
        return "".join(parts)
