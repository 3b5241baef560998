"""
Lexical analyzer for Brainfloat macro text.
Substitutes /placeholders/ first, then splits the result into tokens.
"""

import re
from typing import Dict, List, Mapping, Optional, Sequence

from .token import Token
from .token_types import SYMBOLS, TokenType
from .errors import SyntaxError, UndefinedVariable


PLACEHOLDER = re.compile(r"/(\w+)/", re.ASCII)

# Rule order matters: the first pattern matching at a position wins.
# A rule with no token type is discarded.
TOKEN_RULES = [
    (re.compile("[" + re.escape(SYMBOLS) + "]"), TokenType.SYMBOL),
    (re.compile(r" ?\{(\d+)\}"), TokenType.REPEAT),
    (re.compile(r"(\w+)(?: ?\(([^()]*)\))?", re.ASCII), TokenType.MACRO_CALL),
    (re.compile(r"\s+"), None),
    (re.compile(r"#[^#]*#"), None),
]

EXCERPT_LENGTH = 10


def build_variables(arguments: Sequence[str], constants: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Key positional arguments by index, then let constants override them."""
    variables = {str(index): value for index, value in enumerate(arguments)}
    if constants:
        variables.update(constants)
    return variables


def split_arguments(text: Optional[str]) -> List[str]:
    """Split a macro call's argument list on commas."""
    if text is None or not text.strip():
        return []
    return [argument.strip() for argument in text.split(",")]


class MacroLexer:
    """
    Lexer for the content of a single macro.
    Errors are raised immediately, tagged with the macro's name.
    """

    def __init__(self, source: str, macro_name: Optional[str] = None,
                 variables: Optional[Mapping[str, str]] = None):
        self.source = source
        self.macro_name = macro_name
        self.variables = dict(variables or {})
        self.text = None
        self.position = 0

    def substitute(self) -> str:
        """Replace every /name/ with its bound value."""
        def replace(match):
            name = match.group(1)
            value = self.variables.get(name)
            # Empty-string bindings are treated as unbound.
            if not value:
                raise UndefinedVariable(name, self.macro_name, match.start())
            return value

        self.text = PLACEHOLDER.sub(replace, self.source)
        return self.text

    def match_rule(self):
        """Find the first rule that matches at the current position."""
        for pattern, token_type in TOKEN_RULES:
            match = pattern.match(self.text, self.position)
            if match:
                return match, token_type
        return None, None

    def create_token(self, token_type: TokenType, match) -> Token:
        """Create a token from a rule match."""
        if token_type == TokenType.SYMBOL:
            return Token(token_type, match.group(0), position=match.start())
        if token_type == TokenType.REPEAT:
            return Token(token_type, int(match.group(1)), position=match.start())
        return Token(token_type, match.group(1), split_arguments(match.group(2)), match.start())

    def tokenize(self) -> List[Token]:
        """
        Tokenize the macro content.
        Runs substitution first if it has not happened yet.
        """
        if self.text is None:
            self.substitute()

        tokens = []
        self.position = 0
        while self.position < len(self.text):
            match, token_type = self.match_rule()
            if match is None:
                excerpt = self.text[self.position:self.position + EXCERPT_LENGTH]
                raise SyntaxError(excerpt, self.macro_name, self.position)

            self.position = match.end()
            if token_type is not None:
                tokens.append(self.create_token(token_type, match))

        return tokens
