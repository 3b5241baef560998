"""
Macro definitions and constant tables.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Mapping, Optional, Union

from .errors import ConstantsSyntaxError, MacroDefinitionError, UndefinedMacro


CONSTANT_LINE = re.compile(r"^(\w+)=(\w*)$", re.ASCII)


@dataclass(frozen=True)
class Macro:
    """A named block of macro text."""
    name: str
    content: str


class MacroSet:
    """Read-only collection of macros, unique by name."""

    def __init__(self, macros: Iterable[Macro] = ()):
        table: Dict[str, Macro] = {}
        for macro in macros:
            if macro.name in table:
                raise MacroDefinitionError(f"Macro {macro.name} is defined more than once")
            table[macro.name] = macro
        self._macros = MappingProxyType(table)

    @classmethod
    def from_mapping(cls, contents: Mapping[str, str]) -> "MacroSet":
        """Build a macro set from a name -> content mapping."""
        return cls(Macro(name, content) for name, content in contents.items())

    def get(self, name: str, caller: Optional[str] = None) -> Macro:
        """Look up a macro, raising UndefinedMacro if it is missing."""
        macro = self._macros.get(name)
        if macro is None:
            raise UndefinedMacro(name, caller)
        return macro

    def __contains__(self, name) -> bool:
        return name in self._macros

    def __iter__(self) -> Iterator[Macro]:
        return iter(self._macros.values())

    def __len__(self) -> int:
        return len(self._macros)


MacroSource = Union[MacroSet, Mapping[str, str], Iterable[Macro]]


def as_macro_set(macros: MacroSource) -> MacroSet:
    """Accept a MacroSet, a name -> content mapping or an iterable of Macro."""
    if isinstance(macros, MacroSet):
        return macros
    if isinstance(macros, Mapping):
        return MacroSet.from_mapping(macros)
    return MacroSet(macros)


def parse_constants(text: str) -> Dict[str, str]:
    """
    Parse a constants table.

    Each non-blank line is ``key=value`` where both sides are word
    characters (the value may be empty). Lines starting with ``#`` are
    comments. Later keys overwrite earlier ones.

    Raises:
        ConstantsSyntaxError: on the first malformed line.
    """
    constants: Dict[str, str] = {}
    for number, line in enumerate(text.split("\n"), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = CONSTANT_LINE.match(line)
        if match is None:
            raise ConstantsSyntaxError(f"Illegal syntax in constants: {line!r}", number)
        constants[match.group(1)] = match.group(2)
    return constants
