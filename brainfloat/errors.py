"""
Error handling system for Brainfloat.
Every compilation error is fail-fast; the caller decides how to present it.
"""

import sys


class BrainfloatError(Exception):
    """Base class for all Brainfloat errors."""

    def __init__(self, message, macro=None, position=None):
        super().__init__(message)
        self.message = message
        self.macro = macro
        self.position = position

    def __str__(self):
        location = ""
        if self.macro:
            location += f"In macro {self.macro}"
        if self.position is not None:
            location += f", offset {self.position}" if location else f"Offset {self.position}"

        if location:
            return f"{self.__class__.__name__}: {location}\n  {self.message}"
        return f"{self.__class__.__name__}: {self.message}"


class UndefinedMacro(BrainfloatError):
    """A macro was called (or used as entry point) but never defined."""

    def __init__(self, name, macro=None):
        super().__init__(f"Macro {name} expected but not found", macro)
        self.name = name


class UndefinedVariable(BrainfloatError):
    """A /placeholder/ has no binding (empty strings count as unbound)."""

    def __init__(self, name, macro=None, position=None):
        super().__init__(f"No variable named {name} found", macro, position)
        self.name = name


class SyntaxError(BrainfloatError):
    """No lexing rule matched at a position in macro text."""

    def __init__(self, excerpt, macro=None, position=None):
        super().__init__(f"Invalid syntax here -> {excerpt}", macro, position)
        self.excerpt = excerpt


class InvalidRepeat(BrainfloatError):
    """A {N} repeat appeared with nothing before it."""
    pass


class UnmatchedToken(BrainfloatError):
    """A non-symbol token survived rewriting."""

    def __init__(self, kind, macro=None):
        super().__init__(f"Unmatched {kind} token in final result", macro)
        self.kind = kind


class UnmatchedBracket(BrainfloatError):
    """Loop delimiters in an instruction string do not balance."""
    pass


class ConstantsSyntaxError(BrainfloatError):
    """A line of a constants table is not `key=value`."""

    def __init__(self, message, line=None):
        super().__init__(message)
        self.line = line

    def __str__(self):
        if self.line is not None:
            return f"{self.__class__.__name__}: line {self.line}\n  {self.message}"
        return f"{self.__class__.__name__}: {self.message}"


class MacroDefinitionError(BrainfloatError):
    """A macro set is malformed, e.g. two macros share a name."""
    pass


class ConfigurationError(BrainfloatError):
    """Execution settings are out of range."""
    pass


class RuntimeError(BrainfloatError):
    """Execution error raised by the interpreter itself."""
    pass


class ErrorReporter:
    """Collects errors so a front end can print them together."""

    def __init__(self):
        self.errors = []

    def report(self, error):
        """Record an error and hand it back."""
        self.errors.append(error)
        return error

    def print_errors(self, stream=None):
        """Print all errors to stderr."""
        stream = stream or sys.stderr
        for error in self.errors:
            print(str(error), file=stream)
