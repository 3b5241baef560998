"""
Brainfloat
A Brainfuck-family language with a text-macro layer: macros are expanded
into tape-machine instructions, optimized, and run by a cooperative
interpreter.

Version: 0.1.0
"""

__version__ = "0.1.0"

import asyncio
import logging
from typing import Mapping, Optional

from .compiler import ENTRY_MACRO, MacroCompiler
from .config import ExecutionConfig, NO_YIELD
from .errors import (
    BrainfloatError,
    ConfigurationError,
    ConstantsSyntaxError,
    ErrorReporter,
    InvalidRepeat,
    MacroDefinitionError,
    SyntaxError,
    UndefinedMacro,
    UndefinedVariable,
    UnmatchedBracket,
    UnmatchedToken,
)
from .interpreter import Interpreter
from .machine_io import CANCELLED, MachineIO, QueueIO, StreamIO, format_memory_dump
from .macros import Macro, MacroSet, MacroSource, parse_constants
from .optimizer import optimize
from .parser import Parser, parse

logging.getLogger(__name__).addHandler(logging.NullHandler())
logger = logging.getLogger(__name__)

__all__ = [
    "Macro",
    "MacroSet",
    "MacroCompiler",
    "Parser",
    "Interpreter",
    "ExecutionConfig",
    "NO_YIELD",
    "MachineIO",
    "QueueIO",
    "StreamIO",
    "CANCELLED",
    "BrainfloatError",
    "ConfigurationError",
    "ConstantsSyntaxError",
    "ErrorReporter",
    "InvalidRepeat",
    "MacroDefinitionError",
    "SyntaxError",
    "UndefinedMacro",
    "UndefinedVariable",
    "UnmatchedBracket",
    "UnmatchedToken",
    "compile_program",
    "build_program",
    "execute",
    "run_program",
    "run_source",
    "format_memory_dump",
    "optimize",
    "parse",
    "parse_constants",
]


def compile_program(macros: MacroSource, constants: Optional[Mapping[str, str]] = None,
                    entry: str = ENTRY_MACRO) -> str:
    """
    Expand the entry macro into raw instruction text.

    Raises:
        UndefinedMacro: if ``entry`` (or any macro it calls) is not defined.
    """
    return MacroCompiler(macros, constants).compile(entry)


def build_program(macros: MacroSource, constants: Optional[Mapping[str, str]] = None,
                  entry: str = ENTRY_MACRO) -> str:
    """Compile then optimize the entry macro."""
    compiled = compile_program(macros, constants, entry)
    logger.debug("Compiled %s to %d symbols", entry, len(compiled))
    optimized = optimize(compiled)
    logger.debug("Optimized to %d symbols", len(optimized))
    return optimized


async def execute(source: str, config: Optional[ExecutionConfig] = None,
                  io: Optional[MachineIO] = None) -> Interpreter:
    """Parse and run instruction text; returns the interpreter for inspection."""
    program = parse(source)
    interpreter = Interpreter(config, io)
    await interpreter.execute(program)
    return interpreter


def run_source(source: str, config: Optional[ExecutionConfig] = None,
               io: Optional[MachineIO] = None) -> Interpreter:
    """Run instruction text on a fresh event loop."""
    return asyncio.run(execute(source, config, io))


def run_program(macros: MacroSource, constants: Optional[Mapping[str, str]] = None,
                config: Optional[ExecutionConfig] = None, io: Optional[MachineIO] = None,
                entry: str = ENTRY_MACRO) -> Interpreter:
    """Build the entry macro and run it on a fresh event loop."""
    return run_source(build_program(macros, constants, entry), config, io)
