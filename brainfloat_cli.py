#!/usr/bin/env python3
"""
Brainfloat Command Line Interface
Runs raw instruction files and macro directories, or compiles a macro
directory to a .bf file.
"""

import sys
import asyncio
import signal
import argparse
import logging
from pathlib import Path
from typing import Optional, Tuple

import brainfloat
from brainfloat.errors import BrainfloatError, ErrorReporter


MACRO_EXTENSION = ".bfm"
CONSTANTS_EXTENSION = ".bfc"
RAW_EXTENSIONS = (".b", ".bf")


def load_directory(directory: Path) -> Tuple[brainfloat.MacroSet, dict]:
    """Read macros (*.bfm, named by file stem) and constants (*.bfc) from a directory."""
    macros = []
    constants_text = ""
    for path in sorted(directory.iterdir()):
        if path.is_dir():
            continue
        if path.suffix == CONSTANTS_EXTENSION:
            text = path.read_text(encoding="utf-8")
            if not text.endswith("\n"):
                text += "\n"
            constants_text += text
        elif path.suffix == MACRO_EXTENSION:
            macros.append(brainfloat.Macro(path.stem, path.read_text(encoding="utf-8")))
    return brainfloat.MacroSet(macros), brainfloat.parse_constants(constants_text)


def load_source(path: Path, entry: str) -> str:
    """Return optimized instruction text for a raw file or a macro directory."""
    if path.is_dir():
        macros, constants = load_directory(path)
        return brainfloat.build_program(macros, constants, entry)
    if path.suffix in RAW_EXTENSIONS:
        return path.read_text(encoding="utf-8")
    raise BrainfloatError(f"Don't know how to run file with extension '{path.suffix}'")


async def run_interactive(source: str, config, io) -> None:
    """Run a program with Ctrl-C routed to the I/O cancellation channel."""
    previous = signal.signal(signal.SIGINT, lambda signum, frame: io.cancel())
    try:
        await brainfloat.execute(source, config, io)
    finally:
        signal.signal(signal.SIGINT, previous)


def compiled_path(directory: Path) -> Path:
    """Place <name>.bf beside the directory, keeping any dots in its name."""
    resolved = directory.resolve()
    if not resolved.name:
        raise BrainfloatError(f"Cannot name an output file for '{directory}'; use --output")
    return resolved.parent / (resolved.name + ".bf")


def run_command(args) -> int:
    config = brainfloat.ExecutionConfig.from_options(args.cell_size, args.yield_interval)
    io = brainfloat.StreamIO()
    source = load_source(Path(args.path), args.entry)
    asyncio.run(run_interactive(source, config, io))
    return 0


def compile_command(args) -> int:
    source = Path(args.path)
    if not source.is_dir():
        raise BrainfloatError(f"Can only compile a macro directory, got '{source}'")
    macros, constants = load_directory(source)
    compiled = brainfloat.build_program(macros, constants, args.entry)
    destination = Path(args.output) if args.output else compiled_path(source)
    destination.write_text(compiled, encoding="utf-8")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brainfloat",
        description="Brainfloat macro compiler and interpreter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s run hello.bf                # Run raw instructions
  %(prog)s run hello/                  # Compile and run a macro directory
  %(prog)s --cell-size=-1 run big/     # Unbounded cells
  %(prog)s compile hello/              # Write hello.bf
        """
    )

    parser.add_argument(
        '--cell-size',
        type=int,
        default=None,
        help='wrap cells into [0, n); -1 for unbounded (default 256)'
    )
    parser.add_argument(
        '--yield-interval',
        type=int,
        default=None,
        help='milliseconds between cooperative yields; -1 disables (default)'
    )
    parser.add_argument(
        '--entry',
        default=brainfloat.compiler.ENTRY_MACRO,
        help='entry macro name (default: %(default)s)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='log compilation and execution details'
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'Brainfloat {brainfloat.__version__}'
    )

    subcommands = parser.add_subparsers(dest='mode', required=True)

    run = subcommands.add_parser('run', help='run a .b/.bf file or macro directory')
    run.add_argument('path')
    run.set_defaults(handler=run_command)

    compile_ = subcommands.add_parser('compile', help='compile a macro directory to .bf')
    compile_.add_argument('path')
    compile_.add_argument('-o', '--output', help='destination file')
    compile_.set_defaults(handler=compile_command)

    return parser


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the Brainfloat CLI."""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    reporter = ErrorReporter()
    try:
        return args.handler(args)
    except BrainfloatError as e:
        reporter.report(e)
    except OSError as e:
        reporter.report(BrainfloatError(str(e)))

    reporter.print_errors()
    return 1


if __name__ == '__main__':
    sys.exit(main())
