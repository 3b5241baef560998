#!/usr/bin/env python3
"""
Brainfloat CLI Test Suite
"""

import asyncio
import io
import os
import signal
import sys
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

# Add the project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import brainfloat
import brainfloat_cli


class TestCLI(unittest.TestCase):
    """Test cases for the command line front end."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.root = Path(self.tmp.name)

    def tearDown(self):
        self.tmp.cleanup()

    def make_project(self):
        project = self.root / "hello"
        project.mkdir()
        (project / "program.bfm").write_text("set(/letter/) . clear <>")
        (project / "set.bfm").write_text("+{/0/}")
        (project / "clear.bfm").write_text("[-]")
        (project / "constants.bfc").write_text("# letters\nletter=65")
        return project

    def test_run_raw_file(self):
        """Test running a .bf file."""
        path = self.root / "a.bf"
        path.write_text("++++++++[>++++++++<-]>+.")
        output = io.StringIO()
        with redirect_stdout(output):
            status = brainfloat_cli.main(["run", str(path)])
        self.assertEqual(status, 0)
        self.assertEqual(output.getvalue(), "A")

    def test_run_directory(self):
        """Test running a macro directory."""
        project = self.make_project()
        output = io.StringIO()
        with redirect_stdout(output):
            status = brainfloat_cli.main(["run", str(project)])
        self.assertEqual(status, 0)
        self.assertEqual(output.getvalue(), "A")

    def test_compile_directory(self):
        """Test writing the optimized program next to the directory."""
        project = self.make_project()
        status = brainfloat_cli.main(["compile", str(project)])
        self.assertEqual(status, 0)
        self.assertEqual((self.root / "hello.bf").read_text(), "+" * 65 + ".[-]")

    def test_compile_current_directory(self):
        """Test compiling '.' names the file after the directory."""
        project = self.make_project()
        previous = os.getcwd()
        os.chdir(project)
        self.addCleanup(os.chdir, previous)
        status = brainfloat_cli.main(["compile", "."])
        self.assertEqual(status, 0)
        self.assertEqual((self.root / "hello.bf").read_text(), "+" * 65 + ".[-]")

    def test_compile_dotted_directory(self):
        """Test that dots in a directory name are kept."""
        project = self.root / "hello.v2"
        project.mkdir()
        (project / "program.bfm").write_text("+")
        status = brainfloat_cli.main(["compile", str(project)])
        self.assertEqual(status, 0)
        self.assertEqual((self.root / "hello.v2.bf").read_text(), "+")

    def test_interrupt_cancels_pending_input(self):
        """Test that Ctrl-C while waiting for input ends the run."""
        read_fd, write_fd = os.pipe()
        reader = os.fdopen(read_fd, "r", encoding="utf-8")
        writer = os.fdopen(write_fd, "w", encoding="utf-8")
        self.addCleanup(reader.close)
        output = io.StringIO()
        stream = brainfloat.StreamIO(reader, output)
        handler = signal.getsignal(signal.SIGINT)

        async def interrupt_while_reading():
            task = asyncio.create_task(brainfloat_cli.run_interactive("+.,.", None, stream))
            await asyncio.sleep(0.05)
            signal.raise_signal(signal.SIGINT)
            await asyncio.wait_for(task, timeout=5)

        asyncio.run(interrupt_while_reading())
        self.assertTrue(stream.cancelled)
        self.assertEqual(output.getvalue(), "\x01")
        self.assertIs(signal.getsignal(signal.SIGINT), handler)

        writer.close()
        stream.reader.join(timeout=5)

    def test_unknown_extension(self):
        """Test that unknown files are reported as errors."""
        path = self.root / "a.txt"
        path.write_text("+")
        errors = io.StringIO()
        with redirect_stderr(errors):
            status = brainfloat_cli.main(["run", str(path)])
        self.assertEqual(status, 1)
        self.assertIn("extension", errors.getvalue())

    def test_compile_error_reported(self):
        """Test that compilation errors give exit status 1."""
        project = self.root / "broken"
        project.mkdir()
        (project / "program.bfm").write_text("missing")
        errors = io.StringIO()
        with redirect_stderr(errors):
            status = brainfloat_cli.main(["compile", str(project)])
        self.assertEqual(status, 1)
        self.assertIn("UndefinedMacro", errors.getvalue())

    def test_bad_cell_size(self):
        """Test that an invalid cell size is reported."""
        path = self.root / "a.bf"
        path.write_text("+")
        errors = io.StringIO()
        with redirect_stderr(errors):
            status = brainfloat_cli.main(["--cell-size=0", "run", str(path)])
        self.assertEqual(status, 1)
        self.assertIn("ConfigurationError", errors.getvalue())


if __name__ == '__main__':
    unittest.main()
