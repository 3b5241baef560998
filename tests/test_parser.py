#!/usr/bin/env python3
"""
Brainfloat Parser and Optimizer Test Suite
"""

import sys
import unittest
from pathlib import Path

# Add the project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from brainfloat.ast_nodes import Command, Counter, InstructionKind, Loop, SourceWriter
from brainfloat.errors import UnmatchedBracket
from brainfloat.optimizer import optimize
from brainfloat.parser import Parser, parse


class TestParser(unittest.TestCase):
    """Test cases for the instruction parser."""

    def test_leaf_instructions(self):
        """Test that every leaf symbol maps to its kind."""
        program = parse("+-<>.,~")
        self.assertEqual([node.kind for node in program], [
            InstructionKind.INCREMENT,
            InstructionKind.DECREMENT,
            InstructionKind.MOVE_LEFT,
            InstructionKind.MOVE_RIGHT,
            InstructionKind.OUTPUT,
            InstructionKind.INPUT,
            InstructionKind.DUMP,
        ])

    def test_single_loop(self):
        """Test a loop with one instruction in its body."""
        program = parse("[+]")
        self.assertEqual(len(program), 1)
        self.assertIsInstance(program[0], Loop)
        self.assertEqual(program[0].body, [Command(InstructionKind.INCREMENT)])

    def test_nested_loops(self):
        """Test loop nesting."""
        program = Parser("+[>[-]<]").parse()
        outer = program[1]
        self.assertIsInstance(outer, Loop)
        self.assertIsInstance(outer.body[1], Loop)
        self.assertEqual(outer.body[1].body, [Command(InstructionKind.DECREMENT)])

    def test_unclosed_loop(self):
        """Test that an unclosed bracket fails."""
        with self.assertRaises(UnmatchedBracket):
            parse("[+")

    def test_unopened_loop(self):
        """Test that a stray close bracket fails."""
        with self.assertRaises(UnmatchedBracket) as context:
            parse("+]")
        self.assertEqual(context.exception.position, 1)

    def test_other_characters_ignored(self):
        """Test that text outside the alphabet is skipped."""
        self.assertEqual(parse("a+b\n+"), parse("++"))

    def test_source_round_trip(self):
        """Test rendering a tree back to text."""
        source = "+[>,[-.]<]~"
        self.assertEqual(SourceWriter().write(parse(source)), source)

    def test_counter(self):
        """Test counting nodes, loops included."""
        self.assertEqual(Counter().count(parse("+[>[-]]")), 5)


class TestOptimizer(unittest.TestCase):
    """Test cases for the peephole optimizer."""

    def test_pointer_cancellation(self):
        """Test removal of opposite moves."""
        self.assertEqual(optimize("><+<>"), "+")

    def test_value_cancellation(self):
        """Test removal of opposite adjustments."""
        self.assertEqual(optimize(">+-<"), "")
        self.assertEqual(optimize("+--+."), ".")

    def test_cascading_removal(self):
        """Test that removals expose new pairs."""
        self.assertEqual(optimize("+>+-<-"), "")

    def test_dead_loop_after_loop(self):
        """Test that a flat loop right after a loop is removed."""
        self.assertEqual(optimize("[+][-]"), "[+]")
        self.assertEqual(optimize("[+][-][>]"), "[+]")

    def test_first_loop_kept(self):
        """Test that a loop with no loop before it stays."""
        self.assertEqual(optimize("[+]"), "[+]")
        self.assertEqual(optimize("+[-]"), "+[-]")

    def test_nested_loop_after_loop_kept(self):
        """Test that only flat loops are removed."""
        self.assertEqual(optimize("[+][[-]]"), "[+][[-]]")

    def test_empty_loop_kept(self):
        """Test that a lone empty loop is not removed."""
        self.assertEqual(optimize("+[]"), "+[]")
        self.assertEqual(optimize("[+-]"), "[]")

    def test_idempotent(self):
        """Test that optimizing twice changes nothing more."""
        samples = [
            "", "+", "<><>", "+[-]>[<+>-]<[-]", "[[+]][-]", "->+<<>>-+[]]",
            "++[>+<-]>[-][+][.]", ",[.,]", "~<><>~",
        ]
        for source in samples:
            once = optimize(source)
            self.assertEqual(optimize(once), once, source)


if __name__ == '__main__':
    unittest.main()
