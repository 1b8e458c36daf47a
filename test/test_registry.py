"""
Registry behavioral tests (dispatch, unknown commands, runtime flags).

Scope
- command(): creation and name collisions.
- parse_line(): command word splitting, empty and unknown commands.
- Runtime flags: faults are raised by default and printed in shell mode.

Conventions
- Test method names follow CamelCase per project convention.
- Shell-mode output is captured by swapping the faults console.
"""
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

import prefixargs.faults
from prefixargs import (
    CommandParser,
    FaultCode,
    FormatError,
    MissingRequiredOptionError,
    Registry,
    UnknownCommandError,
    optional_preamble,
    required,
    zero_or_more,
)
from prefixargs.converters import index


class TestRegistry(TestCase):
    """Behavioral tests for command dispatch."""

    def setUp(self):
        self.name = required("n/", "NAME")
        self.tags = zero_or_more("t/", "TAG")
        self.target = optional_preamble("INDEX", type=index)
        self.registry = Registry()
        self.registry.command("add", "add n/NAME [t/TAG]...").register_options(self.name, self.tags)
        self.registry.command("delete").register_options(self.target).require_single_preamble()

    def testCommandReturnsParser(self):
        parser = self.registry.command("list")
        self.assertIsInstance(parser, CommandParser)
        self.assertIs(self.registry["list"], parser)
        self.assertIn("list", self.registry)
        self.assertEqual(list(self.registry), ["add", "delete", "list"])
        self.assertEqual(len(self.registry), 3)

    def testDuplicateCommandRejected(self):
        with self.assertRaises(ValueError):
            self.registry.command("add")
        self.assertEqual(self.registry["add"].usage, "add n/NAME [t/TAG]...")

    def testParseLine(self):
        name, result = self.registry.parse_line("  add n/Alice t/vip ")
        self.assertEqual(name, "add")
        self.assertEqual(result[self.name], "Alice")
        self.assertEqual(result[self.tags], ("vip",))

    def testParseLineWithoutArguments(self):
        with self.assertRaises(MissingRequiredOptionError) as context:
            self.registry.parse_line("add")
        self.assertEqual(context.exception.usage, "add n/NAME [t/TAG]...")
        self.assertFalse(context.exception.options["shell"])

    def testParse(self):
        result = self.registry.parse("delete", "2")
        self.assertEqual(result[self.target], 2)

    def testUnknownCommandSuggestsCloseMatch(self):
        with self.assertRaises(UnknownCommandError) as context:
            self.registry.parse_line("ad n/Alice")
        fault = context.exception
        self.assertEqual(fault.code, FaultCode.UNKNOWN_COMMAND)
        self.assertEqual(fault.options["command"], "ad")
        self.assertEqual(fault.hint, "did you mean 'add'?")

    def testUnknownCommandListsKnownCommands(self):
        with self.assertRaises(UnknownCommandError) as context:
            self.registry.parse("zzzz", "")
        self.assertEqual(context.exception.hint, "known commands: add, delete")

    def testEmptyLine(self):
        with self.assertRaises(UnknownCommandError) as context:
            self.registry.parse_line("   ")
        self.assertEqual(context.exception.code, FaultCode.EMPTY_COMMAND)

    def testNonStringLine(self):
        with self.assertRaises(TypeError):
            self.registry.parse_line(None)


class TestShellMode(TestCase):
    """Faults are printed through rich and None is returned."""

    def setUp(self):
        self.output = io.StringIO()
        patcher = mock.patch.object(prefixargs.faults, "console", Console(file=self.output, width=200))
        patcher.start()
        self.addCleanup(patcher.stop)

        self.registry = Registry(shell=True, colorful=False)
        self.registry.command("add", "add n/NAME").register_options(required("n/", "NAME"))

    def testFormatErrorPrinted(self):
        self.assertIsNone(self.registry.parse_line("add p/999"))
        output = self.output.getvalue()
        self.assertIn("invalid command format!", output)
        self.assertIn("add n/NAME", output)
        self.assertIn(str(int(FaultCode.MISSING_REQUIRED_OPTION)), output)

    def testUnknownCommandPrinted(self):
        self.assertIsNone(self.registry.parse_line("remove 1"))
        self.assertIn("unknown command 'remove'", self.output.getvalue())

    def testFancyPanel(self):
        registry = Registry(shell=True, fancy=True, colorful=False)
        registry.command("add", "add n/NAME").register_options(required("n/", "NAME"))
        self.assertIsNone(registry.parse("add", ""))
        self.assertIn("invalid command format!", self.output.getvalue())

    def testSuccessStillReturnsResult(self):
        name, result = self.registry.parse_line("add n/Alice")
        self.assertEqual(name, "add")
        self.assertEqual(len(result), 1)

    def testFormatErrorIsStillAFormatError(self):
        registry = Registry()
        registry.command("add", "add n/NAME").register_options(required("n/", "NAME"))
        with self.assertRaises(FormatError):
            registry.parse("add", "")
        self.assertEqual(self.output.getvalue(), "")


if __name__ == "__main__":
    unittest.main()
