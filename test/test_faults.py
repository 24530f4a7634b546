"""
Faults module behavioral tests (codes, triggering, rendering, docs).

Scope
- Validate stable codes and host remapping through __main__.__codes__.
- Validate trigger(): raising outside shell mode, printing and exiting inside it.
- Validate rich rendering of faults (plain and fancy).
- Validate getdoc() lookups through __main__.__docs__.

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured with color disabled for deterministic comparison.
"""

from __future__ import annotations

import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from pincer import (
    Arguments,
    ArgumentsError,
    OptionWithoutAValueError,
    OptionValueParsingError,
    UnusedArgsLeftError,
    FaultCode,
    trigger,
    getdoc,
)
from pincer import faults


def _capture(fault):
    console = Console(color_system=None, force_terminal=False, width=120)
    with console.capture() as capture:
        console.print(fault)
    return capture.get()


def _fault():
    try:
        Arguments(["--width"]).opt_value_from_fn("--width", int)
    except OptionWithoutAValueError as fault:
        return fault
    raise AssertionError("expected a fault")


class TestFaultCode(TestCase):

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.UNUSED_ARGS_LEFT.normalize(), "21141")

    def testNormalizeHostMapping(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__codes__", {FaultCode.MISSING_OPTION: "E-MISSING"}, create=True):
            self.assertEqual(FaultCode.MISSING_OPTION.normalize(), "E-MISSING")
            self.assertEqual(FaultCode.MISSING_ARGUMENT.normalize(), "21122")

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))


class TestArgumentsError(TestCase):

    def testHierarchy(self):
        self.assertTrue(issubclass(OptionWithoutAValueError, ArgumentsError))
        self.assertTrue(issubclass(ArgumentsError, Exception))

    def testStrIsMessage(self):
        fault = _fault()
        self.assertEqual(str(fault), "the '--width' option doesn't have an associated value")
        self.assertEqual(fault.message, str(fault))

    def testOptionsAreReadOnly(self):
        fault = _fault()
        with self.assertRaises(TypeError):
            fault.options["key"] = "--other"

    def testReplaceMergesOptions(self):
        fault = _fault()
        replaced = fault.__replace__(hint="custom hint")
        self.assertIsInstance(replaced, OptionWithoutAValueError)
        self.assertEqual(replaced.options["hint"], "custom hint")
        self.assertEqual(replaced.options["key"], "--width")
        self.assertEqual(fault.options["key"], "--width")
        self.assertNotEqual(fault.options["hint"], "custom hint")

    def testReplaceKeepsCause(self):
        try:
            Arguments(["--width", "x"]).opt_value_from_fn("--width", int)
        except OptionValueParsingError as fault:
            self.assertIsInstance(fault.__replace__(shell=False).__cause__, ValueError)


class TestTrigger(TestCase):

    def testRaisesOutsideShell(self):
        with self.assertRaises(OptionWithoutAValueError) as context:
            trigger(_fault(), hint="try again")
        self.assertEqual(context.exception.options["hint"], "try again")

    def testShellPrintsAndExits(self):
        stream = io.StringIO()
        console = Console(file=stream, color_system=None, force_terminal=False, width=120)
        with mock.patch.object(faults, "console", console):
            with self.assertRaises(SystemExit) as context:
                trigger(_fault(), shell=True, prog="app")
        self.assertEqual(context.exception.code, 1)
        self.assertIn("the '--width' option doesn't have an associated value", stream.getvalue())

    def testShellDeferredDoesNotExit(self):
        stream = io.StringIO()
        console = Console(file=stream, color_system=None, force_terminal=False, width=120)
        with mock.patch.object(faults, "console", console):
            self.assertIsNone(trigger(_fault(), shell=True, deferred=True))
        self.assertIn("option doesn't have an associated value", stream.getvalue())

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("nope"))


class TestRendering(TestCase):

    def testPlainRendering(self):
        output = _capture(_fault().__replace__(prog="app", colorful=False))
        self.assertIn("[ app — 21111 | Option Without A Value ]", output)
        self.assertIn("the '--width' option doesn't have an associated value", output)
        self.assertIn("→ add a value to '--width' at first position", output)

    def testFancyRendering(self):
        output = _capture(_fault().__replace__(prog="app", fancy=True))
        self.assertIn("Option Without A Value", output)
        self.assertIn("the '--width' option doesn't have an associated value", output)

    def testHostProgramName(self):
        main = sys.modules["__main__"]
        with mock.patch.object(main, "__prog__", "hosted", create=True):
            output = _capture(_fault())
        self.assertIn("[ hosted — 21111", output)

    def testBareErrorRendering(self):
        output = _capture(UnusedArgsLeftError("unused arguments left: -x", prog="app"))
        self.assertIn("[ app — - | Error ]", output)
        self.assertIn("unused arguments left: -x", output)


class TestGetdoc(TestCase):

    def testMissingDocs(self):
        self.assertIsNone(getdoc(FaultCode.MISSING_OPTION))

    def testHostDocs(self):
        main = sys.modules["__main__"]
        docs = {FaultCode.MISSING_OPTION: "required options must be given"}
        with mock.patch.object(main, "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.MISSING_OPTION), "required options must be given")
            with self.assertRaises(ArgumentsError) as context:
                Arguments([]).value_from_str("--name")
        self.assertEqual(context.exception.options["docs"], "required options must be given")

    def testRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(21113)


if __name__ == "__main__":
    unittest.main()
