import io
import math
import unittest

from dscript.core.callable import NativeFunction
from dscript.core.interpreter import Interpreter, divide
from dscript.core.parser import parse
from dscript.core.scanner import scan
from dscript.core.scope import ScopeArena
from dscript.core.syntax import Block, Literal, Print
from dscript.core.token import Token, TokenKind
from dscript.core.value import is_equal, stringify, to_number
from dscript.lang.error import Diagnostics


class Run:
    """Runs source through a fresh interpreter, capturing printed output and diagnostics."""

    def __init__(self, source, interpreter=None):
        self.out = io.StringIO()
        self.diagnostics = Diagnostics(stream=io.StringIO())
        self.interpreter = interpreter or Interpreter(self.diagnostics, out=self.out)

        statements = parse(scan(source, self.diagnostics), self.diagnostics)
        assert not self.diagnostics.had_error, self.diagnostics.diagnostics
        self.interpreter.interpret(statements)

    @property
    def lines(self):
        return self.out.getvalue().splitlines()

    @property
    def errors(self):
        return [d.message for d in self.diagnostics.diagnostics if d.kind == "runtime"]

    def get(self, text):
        return self.interpreter.scopes.get(Token(TokenKind.IDENTIFIER, text, None, 0))


def printed(expression):
    run = Run(f"print {expression};")
    assert not run.errors, run.errors
    return run.lines[0]


class ExpressionTestCase(unittest.TestCase):

    def test_arithmetic(self):
        cases = {
            "1 + 2 * 3": "7",
            "(1 + 2) * 3": "9",
            "10 - 4 - 3": "3",
            "7 / 2": "3.5",
            "0.1 + 0.2": "0.30000000000000004",
            "-(3)": "-3",
            "1 / 0": "Infinity",
            "-1 / 0": "-Infinity",
            "0 / 0": "NaN",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, printed(case), case)

    def test_concatenation(self):
        cases = {
            "\"a\" + 1": "a1",
            "1 + \"a\"": "1a",
            "\"a\" + \"b\"": "ab",
            "\"x\" + 2.5": "x2.5",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, printed(case), case)

    def test_type_mismatch(self):
        should_fail = {
            "\"a\" - 1": "Operands must be numbers.",
            "1 < \"2\"": "Operands must be numbers.",
            "true * 2": "Operands must be numbers.",
            "true + 1": "Operands must be two numbers or two strings.",
            "null + null": "Operands must be two numbers or two strings.",
            "\"a\" + true": "Operands must be two numbers or two strings.",
        }
        for case, message in should_fail.items():
            run = Run(f"print {case};")
            self.assertEqual([message], run.errors, case)
            self.assertEqual([], run.lines, case)

    def test_equality(self):
        cases = {
            "1 == 1": "true",
            "1 == \"1\"": "false",
            "true == 1": "false",
            "null == false": "false",
            "null == null": "true",
            "\"a\" != \"a\"": "false",
            "clock == clock": "true",
            "clock == clock()": "false",
            "0 / 0 == 0 / 0": "false",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, printed(case), case)

    def test_comparison(self):
        cases = {"1 < 2": "true", "2 <= 2": "true", "1 > 2": "false", "3 >= 4": "false"}
        for case, expected in cases.items():
            self.assertEqual(expected, printed(case), case)

    def test_unary(self):
        cases = {
            "!true": "false",
            "!null": "true",
            "!0": "false",
            "!\"\"": "false",
            "-\"12\"": "-12",
            "-true": "-1",
            "-null": "0",
            "-\"abc\"": "NaN",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, printed(case), case)

    def test_logical(self):
        cases = {
            "1 or x": "1",
            "null or \"b\"": "b",
            "false and x": "false",
            "1 and 2": "2",
            "null and 1 or 3": "3",
        }
        # x is undefined: it must never be evaluated
        for case, expected in cases.items():
            self.assertEqual(expected, printed(case), case)

    def test_calls(self):
        self.assertEqual("<native fn clock>", printed("clock"))

        run = Run("mut a = clock(); mut b = clock(); print b >= a; print clock() > 0;")
        self.assertEqual(["true", "true"], run.lines)

        should_fail = {
            "1();": "Can only call functions.",
            "\"f\"(1);": "Can only call functions.",
            "clock(1);": "Expected 0 arguments but got 1.",
            "clock(clock, 2);": "Expected 0 arguments but got 2.",
        }
        for case, message in should_fail.items():
            self.assertEqual([message], Run(case).errors, case)

    def test_arguments_left_to_right(self):
        diagnostics = Diagnostics()
        interpreter = Interpreter(diagnostics, out=io.StringIO())

        seen = []
        interpreter.scopes.define(Token(TokenKind.IDENTIFIER, "pair", None, 0),
                                  NativeFunction("pair", 2, lambda a, b: seen.append((a, b))), False)
        Run("mut i = 0; pair(i = i + 1, i = i + 1);", interpreter)
        self.assertEqual([(1.0, 2.0)], seen)


class StatementTestCase(unittest.TestCase):

    def test_truthiness(self):
        self.assertEqual(["2"], Run("if (null) print 1; else print 2;").lines)
        self.assertEqual(["1"], Run("if (0) print 1; else print 2;").lines)
        self.assertEqual(["1"], Run("if (\"\") print 1; else print 2;").lines)
        self.assertEqual(["2"], Run("if (false) print 1; else print 2;").lines)

    def test_while_break(self):
        run = Run("mut i = 0; while (true) { if (i == 3) break; i = i + 1; }")
        self.assertEqual([], run.errors)
        self.assertEqual(3.0, run.get("i"))

    def test_nested_break_stops_inner_loop(self):
        run = Run("mut n = 0;"
                  "for (mut i = 0; i < 3; i = i + 1) {"
                  "  while (true) { n = n + 1; break; }"
                  "}")
        self.assertEqual(3.0, run.get("n"))

    def test_for(self):
        run = Run("for (mut i = 0; i < 3; i = i + 1) print i;")
        self.assertEqual(["0", "1", "2"], run.lines)
        self.assertEqual(1, run.interpreter.scopes.depth)

        run = Run("mut i = 0; for (; ; i = i + 1) { if (i > 1) break; print i; }")
        self.assertEqual(["0", "1"], run.lines)

    def test_break_outside_loop(self):
        for case in ["break;", "{ break; }", "if (true) break;"]:
            run = Run(case + " print 1;")
            self.assertEqual(["'break' used outside of a loop."], run.errors, case)
            self.assertEqual([], run.lines, case)

    def test_block_scoping(self):
        run = Run("mut a = 1; { mut b = 2; a = b; print b; }")
        self.assertEqual(2.0, run.get("a"))
        self.assertEqual(["2"], run.lines)

        run = Run("{ mut b = 2; } print b;")
        self.assertEqual(["Undefined variable 'b'."], run.errors)

        run = Run("mut a = \"outer\"; { mut a = \"inner\"; a = \"changed\"; print a; } print a;")
        self.assertEqual(["changed", "outer"], run.lines)

    def test_const(self):
        run = Run("const c = 1; { { { c = 2; } } }")
        self.assertEqual(["Cannot assign to constant 'c'."], run.errors)
        self.assertEqual(1.0, run.get("c"))

        run = Run("const c = 1; { mut c = 2; c = 3; print c; } print c;")
        self.assertEqual(["3", "1"], run.lines)

    def test_duplicate_binding(self):
        run = Run("const x = 1; const x = 2;")
        self.assertEqual(["Variable 'x' is already defined in this scope."], run.errors)

        run = Run("const x = 1; { const x = 2; print x; }")
        self.assertEqual([], run.errors)
        self.assertEqual(["2"], run.lines)

    def test_mut_defaults_to_null(self):
        self.assertEqual(["null"], Run("mut a; print a;").lines)

    def test_runtime_error_stops_run(self):
        run = Run("print 1;\nprint x;\nprint 2;")
        self.assertEqual(["1"], run.lines)
        self.assertTrue(run.diagnostics.had_runtime_error)
        self.assertFalse(run.diagnostics.had_error)
        self.assertEqual(2, run.diagnostics.diagnostics[0].line)

    def test_scope_restored_after_error(self):
        run = Run("mut a = 1; { mut b = 2; { b = c; } }")
        self.assertEqual(["Undefined variable 'c'."], run.errors)
        self.assertEqual(0, run.interpreter.scopes.current)

        Run("print a;", run.interpreter)
        self.assertEqual(["1"], run.lines)

    def test_natives_cannot_be_redefined(self):
        self.assertEqual(["Variable 'clock' is already defined in this scope."], Run("mut clock = 1;").errors)
        self.assertEqual([], Run("{ mut clock = 1; }").errors)

    def test_nesting_too_deep(self):
        stmt = Print(Token(TokenKind.PRINT, "print", None, 4), Literal(1.0))
        for __ in range(5000):
            stmt = Block((stmt,))

        out = io.StringIO()
        diagnostics = Diagnostics(stream=io.StringIO())
        interpreter = Interpreter(diagnostics, out=out)
        interpreter.interpret([stmt])

        self.assertEqual(["Statements nested too deeply."], [d.message for d in diagnostics.diagnostics])
        self.assertEqual(4, diagnostics.diagnostics[0].line)
        self.assertEqual("", out.getvalue())
        self.assertEqual(ScopeArena.GLOBAL, interpreter.scopes.current)
        self.assertEqual(1, interpreter.scopes.depth)

        Run("print 1;", interpreter)  # still usable afterwards
        self.assertEqual("1\n", out.getvalue())


class ValueTestCase(unittest.TestCase):

    def test_stringify(self):
        cases = {None: "null", True: "true", False: "false", 3.0: "3", -0.5: "-0.5", "s": "s", 1e300 * 10: "Infinity"}
        for case, expected in cases.items():
            self.assertEqual(expected, stringify(case), case)

    def test_to_number(self):
        cases = {" 4 ": 4.0, "": 0.0, "1e3": 1000.0, False: 0.0}
        for case, expected in cases.items():
            self.assertEqual(expected, to_number(case), case)
        self.assertTrue(math.isnan(to_number("x")))

    def test_to_number_literal_forms(self):
        cases = {"0x10": 16.0, "0b101": 5.0, "0o17": 15.0, "Infinity": math.inf, "-Infinity": -math.inf, " .5 ": 0.5,
                 "1.": 1.0, "-2e-2": -0.02}
        for case, expected in cases.items():
            self.assertEqual(expected, to_number(case), case)

        for case in ["1_000", "inf", "nan", "infinity", "0x", "-0x10", "0b2", "1e", "12abc"]:
            self.assertTrue(math.isnan(to_number(case)), case)

    def test_stringify_notation(self):
        cases = {
            1e-7: "1e-7",
            1.5e-7: "1.5e-7",
            1e-6: "0.000001",
            0.1 + 0.2: "0.30000000000000004",
            123.456: "123.456",
            1e20: "100000000000000000000",
            1e21: "1e+21",
            1.5e300: "1.5e+300",
            -2.5e-8: "-2.5e-8",
            -0.0: "0",
        }
        for case, expected in cases.items():
            self.assertEqual(expected, stringify(case), case)
        self.assertEqual(["1e-7"], Run("print 1 / 10000000;").lines)

    def test_is_equal(self):
        self.assertFalse(is_equal(0.0, False))
        self.assertFalse(is_equal("", None))
        self.assertTrue(is_equal(2.0, 2))

    def test_divide(self):
        self.assertEqual(-math.inf, divide(1.0, -0.0))
        self.assertEqual(2.0, divide(4.0, 2.0))


if __name__ == '__main__':
    unittest.main()
