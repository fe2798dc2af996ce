"""
Test suite for the PLC interpreter.

Tests cover:
- Fields, methods, closures and recursion
- Control flow, loop scopes and non-local RETURN
- Operator semantics (short-circuiting, numeric rules, concatenation)
- Runtime faults
"""

import io
import unittest
from decimal import Decimal
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from plc.analyzer import SemanticAnalyzer
from plc.environment import Scope, ANY, INTEGER, PlcObject, create, values
from plc.interpreter import Interpreter, InterpreterError, render
from plc.interpreter.interpreter import divide_integers, divide_decimals
from plc.parser import parse_string


class TestInterpreter(unittest.TestCase):
    """Test cases for running analyzed programs."""

    def _run(self, code: str):
        """Analyze and run ``code``; return main's value and the printed output."""
        source = SemanticAnalyzer().analyze(parse_string(code))
        output = io.StringIO()
        result = Interpreter(output=output).run(source)
        return result.value, output.getvalue()

    def _run_main(self, body: str):
        return self._run(f"DEF main(): Integer DO {body} END")

    def _printed(self, body: str) -> str:
        return self._run_main(f"{body} RETURN 0;")[1]

    def test_field_value(self):
        value, _ = self._run("LET x: Integer = 5; DEF main(): Integer DO RETURN x; END")
        self.assertEqual(value, 5)

    def test_division_by_zero(self):
        with self.assertRaises(InterpreterError) as context:
            self._run("DEF main(): Integer DO RETURN 1 / 0; END")
        self.assertEqual(context.exception.code, "R020")
        self.assertEqual(context.exception.phase, "run")

    def test_decimal_division_by_zero(self):
        with self.assertRaises(InterpreterError):
            self._printed("print(1.0 / 0.0);")

    def test_print_rendering(self):
        output = self._printed(
            "print(\"hi\"); print(1); print(TRUE); print(FALSE); print(NIL); print(1.50); print('c');"
        )
        self.assertEqual(output, "hi\n1\ntrue\nfalse\nnull\n1.50\nc\n")

    def test_and_short_circuits(self):
        program = (
            "DEF boom(): Boolean DO print(\"boom\"); RETURN TRUE; END "
            "DEF main(): Integer DO IF FALSE && boom() DO print(1); END RETURN 0; END"
        )
        self.assertEqual(self._run(program)[1], "")

    def test_or_short_circuits(self):
        program = (
            "DEF boom(): Boolean DO print(\"boom\"); RETURN FALSE; END "
            "DEF main(): Integer DO IF TRUE || boom() DO print(1); END RETURN 0; END"
        )
        self.assertEqual(self._run(program)[1], "1\n")

    def test_right_operand_runs_when_needed(self):
        program = (
            "DEF boom(): Boolean DO print(\"boom\"); RETURN TRUE; END "
            "DEF main(): Integer DO IF TRUE && boom() DO print(1); END RETURN 0; END"
        )
        self.assertEqual(self._run(program)[1], "boom\n1\n")

    def test_if_else(self):
        self.assertEqual(self._printed("IF 1 > 2 DO print(1); ELSE print(2); END"), "2\n")

    def test_for_loop(self):
        value, _ = self._run_main(
            "LET sum = 0; FOR (LET i = 0; i < 5; i = i + 1) DO sum = sum + i; END RETURN sum;"
        )
        self.assertEqual(value, 10)

    def test_for_loop_with_assignment_initializer(self):
        output = self._printed("LET i = 7; FOR (i = 0; i < 2; i = i + 1) DO print(i); END print(i);")
        self.assertEqual(output, "0\n1\n2\n")

    def test_while_loop(self):
        value, output = self._run_main("LET i = 0; WHILE i < 3 DO print(i); i = i + 1; END RETURN i;")
        self.assertEqual(value, 3)
        self.assertEqual(output, "0\n1\n2\n")

    def test_loop_body_declarations_reset_each_iteration(self):
        value, output = self._run_main(
            "LET n = 0; WHILE n < 2 DO LET seen = n; print(seen); n = n + 1; END RETURN n;"
        )
        self.assertEqual(value, 2)
        self.assertEqual(output, "0\n1\n")

    def test_return_unwinds_loops(self):
        value, output = self._run_main(
            "FOR (LET i = 0; i < 10; i = i + 1) DO "
            "  WHILE TRUE DO IF i == 3 DO RETURN i; END print(i); i = i + 1; END "
            "END "
            "RETURN -1;"
        )
        self.assertEqual(value, 3)
        self.assertEqual(output, "0\n1\n2\n")

    def test_recursion(self):
        value, _ = self._run(
            "DEF fact(n: Integer): Integer DO "
            "  IF n <= 1 DO RETURN 1; END "
            "  RETURN n * fact(n - 1); "
            "END "
            "DEF main(): Integer DO RETURN fact(20); END"
        )
        self.assertEqual(value, 2432902008176640000)

    def test_methods_share_global_fields(self):
        value, _ = self._run(
            "LET count = 0; "
            "DEF bump() DO count = count + 1; END "
            "DEF main(): Integer DO bump(); bump(); RETURN count; END"
        )
        self.assertEqual(value, 2)

    def test_parameters_are_local(self):
        value, _ = self._run(
            "LET x = 1; "
            "DEF shadow(x: Integer): Integer DO x = x * 10; RETURN x; END "
            "DEF main(): Integer DO RETURN shadow(5) + x; END"
        )
        self.assertEqual(value, 51)

    def test_method_without_return_yields_nil(self):
        source = SemanticAnalyzer().analyze(parse_string(
            "DEF quiet() DO print(1); END DEF main(): Integer DO RETURN 0; END"
        ))
        interpreter = Interpreter(output=io.StringIO())
        interpreter.run(source)
        self.assertIs(interpreter.scope.lookup_function("quiet", 0).invoke([]), values.NIL)

    def test_integer_division_truncates(self):
        self.assertEqual(self._printed("print(7 / 2); print(-7 / 2); print(7 / -2);"), "3\n-3\n-3\n")

    def test_decimal_division_keeps_left_scale(self):
        self.assertEqual(self._printed("print(10.00 / 3.0); print(1.0 / 3.0);"), "3.33\n0.3\n")

    def test_decimal_division_rounds_half_even(self):
        self.assertEqual(self._printed("print(0.5 / 2.0); print(0.7 / 2.0);"), "0.2\n0.4\n")

    def test_decimal_arithmetic_is_exact(self):
        self.assertEqual(self._printed("print(0.1 + 0.2); print(1.5 * 1.5); print(1.00 - 0.5);"),
                         "0.3\n2.25\n0.50\n")

    def test_big_integers(self):
        self.assertEqual(
            self._printed("print(99999999999999999999 * 99999999999999999999);"),
            f"{99999999999999999999 * 99999999999999999999}\n"
        )

    def test_string_concatenation(self):
        self.assertEqual(
            self._printed("print(\"n=\" + 1); print(TRUE + \"!\"); print(\"d=\" + 1.50);"),
            "n=1\ntrue!\nd=1.50\n"
        )

    def test_comparisons(self):
        output = self._printed(
            "print(\"ab\" == \"ab\"); print(1 != 2); print(\"a\" < \"b\"); print(2.5 >= 2.50);"
        )
        self.assertEqual(output, "true\ntrue\ntrue\ntrue\n")

    def test_decimal_equality_is_scale_sensitive(self):
        output = self._printed("print(2.5 == 2.50); print(2.5 == 2.5); print(2.5 != 2.50);")
        self.assertEqual(output, "false\ntrue\ntrue\n")

    def test_host_values_render_in_lowercase(self):
        self.assertEqual(self._printed("print(TRUE); print(\"a\" + FALSE); print(NIL);"),
                         "true\nafalse\nnull\n")

    def test_deep_recursion(self):
        program = (
            "DEF total(n: Integer): Integer DO "
            "  IF n == 0 DO RETURN 0; ELSE RETURN n + total(n - 1); END "
            "END "
            "DEF main(): Integer DO RETURN total(500); END"
        )
        limit = sys.getrecursionlimit()
        self.assertEqual(self._run(program)[0], 125250)
        self.assertEqual(sys.getrecursionlimit(), limit)

    def test_unbounded_recursion(self):
        program = (
            "DEF spin(n: Integer): Integer DO RETURN spin(n + 1); END "
            "DEF main(): Integer DO RETURN spin(0); END"
        )
        with self.assertRaises(InterpreterError) as context:
            self._run(program)
        self.assertEqual(context.exception.code, "R042")
        self.assertEqual(context.exception.phase, "run")


class TestUnanalyzedPrograms(unittest.TestCase):
    """The interpreter re-checks value representations at run time."""

    def _run(self, code: str, parent: Scope = None):
        return Interpreter(parent, output=io.StringIO()).run(parse_string(code))

    def test_runs_without_decorations(self):
        self.assertEqual(self._run("DEF main() DO RETURN 2 + 3; END").value, 5)

    def test_condition_must_be_boolean(self):
        with self.assertRaises(InterpreterError) as context:
            self._run("DEF main() DO IF 1 DO RETURN 1; END END")
        self.assertEqual(context.exception.code, "R010")

    def test_ordering_requires_same_representation(self):
        with self.assertRaises(InterpreterError) as context:
            self._run("DEF main() DO RETURN 1 < 1.0; END")
        self.assertEqual(context.exception.code, "R011")

    def test_boolean_is_not_an_integer(self):
        with self.assertRaises(InterpreterError):
            self._run("DEF main() DO RETURN TRUE + 1; END")

    def test_equality_compares_type_and_value(self):
        self.assertEqual(self._run("DEF main() DO RETURN 1 == 1.0; END").value, False)
        self.assertEqual(self._run("DEF main() DO RETURN NIL == NIL; END").value, True)

    def test_constant_assignment(self):
        with self.assertRaises(InterpreterError) as context:
            self._run("LET CONST x = 1; DEF main() DO x = 2; RETURN x; END")
        self.assertEqual(context.exception.code, "R030")

    def test_missing_main(self):
        with self.assertRaises(InterpreterError) as context:
            self._run("DEF helper() DO RETURN 1; END")
        self.assertEqual(context.exception.code, "R040")

    def test_undefined_variable(self):
        with self.assertRaises(InterpreterError) as context:
            self._run("DEF main() DO RETURN missing; END")
        self.assertEqual(context.exception.code, "R001")

    def test_parent_scope(self):
        parent = Scope()
        parent.define_variable("limit", "limit", INTEGER, True, create(7))
        self.assertEqual(self._run("DEF main() DO RETURN limit; END", parent).value, 7)

    def test_receiver_fields_and_methods(self):
        members = Scope()
        members.define_variable("size", "size", ANY, True, create(3))
        members.define_function("repeat", "repeat", [ANY, ANY], ANY,
                                lambda args: create(args[0].value * args[1].value))
        parent = Scope()
        parent.define_variable("word", "word", ANY, False, PlcObject(members, "ab"))

        self.assertEqual(self._run("DEF main() DO RETURN word.size; END", parent).value, 3)
        self.assertEqual(self._run("DEF main() DO RETURN word.repeat(2); END", parent).value, "abab")

        with self.assertRaises(InterpreterError):
            self._run("DEF main() DO RETURN word.missing(); END", parent)


class TestHelpers(unittest.TestCase):
    """Test cases for the value helpers."""

    def test_render(self):
        self.assertEqual(render(None), "null")
        self.assertEqual(render(True), "true")
        self.assertEqual(render(False), "false")
        self.assertEqual(render(Decimal("2.50")), "2.50")
        self.assertEqual(render("x"), "x")

    def test_divide_integers(self):
        self.assertEqual(divide_integers(9, 4), 2)
        self.assertEqual(divide_integers(-9, 4), -2)
        self.assertEqual(divide_integers(-9, -4), 2)

    def test_divide_decimals(self):
        self.assertEqual(str(divide_decimals(Decimal("2.5"), Decimal("2"))), "1.2")
        self.assertEqual(str(divide_decimals(Decimal("-1.0"), Decimal("4.0"))), "-0.2")
        self.assertEqual(str(divide_decimals(Decimal("1.000"), Decimal("8"))), "0.125")


if __name__ == '__main__':
    unittest.main()
