"""
Test suite for the PLC scope, type and value model.
"""

import unittest
from decimal import Decimal
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from plc.environment import (
    Scope, ANY, NIL, COMPARABLE, BOOLEAN, INTEGER, DECIMAL, CHARACTER, STRING,
    get_type, is_assignable, values, PlcObject, create,
    UndefinedSymbolError, DuplicateSymbolError, UnknownTypeError
)

ALL_TYPES = [ANY, NIL, COMPARABLE, BOOLEAN, INTEGER, DECIMAL, CHARACTER, STRING]


class TestTypes(unittest.TestCase):
    """Test cases for the type set and assignability."""

    def test_any_accepts_everything(self):
        for source in ALL_TYPES:
            self.assertTrue(is_assignable(ANY, source), source)

    def test_every_type_accepts_itself(self):
        for t in ALL_TYPES:
            self.assertTrue(is_assignable(t, t), t)

    def test_comparable_accepts_comparable_types(self):
        accepted = [t for t in ALL_TYPES if is_assignable(COMPARABLE, t)]
        self.assertCountEqual(accepted, [COMPARABLE, INTEGER, DECIMAL, CHARACTER, STRING])

    def test_all_other_pairs_fail(self):
        for target in ALL_TYPES:
            for source in ALL_TYPES:
                if target is ANY or target is COMPARABLE or target is source:
                    continue
                self.assertFalse(is_assignable(target, source), f"{target} <- {source}")

    def test_get_type(self):
        for t in ALL_TYPES:
            self.assertIs(get_type(t.name), t)

    def test_unknown_type(self):
        with self.assertRaises(UnknownTypeError) as context:
            get_type("Integr")
        self.assertIn("Did you mean 'Integer'?", context.exception.diagnostic.suggestions)

    def test_jvm_names(self):
        self.assertEqual(
            {t.name: t.jvm_name for t in ALL_TYPES},
            {
                "Any": "Object",
                "Nil": "Void",
                "Comparable": "Comparable",
                "Boolean": "boolean",
                "Integer": "int",
                "Decimal": "double",
                "Character": "char",
                "String": "String",
            }
        )

    def test_builtin_types_have_no_members(self):
        with self.assertRaises(UndefinedSymbolError):
            STRING.get_field("length")
        with self.assertRaises(UndefinedSymbolError):
            STRING.get_function("length", 1)


class TestScope(unittest.TestCase):
    """Test cases for scopes."""

    def setUp(self):
        self.globals = Scope()
        self.globals.define_variable("x", "x", INTEGER, False, create(1))

    def test_lookup_walks_outward(self):
        inner = Scope(Scope(self.globals))
        self.assertEqual(inner.lookup_variable("x").value, create(1))

    def test_inner_definition_shadows(self):
        inner = Scope(self.globals)
        inner.define_variable("x", "x", STRING, False, create("s"))
        self.assertIs(inner.lookup_variable("x").type, STRING)
        self.assertIs(self.globals.lookup_variable("x").type, INTEGER)

    def test_duplicate_variable(self):
        with self.assertRaises(DuplicateSymbolError):
            self.globals.define_variable("x", "x", INTEGER, False, values.NIL)

    def test_undefined_variable(self):
        with self.assertRaises(UndefinedSymbolError) as context:
            Scope(self.globals).lookup_variable("y")
        self.assertEqual(context.exception.name, "y")
        self.assertIn("Did you mean 'x'?", context.exception.diagnostic.suggestions)

    def test_functions_are_keyed_by_arity(self):
        one = self.globals.define_function("f", "f", [ANY], NIL, lambda args: values.NIL)
        two = self.globals.define_function("f", "f", [ANY, ANY], NIL, lambda args: values.NIL)
        self.assertIs(self.globals.lookup_function("f", 1), one)
        self.assertIs(Scope(self.globals).lookup_function("f", 2), two)
        self.assertEqual(two.arity, 2)
        with self.assertRaises(UndefinedSymbolError) as context:
            self.globals.lookup_function("f", 0)
        self.assertEqual(context.exception.arity, 0)

    def test_duplicate_function(self):
        self.globals.define_function("f", "f", [], NIL, lambda args: values.NIL)
        with self.assertRaises(DuplicateSymbolError):
            self.globals.define_function("f", "g", [], INTEGER, lambda args: values.NIL)

    def test_invoke(self):
        function = self.globals.define_function(
            "inc", "inc", [INTEGER], INTEGER, lambda args: create(args[0].value + 1)
        )
        self.assertEqual(function.invoke([create(41)]), create(42))


class TestValues(unittest.TestCase):
    """Test cases for runtime values."""

    def test_create(self):
        self.assertEqual(create(5).value, 5)
        self.assertIs(create(None), values.NIL)
        with self.assertRaises(TypeError):
            create(object())

    def test_equality_requires_same_host_type(self):
        self.assertEqual(create("ab"), create("ab"))
        self.assertNotEqual(create(True), create(1))
        self.assertNotEqual(create(1), create(2))

    def test_decimal_equality_compares_scale(self):
        self.assertEqual(create(Decimal("2.5")), create(Decimal("2.5")))
        self.assertNotEqual(create(Decimal("2.5")), create(Decimal("2.50")))
        self.assertNotEqual(create(Decimal("1")), create(1))

    def test_capability_interface(self):
        scope = Scope()
        scope.define_variable("size", "size", INTEGER, True, create(3))
        scope.define_function("add", "add", [ANY, ANY], INTEGER,
                              lambda args: create(args[0].value + args[1].value))
        receiver = PlcObject(scope, 5)

        self.assertEqual(receiver.get_field("size").value, create(3))
        # The receiver is passed as the first argument
        self.assertEqual(receiver.call_method("add", [create(3)]), create(8))
        with self.assertRaises(UndefinedSymbolError):
            receiver.call_method("add", [])


if __name__ == '__main__':
    unittest.main()
