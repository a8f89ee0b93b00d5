"""Tests for the rule table and message formatting."""

import io
import os
import sys
import unittest
from contextlib import redirect_stdout

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jschema.diagnostics import Diagnostic, ErrorKind, rule_id
from jschema.rules import RULES, format_message, print_rules


class TestRules(unittest.TestCase):
    """Test the rule table."""

    def test_every_error_kind_has_a_rule(self):
        self.assertEqual(set(RULES), set(ErrorKind))

    def test_rule_ids(self):
        self.assertEqual(rule_id(ErrorKind.WRONG_TYPE), "JSON1001")
        self.assertEqual(RULES[ErrorKind.DEPENDENT_PROPERTY_MISSING].id, "JSON1023")
        self.assertEqual(Diagnostic(ErrorKind.NOT_UNIQUE, "").rule_id, "JSON1020")

    def test_rule_table_is_read_only(self):
        with self.assertRaises(TypeError):
            RULES[ErrorKind.WRONG_TYPE] = None

    def test_names_and_levels(self):
        self.assertEqual(RULES[ErrorKind.TOO_FEW_ITEM_SCHEMAS].name, "TooFewItemSchemas")
        self.assertTrue(all(rule.level == "error" for rule in RULES.values()))

    def test_print_rules(self):
        output = io.StringIO()
        with redirect_stdout(output):
            print_rules()
        self.assertIn("JSON1015  StringDoesNotMatchPattern", output.getvalue())


class TestFormatMessage(unittest.TestCase):
    """Test rendering diagnostics as text."""

    def test_wrong_type(self):
        diagnostic = Diagnostic(ErrorKind.WRONG_TYPE, "/a", args=("null, string", "integer"))
        self.assertEqual(
            format_message(diagnostic),
            "JSON1001: /a: The value has type 'integer', but the schema requires one of: null, string.")

    def test_root_location(self):
        diagnostic = Diagnostic(ErrorKind.REQUIRED_PROPERTY_MISSING, "", args=("id",))
        self.assertEqual(format_message(diagnostic), "JSON1002: root: The required property 'id' is missing.")

    def test_str_uses_format_message(self):
        diagnostic = Diagnostic(ErrorKind.NOT_ONE_OF, "/x", args=("0", "2"))
        self.assertEqual(str(diagnostic), format_message(diagnostic))
        self.assertIn("validates against 0 of the 2 schemas", str(diagnostic))

    def test_dependent_property_missing(self):
        diagnostic = Diagnostic(ErrorKind.DEPENDENT_PROPERTY_MISSING, "", args=("x", "y, z", "z"))
        self.assertEqual(
            format_message(diagnostic),
            "JSON1023: root: The property 'x' requires the properties y, z, but z are missing.")

    def test_every_rule_formats_with_its_arguments(self):
        arity = {
            ErrorKind.NOT_UNIQUE: 0, ErrorKind.VALIDATES_AGAINST_NOT_SCHEMA: 0,
            ErrorKind.REQUIRED_PROPERTY_MISSING: 1, ErrorKind.ADDITIONAL_PROPERTIES_PROHIBITED: 1,
            ErrorKind.NOT_ALL_OF: 1, ErrorKind.NOT_ANY_OF: 1,
            ErrorKind.STRING_TOO_LONG: 3, ErrorKind.STRING_TOO_SHORT: 3,
            ErrorKind.DEPENDENT_PROPERTY_MISSING: 3,
        }
        for kind in ErrorKind:
            args = tuple(f"arg{i}" for i in range(arity.get(kind, 2)))
            with self.subTest(kind=kind):
                message = format_message(Diagnostic(kind, "/p", args=args))
                self.assertTrue(message.startswith(f"{rule_id(kind)}: /p: "))
                for arg in args:
                    self.assertIn(arg, message)


if __name__ == '__main__':
    unittest.main()
