"""Tests for validating instance files against schema files."""

import io
import json
import os
import sys
import tempfile
import unittest
from contextlib import redirect_stdout

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jschema.diagnostics import ErrorKind, SchemaError
from jschema.schemareader import read_schema
from jschema.validate import (JsonSyntaxError, ValidationResult, load_instances, validate,
                              validate_file, validate_instance, validate_json_instances)

PERSON_SCHEMA = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "age": {"type": "integer", "minimum": 0},
        "address": {"$ref": "#/definitions/address"},
    },
    "additionalProperties": False,
    "definitions": {
        "address": {
            "type": "object",
            "required": ["city"],
            "properties": {"city": {"type": "string"}},
        }
    },
}


class TestValidateInstance(unittest.TestCase):
    """Test validate_instance and ValidationResult."""

    def test_valid(self):
        result = validate_instance({"name": "Ada", "age": 36}, PERSON_SCHEMA)
        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, [])
        self.assertEqual(str(result), "✓ Valid")

    def test_invalid(self):
        result = validate_instance({"age": -1, "address": {}}, PERSON_SCHEMA)
        self.assertFalse(result.is_valid)
        self.assertEqual([d.error_code for d in result.diagnostics], [
            ErrorKind.REQUIRED_PROPERTY_MISSING,
            ErrorKind.VALUE_TOO_SMALL,
            ErrorKind.REQUIRED_PROPERTY_MISSING,
        ])
        self.assertEqual(result.diagnostics[2].path, "/address")
        self.assertTrue(str(result).startswith("✗ Invalid: JSON1002: root: "))

    def test_accepts_schema_tree(self):
        schema = read_schema(PERSON_SCHEMA)
        self.assertTrue(validate_instance({"name": "Ada"}, schema).is_valid)

    def test_result_repr(self):
        result = ValidationResult(instance_path="a.json")
        self.assertEqual(str(result), "✓ Valid: a.json")
        self.assertEqual(repr(result), "ValidationResult(is_valid=True, errors=[])")


class TestValidateFile(unittest.TestCase):
    """Test validating instance files."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.schema_file = self.write("schema.json", json.dumps(PERSON_SCHEMA))

    def tearDown(self):
        self.tmp.cleanup()

    def write(self, name, content):
        path = os.path.join(self.tmp.name, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(content)
        return path

    def test_single_document(self):
        instance_file = self.write("person.json", json.dumps({"name": "Ada", "address": {"city": "London"}}))
        results = validate_file(instance_file, self.schema_file)
        self.assertEqual(len(results), 1)
        self.assertTrue(results[0].is_valid)
        self.assertEqual(results[0].instance_path, instance_file)

    def test_json_lines(self):
        instance_file = self.write("people.jsonl", '{"name": "Ada"}\n\n{"name": ""}\n{"nick": "x"}\n')
        results = validate_file(instance_file, self.schema_file)
        self.assertEqual([r.is_valid for r in results], [True, False, False])
        self.assertEqual(results[1].instance_path, f"{instance_file}:3")

    def test_syntax_error(self):
        instance_file = self.write("broken.json", '{"name": ')
        with self.assertRaises(JsonSyntaxError) as context:
            load_instances(instance_file)
        self.assertEqual(context.exception.line, 1)

    def test_syntax_error_in_json_lines(self):
        instance_file = self.write("broken.jsonl", '{"name": "Ada"}\n{"name": \n')
        with self.assertRaises(JsonSyntaxError) as context:
            load_instances(instance_file)
        self.assertEqual(context.exception.line, 2)

    def test_schema_error_propagates(self):
        schema_file = self.write("bad.json", json.dumps({"properties": {"a": {"$ref": "#/definitions/none"}}}))
        instance_file = self.write("a.json", '{"a": 1}')
        with self.assertRaises(SchemaError):
            validate_file(instance_file, schema_file)

    def test_validate_json_instances(self):
        good = self.write("good.json", '{"name": "Ada"}')
        bad = self.write("bad.json", '{"name": 1}')
        output = io.StringIO()
        with redirect_stdout(output):
            counts = validate_json_instances([good, bad], self.schema_file, verbose=True)
        self.assertEqual(counts, (1, 1))
        self.assertIn("✗ Invalid", output.getvalue())

    def test_validate_command_exit_code(self):
        good = self.write("good.json", '{"name": "Ada"}')
        bad = self.write("bad.json", '{"name": 1}')
        output = io.StringIO()
        with redirect_stdout(output):
            validate([good], self.schema_file)
        self.assertIn("Validation summary: 1/1 instances valid", output.getvalue())
        with self.assertRaises(SystemExit) as context:
            validate([good, bad], self.schema_file, quiet=True)
        self.assertEqual(context.exception.code, 1)


if __name__ == '__main__':
    unittest.main()
