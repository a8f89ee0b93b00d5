"""Validates JSON instance documents and files against JSON Schema files.

This module is the file-level front end of :mod:`jschema.validator`: it reads
schema and instance files, runs the validator and collects the outcome per
instance in a :class:`ValidationResult`.
"""

import json
import logging
import sys
from typing import Any, Dict, List, Tuple, Union

from jschema.diagnostics import Diagnostic
from jschema.schemamodel import SchemaNode
from jschema.schemareader import load_schema, read_schema
from jschema.validator import SchemaValidator

logger = logging.getLogger(__name__)


class JsonSyntaxError(Exception):
    """Raised when an instance file is not valid JSON."""

    def __init__(self, file_name: str, line: int, column: int, reason: str):
        self.file_name = file_name
        self.line = line
        self.column = column
        self.reason = reason
        super().__init__(f"{file_name}({line},{column}): {reason}")


class ValidationResult:
    """Result of validating a JSON instance against a schema."""

    def __init__(self, diagnostics: List[Diagnostic] = None, instance_path: str = None):
        self.diagnostics = diagnostics or []
        self.instance_path = instance_path

    @property
    def is_valid(self) -> bool:
        return not self.diagnostics

    @property
    def errors(self) -> List[str]:
        return [str(d) for d in self.diagnostics]

    def __str__(self) -> str:
        if self.is_valid:
            return "✓ Valid" + (f": {self.instance_path}" if self.instance_path else "")
        else:
            prefix = f"{self.instance_path}: " if self.instance_path else ""
            return f"✗ Invalid: {prefix}" + "; ".join(self.errors)

    def __repr__(self) -> str:
        return f"ValidationResult(is_valid={self.is_valid}, errors={self.errors})"


def validate_instance(
    instance: Any,
    schema: Union[SchemaNode, Dict[str, Any]]
) -> ValidationResult:
    """Validates a JSON instance against a schema.

    Args:
        instance: The JSON value to validate
        schema: The schema, either already read or as a decoded JSON document

    Returns:
        ValidationResult with the diagnostics found

    Raises:
        SchemaError: If the schema is malformed
    """
    if not isinstance(schema, SchemaNode):
        schema = read_schema(schema)
    return ValidationResult(SchemaValidator(schema).validate(instance))


def load_instances(instance_file: str) -> List[Tuple[Any, str]]:
    """Reads the instance(s) in a file, paired with a display path.

    A file holds either one JSON document or JSON Lines (one document per line).

    Raises:
        JsonSyntaxError: If the file is neither
    """
    with open(instance_file, 'r', encoding='utf-8') as f:
        content = f.read()

    try:
        return [(json.loads(content), instance_file)]
    except json.JSONDecodeError as e:
        error = e

    lines = [(i, line.strip()) for i, line in enumerate(content.split('\n')) if line.strip()]
    if len(lines) < 2:
        raise JsonSyntaxError(instance_file, error.lineno, error.colno, error.msg)

    instances = []
    for i, line in lines:
        try:
            instances.append((json.loads(line), f"{instance_file}:{i+1}"))
        except json.JSONDecodeError as e:
            raise JsonSyntaxError(instance_file, i + 1, e.colno, e.msg) from e
    return instances


def validate_file(
    instance_file: str,
    schema_file: str
) -> List[ValidationResult]:
    """Validates a JSON instance file against a schema file.

    Args:
        instance_file: Path to JSON file (single document or JSONL)
        schema_file: Path to JSON Schema file

    Returns:
        List of ValidationResult for each instance in the file
    """
    validator = SchemaValidator(load_schema(schema_file))

    results = []
    for instance, path in load_instances(instance_file):
        logger.debug("Validating %s against %s", path, schema_file)
        results.append(ValidationResult(validator.validate(instance), instance_path=path))
    return results


def validate_json_instances(
    input_files: List[str],
    schema_file: str,
    verbose: bool = False
) -> Tuple[int, int]:
    """Validates multiple JSON instance files against a schema.

    Args:
        input_files: List of JSON file paths to validate
        schema_file: Path to schema file
        verbose: Whether to print validation results

    Returns:
        Tuple of (valid_count, invalid_count)
    """
    valid_count = 0
    invalid_count = 0

    for input_file in input_files:
        for result in validate_file(input_file, schema_file):
            if result.is_valid:
                valid_count += 1
            else:
                invalid_count += 1
            if verbose:
                print(result)

    return valid_count, invalid_count


# Command entry point for the jschema CLI
def validate(
    input: List[str],
    schema: str,
    quiet: bool = False
) -> None:
    """Validates JSON instances against a JSON Schema.

    Args:
        input: List of JSON files to validate
        schema: Path to the JSON Schema file
        quiet: Suppress output, exit with code 0 if valid, 1 if invalid
    """
    valid_count, invalid_count = validate_json_instances(
        input_files=input,
        schema_file=schema,
        verbose=not quiet
    )

    if not quiet:
        total = valid_count + invalid_count
        print(f"\nValidation summary: {valid_count}/{total} instances valid")

    if invalid_count > 0:
        sys.exit(1)
