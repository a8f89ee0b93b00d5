"""Diagnostics produced by a validation run, and the schema error hierarchy.

Instance violations are recorded as :class:`Diagnostic` values in a
:class:`DiagnosticSink`; they never interrupt validation. Problems with the
schema document itself are raised as :class:`SchemaError` subclasses and abort
the run.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, List, Optional, Sequence, Tuple


class ErrorKind(IntEnum):
    """Instance violations. Values are stable and appear in rule ids."""
    WRONG_TYPE = 1001
    REQUIRED_PROPERTY_MISSING = 1002
    TOO_FEW_ARRAY_ITEMS = 1003
    TOO_MANY_ARRAY_ITEMS = 1004
    ADDITIONAL_PROPERTIES_PROHIBITED = 1005
    VALUE_TOO_LARGE = 1006
    VALUE_TOO_LARGE_EXCLUSIVE = 1007
    VALUE_TOO_SMALL = 1008
    VALUE_TOO_SMALL_EXCLUSIVE = 1009
    TOO_MANY_PROPERTIES = 1010
    TOO_FEW_PROPERTIES = 1011
    NOT_A_MULTIPLE = 1012
    STRING_TOO_LONG = 1013
    STRING_TOO_SHORT = 1014
    STRING_DOES_NOT_MATCH_PATTERN = 1015
    NOT_ALL_OF = 1016
    NOT_ANY_OF = 1017
    NOT_ONE_OF = 1018
    INVALID_ENUM_VALUE = 1019
    NOT_UNIQUE = 1020
    TOO_FEW_ITEM_SCHEMAS = 1021
    VALIDATES_AGAINST_NOT_SCHEMA = 1022
    DEPENDENT_PROPERTY_MISSING = 1023


class SchemaReaderErrorKind(IntEnum):
    """Problems found while reading a schema document."""
    NOT_A_STRING = 1
    INVALID_ADDITIONAL_PROPERTIES_TYPE = 2
    INVALID_ITEMS_TYPE = 3
    INVALID_TYPE_TYPE = 4
    INVALID_TYPE_STRING = 5
    INVALID_ADDITIONAL_ITEMS_TYPE = 6
    INVALID_DEPENDENCY_TYPE = 7
    INVALID_PROPERTY_DEPENDENCY_TYPE = 8
    NOT_AN_OBJECT = 9
    NOT_A_NUMBER = 10
    NOT_A_BOOLEAN = 11
    NOT_AN_ARRAY = 12


RULE_ID_FORMAT = 'JSON{0:04d}'


def rule_id(code: int) -> str:
    return RULE_ID_FORMAT.format(int(code))


@dataclass(frozen=True)
class Diagnostic:
    """One violation found in an instance document.

    Attributes:
        error_code: The kind of violation
        path: JSON Pointer to the offending value ("" is the root)
        line: 1-based source line, if the instance carried locations
        column: 1-based source column, if the instance carried locations
        args: Message arguments, already rendered as strings
    """
    error_code: ErrorKind
    path: str
    line: Optional[int] = None
    column: Optional[int] = None
    args: Tuple[str, ...] = ()

    @property
    def rule_id(self) -> str:
        return rule_id(self.error_code)

    def __str__(self) -> str:
        # Imported here; rules imports this module.
        from jschema.rules import format_message
        return format_message(self)


class DiagnosticSink:
    """Ordered, append-only collection of the diagnostics of one run."""

    def __init__(self) -> None:
        self._diagnostics: List[Diagnostic] = []

    def add(self, code: ErrorKind, located_at: str, *args: str,
            location: Optional[Tuple[int, int]] = None) -> Diagnostic:
        line, column = location if location else (None, None)
        diagnostic = Diagnostic(code, located_at, line, column, tuple(args))
        self._diagnostics.append(diagnostic)
        return diagnostic

    def to_list(self) -> List[Diagnostic]:
        return list(self._diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def __bool__(self) -> bool:
        return bool(self._diagnostics)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._diagnostics)


class SchemaError(Exception):
    """
    Raised when the schema document cannot be used for validation.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
    """

    def __init__(self, message: str, context: Optional[str] = None) -> None:
        self.message = message
        self.context = context
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


class UnsupportedReferenceError(SchemaError):
    """A ``$ref`` that is not a local ``#/definitions/<name>`` fragment."""

    def __init__(self, reference: str) -> None:
        self.reference = reference
        super().__init__(
            f"Only references to '#/definitions/<name>' are supported: '{reference}'")


class UndefinedReferenceError(SchemaError):
    """A ``$ref`` naming a definition the root schema does not have."""

    def __init__(self, reference: str, definition_name: str) -> None:
        self.reference = reference
        self.definition_name = definition_name
        super().__init__(
            f"The schema does not define '{definition_name}'", context=reference)


class ReferenceCycleError(SchemaError):
    """
    Raised when following definitions does not terminate.

    Attributes:
        cycle_path: The chain of references being followed
    """

    def __init__(self, cycle_path: Sequence[str], context: Optional[str] = None) -> None:
        self.cycle_path = list(cycle_path)
        cycle_str = ' -> '.join(self.cycle_path)
        super().__init__(f"Circular schema reference detected: {cycle_str}", context=context)


class InvalidPatternError(SchemaError):
    """A ``pattern`` or ``patternProperties`` key that is not a valid regex."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        super().__init__(f"Invalid regular expression '{pattern}': {reason}")


class InvalidSchemaError(SchemaError):
    """The schema document has a keyword whose value has the wrong shape."""

    def __init__(self, error_kind: SchemaReaderErrorKind, path: str, message: str) -> None:
        self.error_kind = error_kind
        self.path = path
        super().__init__(f"{rule_id(error_kind)}: {message}", context=path or '#')
