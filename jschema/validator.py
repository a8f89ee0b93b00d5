"""Validates JSON instances against JSON Schema (draft-04) documents.

The validator walks the instance depth-first and records every violation it
finds; it does not stop at the first one. Checks on a value run in this order:

1. ``type``. A mismatch is recorded and nothing else is checked for that value.
2. Keywords specific to the value's kind (string, number, object, array).
3. ``enum``, ``allOf``, ``anyOf``, ``oneOf`` and ``not``.

Each combinator branch is evaluated on its own with a fresh
:class:`~jschema.diagnostics.DiagnosticSink`; only the combinator's own
verdict is reported to the parent.

Schema problems (bad ``$ref``, bad regex, runaway recursion) raise
:class:`~jschema.diagnostics.SchemaError`.
"""

import functools
import logging
import re
import sys
from fractions import Fraction
from typing import Any, Dict, Hashable, List, Mapping, Optional, Pattern, Sequence, Tuple

from jschema.diagnostics import (Diagnostic, DiagnosticSink, ErrorKind, InvalidPatternError,
                                 ReferenceCycleError, SchemaError)
from jschema.equality import count_distinct, token_matches_enum
from jschema.jsonvalue import (child_path, format_list, format_names, format_types, format_value,
                               json_kind, unicode_length)
from jschema.resolver import DefinitionResolver
from jschema.schemamodel import (Constrained, Disallowed, PropertyDependency, SchemaDependency,
                                 SchemaNode, SchemaType, SingleSchema, TupleSchemas)

logger = logging.getLogger(__name__)

# Maximum number of nested schema applications along one path of the walk.
# Each application takes about three interpreter frames, so the bound has to
# stay well below the recursion limit.
MAX_VALIDATION_DEPTH = sys.getrecursionlimit() // 5

# One entry per schema application on the current walk: (key, instance path, $ref).
# The key is the schema's id, or ('dependencies', id) for a schema dependency,
# which applies only the object keywords of its schema.
Frame = Tuple[Hashable, str, Optional[str]]


@functools.lru_cache(maxsize=None)
def compile_pattern(pattern: str) -> Pattern:
    """Compiles a ``pattern``/``patternProperties`` regex, once per distinct pattern.

    Raises:
        InvalidPatternError: If *pattern* is not a valid regular expression
    """
    try:
        return re.compile(pattern)
    except re.error as e:
        raise InvalidPatternError(pattern, str(e)) from e


def matches_pattern(value: str, pattern: str) -> bool:
    """True if *pattern* matches anywhere in *value*."""
    return compile_pattern(pattern).search(value) is not None


def is_multiple_of(value: Any, factor: Any) -> bool:
    """True if value / factor is a whole number.

    Floats are taken at their shortest decimal representation and divided
    exactly, so ``0.3`` counts as a multiple of ``0.1`` and large integers
    are not rounded.
    """
    if factor == 0:
        raise SchemaError("'multipleOf' must be greater than 0")
    if isinstance(value, int) and isinstance(factor, int):
        return value % factor == 0
    try:
        quotient = Fraction(repr(value)) / Fraction(repr(factor))
    except ValueError as e:
        raise SchemaError(f"Cannot test {value} for being a multiple of {factor}") from e
    return quotient.denominator == 1


class SchemaValidator:
    """Validates JSON instances against a schema.

    Args:
        schema: The root schema. If it is itself a ``$ref``, it is resolved first.
        definitions: Targets for ``#/definitions/<name>`` references. Defaults to
            the root schema's own ``definitions``.
        locations: Optional map from instance JSON Pointer to (line, column),
            used to fill in :attr:`Diagnostic.line` and :attr:`Diagnostic.column`.
        max_depth: Bound on nested schema applications along one walk.
    """

    def __init__(self,
                 schema: SchemaNode,
                 definitions: Optional[Mapping[str, SchemaNode]] = None,
                 locations: Optional[Mapping[str, Tuple[int, int]]] = None,
                 max_depth: int = MAX_VALIDATION_DEPTH) -> None:
        if schema is None:
            raise ValueError('A schema is required')
        self.resolver = DefinitionResolver(schema.definitions if definitions is None else definitions)
        self.schema = self.resolver.resolve_fully(schema)
        self.locations: Mapping[str, Tuple[int, int]] = locations or {}
        self.max_depth = max_depth

    def validate(self, instance: Any, instance_path: str = '') -> List[Diagnostic]:
        """Validates *instance* against the root schema.

        Args:
            instance: The JSON value to validate
            instance_path: JSON Pointer of *instance* within its document

        Returns:
            The diagnostics, in the order they were found (empty if valid)

        Raises:
            SchemaError: If the schema cannot be applied
        """
        try:
            diagnostics = self.evaluate(instance, self.schema, instance_path)
        except RecursionError as e:
            raise ReferenceCycleError([], context=instance_path or 'root') from e
        logger.debug("Validated %s: %d diagnostic(s)", instance_path or 'root', len(diagnostics))
        return diagnostics

    def evaluate(self, value: Any, schema: SchemaNode, path: str = '',
                 trail: Tuple[Frame, ...] = ()) -> List[Diagnostic]:
        """Validates *value* against *schema* in isolation and returns its diagnostics."""
        sink = DiagnosticSink()
        self._validate_token(sink, value, self._resolve(schema), path, trail, schema.reference)
        return sink.to_list()

    def is_valid(self, instance: Any) -> bool:
        return not self.validate(instance)

    def _resolve(self, schema: SchemaNode) -> SchemaNode:
        return self.resolver.resolve_fully(schema)

    def _add(self, sink: DiagnosticSink, kind: ErrorKind, path: str, *args: str) -> None:
        sink.add(kind, path, *args, location=self.locations.get(path))

    def _enter(self, schema: SchemaNode, path: str, trail: Tuple[Frame, ...],
               reference: Optional[str], key: Optional[Hashable] = None) -> Tuple[Frame, ...]:
        """Pushes a frame for applying *schema* at *path*, refusing to loop."""
        key = id(schema) if key is None else key
        for index, (frame_key, frame_path, _) in enumerate(trail):
            if frame_key == key and frame_path == path:
                references = [ref for _, _, ref in trail[index:] if ref] + [reference or '#']
                raise ReferenceCycleError(references, context=path or 'root')
        if len(trail) >= self.max_depth:
            logger.warning("Maximum validation depth %d exceeded at %s", self.max_depth, path or 'root')
            references = [ref for _, _, ref in trail if ref][-8:]
            raise ReferenceCycleError(references, context=path or 'root')
        return trail + ((key, path, reference),)

    def _validate_token(self, sink: DiagnosticSink, value: Any, schema: SchemaNode, path: str,
                        trail: Tuple[Frame, ...], reference: Optional[str] = None) -> None:
        trail = self._enter(schema, path, trail, reference)
        kind = json_kind(value)

        if not schema.allows_type(kind):
            self._add(sink, ErrorKind.WRONG_TYPE, path, format_types(schema.sorted_types()), str(kind))
            return

        if kind == SchemaType.STRING:
            self._validate_string(sink, value, schema, path)
        elif kind in (SchemaType.INTEGER, SchemaType.NUMBER):
            self._validate_number(sink, value, schema, path)
        elif kind == SchemaType.OBJECT:
            self._validate_object(sink, value, schema, path, trail)
        elif kind == SchemaType.ARRAY:
            self._validate_array(sink, value, schema, path, trail)

        if schema.enum is not None:
            self._validate_enum(sink, value, schema.enum, path)
        if schema.all_of is not None:
            self._validate_all_of(sink, value, schema.all_of, path, trail)
        if schema.any_of is not None:
            self._validate_any_of(sink, value, schema.any_of, path, trail)
        if schema.one_of is not None:
            self._validate_one_of(sink, value, schema.one_of, path, trail)
        if schema.not_ is not None:
            self._validate_not(sink, value, schema.not_, path, trail)

    def _validate_child(self, sink: DiagnosticSink, value: Any, schema: SchemaNode, path: str,
                        trail: Tuple[Frame, ...]) -> None:
        self._validate_token(sink, value, self._resolve(schema), path, trail, schema.reference)

    def _validate_string(self, sink: DiagnosticSink, value: str, schema: SchemaNode, path: str) -> None:
        if schema.max_length is not None:
            length = unicode_length(value)
            if length > schema.max_length:
                self._add(sink, ErrorKind.STRING_TOO_LONG, path,
                          format_value(value), str(length), str(schema.max_length))

        if schema.min_length is not None:
            length = unicode_length(value)
            if length < schema.min_length:
                self._add(sink, ErrorKind.STRING_TOO_SHORT, path,
                          format_value(value), str(length), str(schema.min_length))

        if schema.pattern is not None and not matches_pattern(value, schema.pattern):
            self._add(sink, ErrorKind.STRING_DOES_NOT_MATCH_PATTERN, path, format_value(value), schema.pattern)

    def _validate_number(self, sink: DiagnosticSink, value: Any, schema: SchemaNode, path: str) -> None:
        if schema.maximum is not None:
            maximum = schema.maximum
            if schema.exclusive_maximum and value >= maximum:
                self._add(sink, ErrorKind.VALUE_TOO_LARGE_EXCLUSIVE, path, format_value(value), format_value(maximum))
            elif value > maximum:
                self._add(sink, ErrorKind.VALUE_TOO_LARGE, path, format_value(value), format_value(maximum))

        if schema.minimum is not None:
            minimum = schema.minimum
            if schema.exclusive_minimum and value <= minimum:
                self._add(sink, ErrorKind.VALUE_TOO_SMALL_EXCLUSIVE, path, format_value(value), format_value(minimum))
            elif value < minimum:
                self._add(sink, ErrorKind.VALUE_TOO_SMALL, path, format_value(value), format_value(minimum))

        if schema.multiple_of is not None and not is_multiple_of(value, schema.multiple_of):
            self._add(sink, ErrorKind.NOT_A_MULTIPLE, path, format_value(value), format_value(schema.multiple_of))

    def _validate_object(self, sink: DiagnosticSink, value: Dict[str, Any], schema: SchemaNode, path: str,
                         trail: Tuple[Frame, ...]) -> None:
        instance_keys = list(value.keys())

        if schema.max_properties is not None and len(instance_keys) > schema.max_properties:
            self._add(sink, ErrorKind.TOO_MANY_PROPERTIES, path, str(schema.max_properties), str(len(instance_keys)))

        if schema.min_properties is not None and len(instance_keys) < schema.min_properties:
            self._add(sink, ErrorKind.TOO_FEW_PROPERTIES, path, str(schema.min_properties), str(len(instance_keys)))

        reported = set()
        for name in schema.required:
            if name not in value and name not in reported:
                reported.add(name)
                self._add(sink, ErrorKind.REQUIRED_PROPERTY_MISSING, path, name)

        # Member names are checked before member values.
        if isinstance(schema.additional_properties, Disallowed):
            for key in self._unexpected_properties(instance_keys, schema):
                self._add(sink, ErrorKind.ADDITIONAL_PROPERTIES_PROHIBITED, child_path(path, key), key)

        for key in instance_keys:
            member_path = child_path(path, key)
            for applicable in self._applicable_schemas(key, schema):
                self._validate_child(sink, value[key], applicable, member_path, trail)

        for name, dependency in schema.dependencies.items():
            if name in value:
                self._validate_dependency(sink, value, name, dependency, path, trail)

    @staticmethod
    def _applicable_schemas(key: str, schema: SchemaNode) -> List[SchemaNode]:
        """The schemas member *key* must validate against (possibly none)."""
        applicable = []
        if key in schema.properties:
            applicable.append(schema.properties[key])
        for pattern, pattern_schema in schema.pattern_properties.items():
            if matches_pattern(key, pattern):
                applicable.append(pattern_schema)
        if not applicable and isinstance(schema.additional_properties, Constrained):
            applicable.append(schema.additional_properties.schema)
        return applicable

    @staticmethod
    def _unexpected_properties(instance_keys: Sequence[str], schema: SchemaNode) -> List[str]:
        """Members covered neither by ``properties`` nor by any ``patternProperties`` regex."""
        return [
            key for key in instance_keys
            if key not in schema.properties
            and not any(matches_pattern(key, pattern) for pattern in schema.pattern_properties)
        ]

    def _validate_dependency(self, sink: DiagnosticSink, value: Dict[str, Any], name: str, dependency: Any,
                             path: str, trail: Tuple[Frame, ...]) -> None:
        if isinstance(dependency, PropertyDependency):
            missing = [n for n in dependency.property_names if n not in value]
            if missing:
                self._add(sink, ErrorKind.DEPENDENT_PROPERTY_MISSING, path,
                          name, format_names(dependency.property_names), format_names(missing))
        elif isinstance(dependency, SchemaDependency):
            dependency_schema = self._resolve(dependency.schema)
            trail = self._enter(dependency_schema, path, trail, dependency.schema.reference,
                                key=('dependencies', id(dependency_schema)))
            self._validate_object(sink, value, dependency_schema, path, trail)
        else:
            raise TypeError(f"Unknown dependency type: {type(dependency).__name__}")

    def _validate_array(self, sink: DiagnosticSink, value: List[Any], schema: SchemaNode, path: str,
                        trail: Tuple[Frame, ...]) -> None:
        count = len(value)

        if schema.min_items is not None and count < schema.min_items:
            self._add(sink, ErrorKind.TOO_FEW_ARRAY_ITEMS, path, str(schema.min_items), str(count))

        if schema.max_items is not None and count > schema.max_items:
            self._add(sink, ErrorKind.TOO_MANY_ARRAY_ITEMS, path, str(schema.max_items), str(count))

        # The array itself (as opposed to its elements) fails to validate only if
        # "items" is an array of schemas and "additionalItems" is false.
        if (isinstance(schema.items, TupleSchemas)
                and isinstance(schema.additional_items, Disallowed)
                and count > len(schema.items.schemas)):
            self._add(sink, ErrorKind.TOO_FEW_ITEM_SCHEMAS, path, str(count), str(len(schema.items.schemas)))

        if schema.unique_items and count_distinct(value) != count:
            self._add(sink, ErrorKind.NOT_UNIQUE, path)

        items = schema.items
        if isinstance(items, SingleSchema):
            for index, element in enumerate(value):
                self._validate_child(sink, element, items.schema, child_path(path, index), trail)
        elif isinstance(items, TupleSchemas):
            for index, element in enumerate(value):
                if index < len(items.schemas):
                    self._validate_child(sink, element, items.schemas[index], child_path(path, index), trail)
                elif isinstance(schema.additional_items, Constrained):
                    self._validate_child(sink, element, schema.additional_items.schema,
                                         child_path(path, index), trail)

    def _validate_enum(self, sink: DiagnosticSink, value: Any, enum: Sequence[Any], path: str) -> None:
        if not token_matches_enum(value, enum):
            self._add(sink, ErrorKind.INVALID_ENUM_VALUE, path, format_value(value), format_list(enum))

    def _validate_all_of(self, sink: DiagnosticSink, value: Any, schemas: Sequence[SchemaNode], path: str,
                         trail: Tuple[Frame, ...]) -> None:
        failed = 0
        for schema in schemas:
            if self.evaluate(value, schema, path, trail):
                failed += 1
        logger.debug("allOf at %s: %d of %d schema(s) failed", path or 'root', failed, len(schemas))
        if failed:
            self._add(sink, ErrorKind.NOT_ALL_OF, path, str(len(schemas)))

    def _validate_any_of(self, sink: DiagnosticSink, value: Any, schemas: Sequence[SchemaNode], path: str,
                         trail: Tuple[Frame, ...]) -> None:
        # Errors from the branches that fail are not errors at all if another
        # branch succeeds, so each branch is evaluated in isolation.
        for schema in schemas:
            if not self.evaluate(value, schema, path, trail):
                return
        self._add(sink, ErrorKind.NOT_ANY_OF, path, str(len(schemas)))

    def _validate_one_of(self, sink: DiagnosticSink, value: Any, schemas: Sequence[SchemaNode], path: str,
                         trail: Tuple[Frame, ...]) -> None:
        valid_count = sum(1 for schema in schemas if not self.evaluate(value, schema, path, trail))
        logger.debug("oneOf at %s: %d of %d schema(s) matched", path or 'root', valid_count, len(schemas))
        if valid_count != 1:
            self._add(sink, ErrorKind.NOT_ONE_OF, path, str(valid_count), str(len(schemas)))

    def _validate_not(self, sink: DiagnosticSink, value: Any, schema: SchemaNode, path: str,
                      trail: Tuple[Frame, ...]) -> None:
        if not self.evaluate(value, schema, path, trail):
            self._add(sink, ErrorKind.VALIDATES_AGAINST_NOT_SCHEMA, path)


def validate(instance: Any, schema: SchemaNode,
             definitions: Optional[Mapping[str, SchemaNode]] = None) -> List[Diagnostic]:
    """Validates *instance* against *schema* and returns the diagnostics."""
    return SchemaValidator(schema, definitions).validate(instance)
