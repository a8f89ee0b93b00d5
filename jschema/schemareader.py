"""Reads JSON Schema documents into :class:`~jschema.schemamodel.SchemaNode` trees.

Only the shape of each keyword is checked (a ``title`` must be a string, an
``items`` must be an object or an array, and so on); a keyword with the wrong
shape raises :class:`~jschema.diagnostics.InvalidSchemaError`. Unknown
keywords are ignored. Regular expressions are compiled when first used by the
validator, not here.
"""

import json
from typing import Any, Dict, Optional, Tuple

from jsonpointer import escape

from jschema.diagnostics import InvalidSchemaError, SchemaReaderErrorKind
from jschema.schemamodel import (ALLOWED, DISALLOWED, AdditionalSpec, Constrained, Dependency,
                                 PropertyDependency, SchemaDependency, SchemaNode, SchemaType,
                                 SingleSchema, TupleSchemas)

SCHEMA_TYPES = {t.value: t for t in SchemaType}


def _keyword_path(path: str, *segments: Any) -> str:
    return path + ''.join('/' + escape(str(s)) for s in segments)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class SchemaReader:
    """Builds a schema tree from a decoded JSON Schema document."""

    def read(self, document: Any, path: str = '#') -> SchemaNode:
        if not isinstance(document, dict):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_AN_OBJECT, path,
                                     f"A schema must be an object, not {type(document).__name__}")

        return SchemaNode(
            id=self._string(document, 'id', path),
            schema_version=self._string(document, '$schema', path),
            title=self._string(document, 'title', path),
            description=self._string(document, 'description', path),
            types=self._types(document, path),
            reference=self._string(document, '$ref', path),
            enum=self._enum(document, path),
            items=self._items(document, path),
            additional_items=self._additional(document, 'additionalItems', path,
                                              SchemaReaderErrorKind.INVALID_ADDITIONAL_ITEMS_TYPE),
            min_items=self._count(document, 'minItems', path),
            max_items=self._count(document, 'maxItems', path),
            unique_items=self._boolean(document, 'uniqueItems', path),
            min_properties=self._count(document, 'minProperties', path),
            max_properties=self._count(document, 'maxProperties', path),
            required=self._required(document, path),
            properties=self._schema_map(document, 'properties', path),
            pattern_properties=self._schema_map(document, 'patternProperties', path),
            additional_properties=self._additional(document, 'additionalProperties', path,
                                                   SchemaReaderErrorKind.INVALID_ADDITIONAL_PROPERTIES_TYPE),
            dependencies=self._dependencies(document, path),
            min_length=self._count(document, 'minLength', path),
            max_length=self._count(document, 'maxLength', path),
            pattern=self._string(document, 'pattern', path),
            multiple_of=self._multiple_of(document, path),
            minimum=self._number(document, 'minimum', path),
            maximum=self._number(document, 'maximum', path),
            exclusive_minimum=self._boolean(document, 'exclusiveMinimum', path),
            exclusive_maximum=self._boolean(document, 'exclusiveMaximum', path),
            all_of=self._schema_list(document, 'allOf', path),
            any_of=self._schema_list(document, 'anyOf', path),
            one_of=self._schema_list(document, 'oneOf', path),
            not_=self.read(document['not'], _keyword_path(path, 'not')) if 'not' in document else None,
            format=self._string(document, 'format', path),
            default=document.get('default'),
            definitions=self._schema_map(document, 'definitions', path),
        )

    def _string(self, document: Dict[str, Any], keyword: str, path: str) -> Optional[str]:
        value = document.get(keyword)
        if value is not None and not isinstance(value, str):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_A_STRING, _keyword_path(path, keyword),
                                     f"'{keyword}' must be a string")
        return value

    def _boolean(self, document: Dict[str, Any], keyword: str, path: str) -> bool:
        value = document.get(keyword, False)
        if not isinstance(value, bool):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_A_BOOLEAN, _keyword_path(path, keyword),
                                     f"'{keyword}' must be a boolean")
        return value

    def _number(self, document: Dict[str, Any], keyword: str, path: str) -> Optional[float]:
        value = document.get(keyword)
        if value is not None and not _is_number(value):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_A_NUMBER, _keyword_path(path, keyword),
                                     f"'{keyword}' must be a number")
        return value

    def _count(self, document: Dict[str, Any], keyword: str, path: str) -> Optional[int]:
        value = document.get(keyword)
        if value is None:
            return None
        if _is_number(value) and float(value).is_integer() and value >= 0:
            return int(value)
        raise InvalidSchemaError(SchemaReaderErrorKind.NOT_A_NUMBER, _keyword_path(path, keyword),
                                 f"'{keyword}' must be a non-negative integer")

    def _multiple_of(self, document: Dict[str, Any], path: str) -> Optional[float]:
        value = self._number(document, 'multipleOf', path)
        if value is not None and value <= 0:
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_A_NUMBER, _keyword_path(path, 'multipleOf'),
                                     "'multipleOf' must be greater than 0")
        return value

    def _types(self, document: Dict[str, Any], path: str) -> frozenset:
        value = document.get('type')
        if value is None:
            return frozenset()
        type_path = _keyword_path(path, 'type')
        names = [value] if isinstance(value, str) else value
        if not isinstance(names, list):
            raise InvalidSchemaError(SchemaReaderErrorKind.INVALID_TYPE_TYPE, type_path,
                                     "'type' must be a string or an array of strings")
        types = set()
        for name in names:
            if not isinstance(name, str):
                raise InvalidSchemaError(SchemaReaderErrorKind.INVALID_TYPE_TYPE, type_path,
                                         "'type' must be a string or an array of strings")
            if name not in SCHEMA_TYPES:
                raise InvalidSchemaError(SchemaReaderErrorKind.INVALID_TYPE_STRING, type_path,
                                         f"'{name}' is not a valid JSON Schema type")
            types.add(SCHEMA_TYPES[name])
        return frozenset(types)

    def _enum(self, document: Dict[str, Any], path: str) -> Optional[Tuple[Any, ...]]:
        value = document.get('enum')
        if value is None:
            return None
        if not isinstance(value, list):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_AN_ARRAY, _keyword_path(path, 'enum'),
                                     "'enum' must be an array")
        return tuple(value)

    def _required(self, document: Dict[str, Any], path: str) -> Tuple[str, ...]:
        value = document.get('required', [])
        if not isinstance(value, list):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_AN_ARRAY, _keyword_path(path, 'required'),
                                     "'required' must be an array of strings")
        for index, name in enumerate(value):
            if not isinstance(name, str):
                raise InvalidSchemaError(SchemaReaderErrorKind.NOT_A_STRING, _keyword_path(path, 'required', index),
                                         "'required' must be an array of strings")
        return tuple(value)

    def _schema_map(self, document: Dict[str, Any], keyword: str, path: str) -> Dict[str, SchemaNode]:
        value = document.get(keyword, {})
        if not isinstance(value, dict):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_AN_OBJECT, _keyword_path(path, keyword),
                                     f"'{keyword}' must be an object")
        return {name: self.read(subschema, _keyword_path(path, keyword, name)) for name, subschema in value.items()}

    def _schema_list(self, document: Dict[str, Any], keyword: str, path: str) -> Optional[Tuple[SchemaNode, ...]]:
        value = document.get(keyword)
        if value is None:
            return None
        if not isinstance(value, list):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_AN_ARRAY, _keyword_path(path, keyword),
                                     f"'{keyword}' must be an array of schemas")
        return tuple(self.read(subschema, _keyword_path(path, keyword, i)) for i, subschema in enumerate(value))

    def _items(self, document: Dict[str, Any], path: str):
        value = document.get('items')
        items_path = _keyword_path(path, 'items')
        if value is None:
            return None
        if isinstance(value, dict):
            return SingleSchema(self.read(value, items_path))
        if isinstance(value, list):
            return TupleSchemas(tuple(self.read(s, _keyword_path(items_path, i)) for i, s in enumerate(value)))
        raise InvalidSchemaError(SchemaReaderErrorKind.INVALID_ITEMS_TYPE, items_path,
                                 "'items' must be an object or an array")

    def _additional(self, document: Dict[str, Any], keyword: str, path: str,
                    error_kind: SchemaReaderErrorKind) -> AdditionalSpec:
        value = document.get(keyword, True)
        if isinstance(value, bool):
            return ALLOWED if value else DISALLOWED
        if isinstance(value, dict):
            return Constrained(self.read(value, _keyword_path(path, keyword)))
        raise InvalidSchemaError(error_kind, _keyword_path(path, keyword),
                                 f"'{keyword}' must be a boolean or an object")

    def _dependencies(self, document: Dict[str, Any], path: str) -> Dict[str, Dependency]:
        value = document.get('dependencies', {})
        if not isinstance(value, dict):
            raise InvalidSchemaError(SchemaReaderErrorKind.NOT_AN_OBJECT, _keyword_path(path, 'dependencies'),
                                     "'dependencies' must be an object")
        dependencies: Dict[str, Dependency] = {}
        for name, dependency in value.items():
            dependency_path = _keyword_path(path, 'dependencies', name)
            if isinstance(dependency, dict):
                dependencies[name] = SchemaDependency(self.read(dependency, dependency_path))
            elif isinstance(dependency, list):
                if not all(isinstance(n, str) for n in dependency):
                    raise InvalidSchemaError(SchemaReaderErrorKind.INVALID_PROPERTY_DEPENDENCY_TYPE, dependency_path,
                                             f"The property dependencies of '{name}' must be strings")
                dependencies[name] = PropertyDependency(tuple(dependency))
            else:
                raise InvalidSchemaError(SchemaReaderErrorKind.INVALID_DEPENDENCY_TYPE, dependency_path,
                                         f"The dependency of '{name}' must be an object or an array")
        return dependencies


def read_schema(document: Any) -> SchemaNode:
    """Builds a schema tree from a decoded JSON Schema document."""
    return SchemaReader().read(document)


def read_schema_text(text: str) -> SchemaNode:
    """Builds a schema tree from JSON Schema text."""
    return read_schema(json.loads(text))


def load_schema(schema_file: str) -> SchemaNode:
    """Reads a JSON Schema file."""
    with open(schema_file, 'r', encoding='utf-8') as f:
        return read_schema(json.load(f))

