"""Object model for a JSON Schema (draft-04) document.

A schema document is represented as an immutable tree of :class:`SchemaNode`
objects. Keywords whose JSON form is a choice between shapes are modeled as
small closed families of frozen dataclasses:

- ``additionalProperties`` / ``additionalItems``: :class:`Disallowed`,
  :class:`Allowed` or :class:`Constrained`
- ``items``: :class:`SingleSchema` or :class:`TupleSchemas`
- ``dependencies`` values: :class:`PropertyDependency` or :class:`SchemaDependency`

``$ref`` is kept as a string and is never followed by the model itself; see
:mod:`jschema.resolver`.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple, Union


class SchemaType(Enum):
    """The primitive JSON types a schema can name in ``type``."""
    ARRAY = 'array'
    BOOLEAN = 'boolean'
    INTEGER = 'integer'
    NUMBER = 'number'
    NULL = 'null'
    OBJECT = 'object'
    STRING = 'string'

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Disallowed:
    """``false``: no additional members/items are permitted."""


@dataclass(frozen=True)
class Allowed:
    """``true`` or absent: additional members/items are permitted unchecked."""


@dataclass(frozen=True)
class Constrained:
    """A schema: additional members/items are permitted if they validate against it."""
    schema: 'SchemaNode'


AdditionalSpec = Union[Disallowed, Allowed, Constrained]

DISALLOWED = Disallowed()
ALLOWED = Allowed()


@dataclass(frozen=True)
class SingleSchema:
    """``items`` given as one schema, applying to every element."""
    schema: 'SchemaNode'


@dataclass(frozen=True)
class TupleSchemas:
    """``items`` given as an array of schemas, applying positionally."""
    schemas: Tuple['SchemaNode', ...]


ItemsSpec = Union[SingleSchema, TupleSchemas]


@dataclass(frozen=True)
class PropertyDependency:
    """A dependency naming the members that must accompany the dependent member."""
    property_names: Tuple[str, ...]


@dataclass(frozen=True)
class SchemaDependency:
    """A dependency naming a schema the whole object must satisfy."""
    schema: 'SchemaNode'


Dependency = Union[PropertyDependency, SchemaDependency]


@dataclass(frozen=True, eq=False)
class SchemaNode:
    """One JSON Schema (sub)document.

    Mapping-valued keywords are stored as plain dicts. Nodes are never mutated
    once built; use :func:`dataclasses.replace` to derive a modified copy.
    """
    types: FrozenSet[SchemaType] = frozenset()
    reference: Optional[str] = None
    properties: Dict[str, 'SchemaNode'] = field(default_factory=dict)
    pattern_properties: Dict[str, 'SchemaNode'] = field(default_factory=dict)
    additional_properties: AdditionalSpec = ALLOWED
    required: Tuple[str, ...] = ()
    dependencies: Dict[str, Dependency] = field(default_factory=dict)
    items: Optional[ItemsSpec] = None
    additional_items: AdditionalSpec = ALLOWED
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: bool = False
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None
    enum: Optional[Tuple[Any, ...]] = None
    all_of: Optional[Tuple['SchemaNode', ...]] = None
    any_of: Optional[Tuple['SchemaNode', ...]] = None
    one_of: Optional[Tuple['SchemaNode', ...]] = None
    not_: Optional['SchemaNode'] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    multiple_of: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None

    # Descriptive keywords; carried but never asserted.
    id: Optional[str] = None
    schema_version: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    format: Optional[str] = None
    default: Any = None
    definitions: Dict[str, 'SchemaNode'] = field(default_factory=dict)

    @property
    def has_reference(self) -> bool:
        return self.reference is not None

    def allows_type(self, schema_type: SchemaType) -> bool:
        """True if ``type`` is unconstrained or names *schema_type*.

        An integer satisfies a schema that requires ``number``.
        """
        if not self.types or schema_type in self.types:
            return True
        return schema_type == SchemaType.INTEGER and SchemaType.NUMBER in self.types

    def sorted_types(self) -> List[SchemaType]:
        return sorted(self.types, key=lambda t: t.value)
