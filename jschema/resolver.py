"""Resolution of ``$ref`` against the root schema's ``definitions``.

Only local fragments of the form ``#/definitions/<name>`` are supported. The
definition name is the single JSON Pointer segment after ``definitions``, so
``~0``/``~1`` escapes and percent-encoding are undone before the lookup.
"""

import logging
import re
from typing import Dict, Mapping, Optional
from urllib.parse import unquote, urlparse

from jsonpointer import unescape

from jschema.diagnostics import ReferenceCycleError, UndefinedReferenceError, UnsupportedReferenceError
from jschema.schemamodel import SchemaNode

logger = logging.getLogger(__name__)

DEFINITION_POINTER = re.compile(r'^/definitions/(?P<name>[^/]+)$')


def get_definition_name(reference: str) -> str:
    """Returns the definition name a local ``$ref`` points to.

    Raises:
        UnsupportedReferenceError: If *reference* is not ``#/definitions/<name>``
    """
    url = urlparse(reference)
    if url.scheme or url.netloc or url.path or not reference.startswith('#'):
        raise UnsupportedReferenceError(reference)
    match = DEFINITION_POINTER.match(unquote(url.fragment))
    if not match:
        raise UnsupportedReferenceError(reference)
    return unescape(match.group('name'))


class DefinitionResolver:
    """Looks up ``$ref`` targets in a flat name-to-schema map."""

    def __init__(self, definitions: Optional[Mapping[str, SchemaNode]] = None) -> None:
        self.definitions: Dict[str, SchemaNode] = dict(definitions or {})

    def resolve(self, node: SchemaNode) -> SchemaNode:
        """Returns the schema *node* refers to, or *node* itself if it has no ``$ref``.

        Resolution is a single step; a definition that itself has a ``$ref``
        is returned as is.

        Raises:
            UnsupportedReferenceError: If the reference is not a local definitions fragment
            UndefinedReferenceError: If the named definition does not exist
        """
        if node.reference is None:
            return node
        name = get_definition_name(node.reference)
        if name not in self.definitions:
            raise UndefinedReferenceError(node.reference, name)
        logger.debug("Resolved %s", node.reference)
        return self.definitions[name]

    def resolve_fully(self, node: SchemaNode) -> SchemaNode:
        """Follows ``$ref`` until reaching a schema without one.

        Raises:
            ReferenceCycleError: If the chain of references loops
        """
        chain = []
        while node.reference is not None:
            chain.append(node.reference)
            node = self.resolve(node)
            if len(chain) > len(self.definitions):
                raise ReferenceCycleError(chain)
        return node
