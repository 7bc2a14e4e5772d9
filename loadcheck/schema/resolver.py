"""
``$ref`` resolution against a compiled schema document.

References are JSON pointers into the same document (``#/definitions/User``,
``#/properties/items/0``).  They are followed lazily, at validation time,
and a reference whose target is itself a reference is followed again until a
concrete schema is reached.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

from loadcheck.errors import SchemaReferenceError
from loadcheck.schema.nodes import SchemaNode, parse_node

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class ValidationContext:
    """
    Everything needed to resolve references for one schema document.

    Attributes:
        document: The root schema exactly as decoded.
        definitions: The document's ``definitions`` map (empty if absent).
        root: The parsed root node.
    """

    document: Mapping[str, Any]
    definitions: Mapping[str, Any]
    root: SchemaNode
    _nodes: Mapping[int, SchemaNode] = field(default_factory=dict, repr=False)

    def node_for(self, fragment: Mapping[str, Any], location: str) -> SchemaNode:
        """Return the parsed node for a raw fragment of :attr:`document`."""
        node = self._nodes.get(id(fragment))
        if node is None:
            # Fragments outside schema keywords (e.g. ``components``) are not
            # indexed at compile time.
            node = parse_node(fragment, location)
        return node


def build_context(document: Mapping[str, Any]) -> ValidationContext:
    """Parse *document* once and index every fragment for pointer lookups."""
    nodes: dict[int, SchemaNode] = {}

    def remember(fragment: Mapping[str, Any], node: SchemaNode) -> None:
        nodes[id(fragment)] = node

    root = parse_node(document, "#", remember)
    definitions = document.get("definitions") or {}
    logger.debug("Indexed %d schema fragments", len(nodes))
    return ValidationContext(
        document=document,
        definitions=definitions,
        root=root,
        _nodes=nodes,
    )


def _unescape(segment: str) -> str:
    return segment.replace("~1", "/").replace("~0", "~")


def _follow_pointer(ref: str, document: Mapping[str, Any]) -> Any:
    """Walk *document* along the ``/``-separated pointer *ref*."""
    segments = ref.split("/")
    if segments and segments[0] == "#":
        segments = segments[1:]

    current: Any = document
    for segment in segments:
        if segment == "":
            continue
        key = _unescape(segment)
        if isinstance(current, Mapping):
            if key not in current:
                raise SchemaReferenceError(f"Invalid reference: {ref}", ref)
            current = current[key]
        elif isinstance(current, list):
            try:
                current = current[int(key)]
            except (ValueError, IndexError) as exc:
                raise SchemaReferenceError(f"Invalid reference: {ref}", ref) from exc
        else:
            raise SchemaReferenceError(f"Invalid reference path: {ref}", ref)

    if not isinstance(current, Mapping):
        raise SchemaReferenceError(f"Reference does not point to a schema object: {ref}", ref)
    return current


def resolve(node: SchemaNode, context: ValidationContext) -> SchemaNode:
    """
    Return the concrete schema *node* stands for.

    Nodes without ``$ref`` resolve to themselves.  Otherwise the pointer is
    followed, and followed again while the target carries its own ``$ref``.

    Raises:
        SchemaReferenceError: If a pointer segment is missing, or the chain
            of references loops back on itself.
    """
    visited: list[str] = []
    while node.ref is not None:
        ref = node.ref
        if ref in visited:
            chain = " -> ".join([*visited, ref])
            raise SchemaReferenceError(f"Circular reference: {chain}", ref)
        visited.append(ref)
        fragment = _follow_pointer(ref, context.document)
        node = context.node_for(fragment, ref)
    return node
