"""
Core type representation for code generation.

A TypeNode describes one named type derived from a structural
(OpenAPI v3) schema node. Nodes are immutable once built by the
SchemaWalker and are shared read-only by every generator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class TypeKind(Enum):
    """Shape of a generated type."""

    PRIMITIVE = "primitive"
    OBJECT = "object"
    ARRAY = "array"
    MAP = "map"
    UNKNOWN = "unknown"


class PrimitiveKind(Enum):
    """Scalar types a schema leaf can map to."""

    STRING = "string"
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"


@dataclass(frozen=True)
class Property:
    """Edge from an object type to one of its fields.

    ``required`` is declared by the parent's ``required`` list, so it lives
    here and not on the child TypeNode.
    """

    name: str
    node: "TypeNode"
    required: bool = False


@dataclass(frozen=True)
class TypeNode:
    """Represents one named type in the generated code."""

    canonical_name: str
    kind: TypeKind
    source_field_name: str = ""
    primitive: Optional[PrimitiveKind] = None

    # Objects: sorted by canonical child name
    properties: Tuple[Property, ...] = ()

    # Arrays
    element_type: Optional["TypeNode"] = None

    # Maps backed by an additionalProperties schema
    value_type: Optional["TypeNode"] = None

    # Validation and documentation metadata mirrored from the schema
    description: str = ""
    format: str = ""
    pattern: str = ""
    enum: Tuple[Any, ...] = ()
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None

    @property
    def is_object(self) -> bool:
        return self.kind == TypeKind.OBJECT

    @property
    def is_array(self) -> bool:
        return self.kind == TypeKind.ARRAY

    @property
    def is_map(self) -> bool:
        return self.kind == TypeKind.MAP

    @property
    def is_primitive(self) -> bool:
        return self.kind == TypeKind.PRIMITIVE

    @property
    def has_validation(self) -> bool:
        """Whether any constraint beyond the type itself is declared."""
        return bool(
            self.pattern
            or self.enum
            or self.minimum is not None
            or self.maximum is not None
            or self.min_length is not None
            or self.max_length is not None
        )

    def get_property(self, name: str) -> Optional[Property]:
        """Get a property by its schema key."""
        for prop in self.properties:
            if prop.name == name:
                return prop
        return None

    def required_names(self) -> List[str]:
        """Names of required properties, sorted."""
        return sorted(prop.name for prop in self.properties if prop.required)

    def children(self) -> Iterator["TypeNode"]:
        """Directly nested nodes in deterministic order."""
        for prop in self.properties:
            yield prop.node
        if self.element_type is not None:
            yield self.element_type
        if self.value_type is not None:
            yield self.value_type

    def same_shape(self, other: "TypeNode") -> bool:
        """Structural equality ignoring the field the node was reached through."""
        return _shape(self) == _shape(other)


def _shape(node: TypeNode) -> Tuple[Any, ...]:
    return (
        node.canonical_name,
        node.kind,
        node.primitive,
        tuple((p.name, p.required, _shape(p.node)) for p in node.properties),
        _shape(node.element_type) if node.element_type is not None else None,
        _shape(node.value_type) if node.value_type is not None else None,
        node.description,
        node.format,
        node.pattern,
        tuple(repr(value) for value in node.enum),
        node.minimum,
        node.maximum,
        node.min_length,
        node.max_length,
    )


def iter_object_types(root: TypeNode) -> Iterator[TypeNode]:
    """
    Yield every OBJECT node reachable from ``root``.

    Depth-first pre-order following sorted properties; each canonical
    name is yielded once.
    """
    seen = set()

    def visit(node: TypeNode) -> Iterator[TypeNode]:
        if node.is_object:
            if node.canonical_name in seen:
                return
            seen.add(node.canonical_name)
            yield node
        for child in node.children():
            yield from visit(child)

    yield from visit(root)


def count_types(root: TypeNode) -> Dict[TypeKind, int]:
    """Count distinct nodes by kind, keyed by canonical name."""
    by_name: Dict[str, TypeKind] = {}
    stack = [root]
    while stack:
        node = stack.pop()
        if node.canonical_name in by_name:
            continue
        by_name[node.canonical_name] = node.kind
        stack.extend(node.children())

    summary = {kind: 0 for kind in TypeKind}
    for kind in by_name.values():
        summary[kind] += 1
    return summary
