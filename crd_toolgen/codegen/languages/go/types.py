"""
Go-specific type system for code generation.

Maps analyzed TypeNodes to Go type expressions and JSON tags.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from ...core.schema import PrimitiveKind, Property, TypeKind, TypeNode

# Fixed primitive lookup; the walker already chose the width
PRIMITIVE_GO_TYPES: Dict[PrimitiveKind, str] = {
    PrimitiveKind.STRING: "string",
    PrimitiveKind.INT32: "int32",
    PrimitiveKind.INT64: "int64",
    PrimitiveKind.FLOAT32: "float32",
    PrimitiveKind.FLOAT64: "float64",
    PrimitiveKind.BOOL: "bool",
}

# JSON schema type names used in validation literals
PRIMITIVE_SCHEMA_TYPES: Dict[PrimitiveKind, str] = {
    PrimitiveKind.STRING: "string",
    PrimitiveKind.INT32: "integer",
    PrimitiveKind.INT64: "integer",
    PrimitiveKind.FLOAT32: "number",
    PrimitiveKind.FLOAT64: "number",
    PrimitiveKind.BOOL: "boolean",
}


@dataclass(frozen=True)
class GoType:
    """Immutable representation of a Go type expression."""

    name: str
    is_pointer: bool = False

    @property
    def base_name(self) -> str:
        return self.name.lstrip("*")

    def as_pointer(self) -> "GoType":
        """Return a pointer version of this type."""
        if self.is_pointer:
            return self
        return GoType(f"*{self.name}", True)


@dataclass
class GoTypeConfig:
    """Configuration for Go type mapping behavior."""

    # Type used for nodes without a known shape ("any" for Go 1.18+)
    unknown_type: str = "interface{}"

    # Optional nested structs become pointers
    pointer_optional_structs: bool = True

    # Add omitempty to optional fields
    omit_empty_optional: bool = True


class GoTypeMapper:
    """Central engine for mapping TypeNodes to Go types."""

    def __init__(self, config: Optional[GoTypeConfig] = None):
        """Initialize with type configuration."""
        self.config = config or GoTypeConfig()

    def map_node(self, node: TypeNode) -> GoType:
        """
        Map a TypeNode to a Go type.

        Args:
            node: Analyzed type

        Returns:
            GoType for a value of this node
        """
        if node.kind == TypeKind.PRIMITIVE:
            return GoType(PRIMITIVE_GO_TYPES[node.primitive])

        if node.kind == TypeKind.OBJECT:
            return GoType(node.canonical_name)

        if node.kind == TypeKind.ARRAY:
            element = self.map_node(node.element_type)
            return GoType(f"[]{element.name}")

        if node.kind == TypeKind.MAP:
            if node.value_type is None:
                return GoType(f"map[string]{self.config.unknown_type}")
            value = self.map_node(node.value_type)
            return GoType(f"map[string]{value.name}")

        return GoType(self.config.unknown_type)

    def map_property(self, prop: Property, allow_pointer: bool = True) -> GoType:
        """Go type of a struct field, honoring the pointer strategy."""
        go_type = self.map_node(prop.node)
        if (
            allow_pointer
            and self.config.pointer_optional_structs
            and prop.node.is_object
            and not prop.required
        ):
            return go_type.as_pointer()
        return go_type

    def json_tag(self, prop: Property) -> str:
        """Struct tag for a field, e.g. ``json:"replicas,omitempty"``."""
        options = [prop.name]
        if not prop.required and self.config.omit_empty_optional:
            options.append("omitempty")
        return f'`json:"{",".join(options)}"`'


def schema_type_name(node: TypeNode) -> str:
    """JSON schema ``type`` for a node; empty for opaque nodes."""
    if node.kind == TypeKind.PRIMITIVE:
        return PRIMITIVE_SCHEMA_TYPES[node.primitive]
    if node.kind in (TypeKind.OBJECT, TypeKind.MAP):
        return "object"
    if node.kind == TypeKind.ARRAY:
        return "array"
    return ""
