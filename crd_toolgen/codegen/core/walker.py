"""
Structural schema analysis.

Converts OpenAPI v3 schema nodes (plain mappings as loaded from YAML/JSON)
into TypeNode trees with deterministic canonical names.
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence, Set, Tuple

from ...logging_config import get_logger
from .errors import CacheInconsistencyError, NamingCollisionError, SchemaError
from .naming import to_pascal
from .schema import PrimitiveKind, Property, TypeKind, TypeNode

logger = get_logger(__name__)

MAX_DEPTH = 64

Path = Tuple[str, ...]


def property_type_name(parent_name: str, property_name: str) -> str:
    """Canonical name for a nested property type."""
    return f"{parent_name}{to_pascal(property_name)}"


def item_type_name(array_name: str) -> str:
    """Canonical name for an array element type."""
    if array_name.endswith("s"):
        return array_name[:-1] + "Item"
    return array_name + "Item"


def map_value_type_name(map_name: str) -> str:
    """Canonical name for the value type of a map."""
    return map_name + "Value"


def _primitive_kind(schema_type: str, schema_format: str) -> Optional[PrimitiveKind]:
    if schema_type == "string":
        return PrimitiveKind.STRING
    if schema_type == "integer":
        return PrimitiveKind.INT64 if schema_format == "int64" else PrimitiveKind.INT32
    if schema_type == "number":
        return PrimitiveKind.FLOAT64 if schema_format == "double" else PrimitiveKind.FLOAT32
    if schema_type == "boolean":
        return PrimitiveKind.BOOL
    return None


class SchemaWalker:
    """
    Builds TypeNode trees from schema nodes.

    One walker owns the memo and name registry for one generation run;
    create a new walker per resource.
    """

    def __init__(self, max_depth: int = MAX_DEPTH):
        self.max_depth = max_depth
        # (ancestor path, field name) -> (schema object, node)
        self._memo: Dict[Tuple[Path, str], Tuple[Mapping[str, Any], TypeNode]] = {}
        # canonical name -> (first path, node)
        self._names: Dict[str, Tuple[Path, TypeNode]] = {}
        # ids of schema mappings on the current recursion stack
        self._active: Set[int] = set()

    def analyze(
        self,
        schema: Optional[Mapping[str, Any]],
        type_name: str,
        field_name: str = "",
        parent_path: Sequence[str] = (),
    ) -> TypeNode:
        """
        Analyze a schema node and return its TypeNode.

        Args:
            schema: Schema mapping (``type``, ``properties``, ``items``...)
            type_name: Canonical name for the resulting type
            field_name: Schema key the node was reached through
            parent_path: Canonical names of the ancestors, outermost first

        Returns:
            TypeNode for the schema

        Raises:
            SchemaError: Missing, non-mapping, cyclic or too deeply nested schema
            NamingCollisionError: Name already taken by a different shape
            CacheInconsistencyError: Memo returned a node for another path
        """
        path = tuple(parent_path) + (type_name,)
        return self._analyze(schema, type_name, field_name, path)

    def registered_names(self) -> List[str]:
        """All canonical names produced so far, sorted."""
        return sorted(self._names)

    def _analyze(
        self,
        schema: Optional[Mapping[str, Any]],
        type_name: str,
        field_name: str,
        path: Path,
    ) -> TypeNode:
        if schema is None:
            raise SchemaError(f"schema for type '{type_name}' is missing", path)
        if not isinstance(schema, Mapping):
            raise SchemaError(
                f"schema for type '{type_name}' must be a mapping, "
                f"got {type(schema).__name__}",
                path,
            )
        if len(path) > self.max_depth:
            raise SchemaError(f"schema nesting exceeds {self.max_depth} levels", path)

        memo_key = (path, field_name)
        cached = self._memo.get(memo_key)
        if cached is not None and cached[0] is schema:
            node = cached[1]
            if node.canonical_name != type_name:
                raise CacheInconsistencyError(
                    f"memo entry for {'.'.join(path)} holds type "
                    f"'{node.canonical_name}', expected '{type_name}'"
                )
            return node

        marker = id(schema)
        if marker in self._active:
            raise SchemaError(f"cyclic schema reference for type '{type_name}'", path)

        logger.debug("Analyzing %s", ".".join(path))
        self._active.add(marker)
        try:
            node = self._build(schema, type_name, field_name, path)
        finally:
            self._active.discard(marker)

        node = self._register(node, path)
        self._memo[memo_key] = (schema, node)
        return node

    def _register(self, node: TypeNode, path: Path) -> TypeNode:
        existing = self._names.get(node.canonical_name)
        if existing is None:
            self._names[node.canonical_name] = (path, node)
            return node

        first_path, first_node = existing
        if first_node.same_shape(node):
            logger.debug(
                "Reusing %s for %s", node.canonical_name, ".".join(path)
            )
            return first_node
        raise NamingCollisionError(node.canonical_name, first_path, path)

    def _build(
        self,
        schema: Mapping[str, Any],
        type_name: str,
        field_name: str,
        path: Path,
    ) -> TypeNode:
        schema_type = schema.get("type") or ""
        schema_format = schema.get("format") or ""
        metadata = self._metadata(schema)

        if not schema_type:
            # No type declared, infer it from structure
            if schema.get("properties"):
                schema_type = "object"
            elif schema.get("items") is not None:
                schema_type = "array"

        primitive = _primitive_kind(schema_type, schema_format)
        if primitive is not None:
            return TypeNode(
                canonical_name=type_name,
                kind=TypeKind.PRIMITIVE,
                source_field_name=field_name,
                primitive=primitive,
                **metadata,
            )

        if schema_type == "object":
            properties = schema.get("properties") or {}
            if properties:
                return TypeNode(
                    canonical_name=type_name,
                    kind=TypeKind.OBJECT,
                    source_field_name=field_name,
                    properties=self._build_properties(schema, properties, type_name, path),
                    **metadata,
                )
            return TypeNode(
                canonical_name=type_name,
                kind=TypeKind.MAP,
                source_field_name=field_name,
                value_type=self._build_map_value(schema, type_name, path),
                **metadata,
            )

        if schema_type == "array":
            return TypeNode(
                canonical_name=type_name,
                kind=TypeKind.ARRAY,
                source_field_name=field_name,
                element_type=self._build_element(schema, type_name, path),
                **metadata,
            )

        return TypeNode(
            canonical_name=type_name,
            kind=TypeKind.UNKNOWN,
            source_field_name=field_name,
            **metadata,
        )

    def _build_properties(
        self,
        schema: Mapping[str, Any],
        properties: Mapping[str, Any],
        type_name: str,
        path: Path,
    ) -> Tuple[Property, ...]:
        required = set(schema.get("required") or ())
        unknown_required = required - set(properties)
        if unknown_required:
            logger.warning(
                "%s lists undeclared required fields: %s",
                ".".join(path),
                ", ".join(sorted(str(name) for name in unknown_required)),
            )

        entries = []
        for prop_name in properties:
            # YAML 1.1 reads unquoted on/off/yes/no keys as booleans
            if not isinstance(prop_name, str):
                raise SchemaError(
                    f"property name {prop_name!r} must be a string, "
                    f"got {type(prop_name).__name__}",
                    path,
                )
            if not prop_name:
                raise SchemaError("property name must not be empty", path)
            child_name = property_type_name(type_name, prop_name)
            if child_name == type_name:
                raise SchemaError(
                    f"property '{prop_name}' does not produce a type name", path
                )
            entries.append((child_name, prop_name))

        # Schema mappings are unordered; sort before recursing
        entries.sort()
        for (first_child, first_prop), (second_child, second_prop) in zip(entries, entries[1:]):
            if first_child == second_child:
                raise NamingCollisionError(
                    first_child, path + (first_prop,), path + (second_prop,)
                )

        result = []
        for child_name, prop_name in entries:
            child = self._analyze(
                properties[prop_name], child_name, prop_name, path + (child_name,)
            )
            result.append(Property(prop_name, child, prop_name in required))
        return tuple(result)

    def _build_element(
        self, schema: Mapping[str, Any], type_name: str, path: Path
    ) -> TypeNode:
        element_name = item_type_name(type_name)
        items = schema.get("items")
        if isinstance(items, Mapping):
            return self._analyze(items, element_name, "", path + (element_name,))

        if items is not None:
            logger.debug("%s: tuple-style items treated as opaque", ".".join(path))
        opaque = TypeNode(canonical_name=element_name, kind=TypeKind.UNKNOWN)
        return self._register(opaque, path + (element_name,))

    def _build_map_value(
        self, schema: Mapping[str, Any], type_name: str, path: Path
    ) -> Optional[TypeNode]:
        additional = schema.get("additionalProperties")
        if not isinstance(additional, Mapping) or not additional:
            return None
        value_name = map_value_type_name(type_name)
        return self._analyze(additional, value_name, "", path + (value_name,))

    @staticmethod
    def _metadata(schema: Mapping[str, Any]) -> Dict[str, Any]:
        return {
            "description": schema.get("description") or "",
            "format": schema.get("format") or "",
            "pattern": schema.get("pattern") or "",
            "enum": tuple(schema.get("enum") or ()),
            "minimum": schema.get("minimum"),
            "maximum": schema.get("maximum"),
            "min_length": schema.get("minLength"),
            "max_length": schema.get("maxLength"),
        }
