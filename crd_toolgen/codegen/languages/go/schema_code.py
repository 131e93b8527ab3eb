"""
Go ``jsonschema.Schema`` literals rendered from TypeNodes.

Properties and required lists come out sorted so that the rendered
literal depends only on the analyzed types.
"""

import json
from typing import Any, List, Mapping, Optional

from ...core.naming import escape_go_string, quote_go_string
from ...core.schema import TypeNode
from .types import schema_type_name

SCHEMA_TYPE = "jsonschema.Schema"


def quote(value: str) -> str:
    """Double-quoted Go string literal, exact."""
    return quote_go_string(value)


def quote_text(value: str) -> str:
    """Double-quoted Go string literal of prose flattened to one line."""
    return f'"{escape_go_string(value)}"'


def go_literal(value: Any) -> str:
    """Go literal for a raw enum value."""
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return quote(value)
    return quote(json.dumps(value, sort_keys=True))


def render_schema(
    node: TypeNode,
    depth: int = 0,
    references: Optional[Mapping[str, str]] = None,
    include_descriptions: bool = True,
) -> str:
    """
    Render a TypeNode as a ``&jsonschema.Schema{...}`` literal.

    Args:
        node: Type to render
        depth: Indentation level (tabs) of the line the literal starts on
        references: Canonical name to Go variable; nested nodes listed here
            are emitted as the variable instead of inline
        include_descriptions: Emit ``Description`` fields

    Returns:
        Go expression, first line unindented
    """
    references = references or {}
    pad = "\t" * depth
    lines: List[str] = [f"&{SCHEMA_TYPE}{{"]

    def add(key: str, value: str):
        lines.append(f"{pad}\t{key}: {value},")

    def nested(child: TypeNode, child_depth: int) -> str:
        if child.canonical_name in references:
            return references[child.canonical_name]
        return render_schema(child, child_depth, references, include_descriptions)

    type_name = schema_type_name(node)
    if type_name:
        add("Type", quote(type_name))
    if include_descriptions and node.description:
        add("Description", quote_text(node.description))
    if node.format:
        add("Format", quote(node.format))
    if node.enum:
        add("Enum", "[]any{" + ", ".join(go_literal(v) for v in node.enum) + "}")
    if node.minimum is not None:
        add("Minimum", f"jsonschema.Ptr(float64({node.minimum!r}))")
    if node.maximum is not None:
        add("Maximum", f"jsonschema.Ptr(float64({node.maximum!r}))")
    if node.min_length is not None:
        add("MinLength", f"jsonschema.Ptr({int(node.min_length)})")
    if node.max_length is not None:
        add("MaxLength", f"jsonschema.Ptr({int(node.max_length)})")
    if node.pattern:
        add("Pattern", quote(node.pattern))

    if node.properties:
        lines.append(f"{pad}\tProperties: map[string]*{SCHEMA_TYPE}{{")
        for prop in sorted(node.properties, key=lambda p: p.name):
            lines.append(f"{pad}\t\t{quote(prop.name)}: {nested(prop.node, depth + 2)},")
        lines.append(f"{pad}\t}},")

    required = node.required_names()
    if required:
        add("Required", "[]string{" + ", ".join(quote(name) for name in required) + "}")

    if node.element_type is not None:
        add("Items", nested(node.element_type, depth + 1))

    if node.value_type is not None:
        add("AdditionalProperties", nested(node.value_type, depth + 1))

    lines.append(f"{pad}}}")
    return "\n".join(lines)
