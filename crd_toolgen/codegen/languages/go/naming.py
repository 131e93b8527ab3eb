"""
Go-specific naming utilities.

Handles Go reserved words, builtins, and the naming conventions of
generated clients, handlers and tools.
"""

from ...core.naming import pluralize, to_camel, to_pascal, to_snake

# Go reserved words
GO_RESERVED_WORDS = {
    "break",
    "case",
    "chan",
    "const",
    "continue",
    "default",
    "defer",
    "else",
    "fallthrough",
    "for",
    "func",
    "go",
    "goto",
    "if",
    "import",
    "interface",
    "map",
    "package",
    "range",
    "return",
    "select",
    "struct",
    "switch",
    "type",
    "var",
}

OPERATION_VERBS = {
    "create": "Create",
    "get": "Get",
    "list": "List",
    "update": "Update",
    "delete": "Delete",
}


def field_name(json_name: str) -> str:
    """Exported Go struct field name for a JSON property."""
    name = to_pascal(json_name)
    if name[:1].isdigit():
        name = "X" + name
    return name


def method_name(operation: str, resource: str) -> str:
    """
    Go method name for an operation.

    List operations pluralize the resource, not the verb:
    ``method_name("list", "Widget") == "ListWidgets"``.
    """
    verb = OPERATION_VERBS.get(operation)
    if verb is None:
        return to_pascal(operation + "_" + resource)
    if operation == "list":
        return verb + to_pascal(pluralize(resource))
    return verb + to_pascal(resource)


def tool_name(operation: str, resource: str) -> str:
    """Tool name for an operation, e.g. ``widget_create`` or ``widgets_list``."""
    if operation == "list":
        return f"{to_snake(pluralize(resource))}_list"
    return f"{to_snake(resource)}_{to_snake(operation)}"


def handler_name(operation: str, resource: str) -> str:
    return "Handle" + method_name(operation, resource)


def schema_var_name(operation: str, resource: str) -> str:
    """Package-level variable holding the input schema of a tool."""
    return to_camel(method_name(operation, resource)) + "InputSchema"


def validate_go_package_name(name: str) -> list[str]:
    """
    Validate Go package name according to Go naming rules.

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not name:
        errors.append("Package name cannot be empty")
        return errors

    # Check basic identifier rules
    if not name.isidentifier() or not name.isascii():
        errors.append(f"'{name}' is not a valid Go identifier")

    # Go-specific rules
    if name[0].isupper():
        errors.append("Package names should be lowercase")

    if "-" in name:
        errors.append("Package names should not contain hyphens")

    # Check against reserved words
    if name.lower() in GO_RESERVED_WORDS:
        errors.append(f"'{name}' is a Go reserved word")

    return errors
