"""
Error taxonomy for CRD analysis and code generation.

Every error raised by the core derives from ToolgenError so callers
driving several resources can catch one type per resource.
"""

from typing import Sequence


class ToolgenError(Exception):
    """Base exception for all crd_toolgen errors."""

    pass


class SchemaError(ToolgenError):
    """Malformed or missing schema where one is mandatory."""

    def __init__(self, message: str, path: Sequence[str] = ()):
        self.path = tuple(path)
        if self.path:
            message = f"{message} (at {'.'.join(self.path)})"
        super().__init__(message)


class ValidationError(ToolgenError):
    """Invalid operation selection or resource identity."""

    pass


class NamingCollisionError(ToolgenError):
    """Two distinct schema paths produced the same canonical type name."""

    def __init__(self, name: str, first_path: Sequence[str], second_path: Sequence[str]):
        self.name = name
        self.first_path = tuple(first_path)
        self.second_path = tuple(second_path)
        super().__init__(
            f"type name '{name}' generated by both "
            f"{'.'.join(self.first_path)} and {'.'.join(self.second_path)}"
        )


class CacheInconsistencyError(ToolgenError):
    """The walker memo returned a node that does not belong to the requested path."""

    pass
