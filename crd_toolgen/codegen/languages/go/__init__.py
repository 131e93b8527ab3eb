"""
Go code generator module.

Generates MCP toolsets (types, client wrapper, handlers, validation
schemas, docs) for Kubernetes custom resources.
"""

from .generator import ARTIFACTS, GoGenerator, create_go_generator
from .naming import method_name, tool_name, validate_go_package_name
from .schema_code import render_schema
from .types import GoType, GoTypeConfig, GoTypeMapper
from .view import ToolsetView, build_view

__all__ = [
    "ARTIFACTS",
    "GoGenerator",
    "create_go_generator",
    "GoType",
    "GoTypeConfig",
    "GoTypeMapper",
    "ToolsetView",
    "build_view",
    "render_schema",
    "method_name",
    "tool_name",
    "validate_go_package_name",
]
