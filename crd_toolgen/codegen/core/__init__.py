"""
Core code generation components.

Provides the schema analysis engine and the base classes and utilities
used by all language generators.
"""

from .config import (
    ConfigError,
    ConfigManager,
    GenerationRequest,
    GeneratorConfig,
    load_config,
)
from .crd import CRDMetadata, Scope, parse_crd, validate_crd
from .errors import (
    CacheInconsistencyError,
    NamingCollisionError,
    SchemaError,
    ToolgenError,
    ValidationError,
)
from .generator import (
    CodeGenerator,
    GenerationResult,
    GeneratorError,
    generate_batch,
    generate_code,
    generate_toolset,
)
from .model import TypeModel, build_type_model
from .naming import NamingCase, pluralize, singularize, to_case
from .operations import ALL_OPERATIONS, expand_operations, resolve_operations
from .schema import PrimitiveKind, Property, TypeKind, TypeNode
from .templates import TemplateEngine, TemplateError, create_template_engine
from .walker import SchemaWalker

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "generate_code",
    "generate_toolset",
    "generate_batch",
    # Type system - core data structures
    "TypeNode",
    "TypeKind",
    "PrimitiveKind",
    "Property",
    "SchemaWalker",
    "TypeModel",
    "build_type_model",
    # Resource identity
    "CRDMetadata",
    "Scope",
    "parse_crd",
    "validate_crd",
    # Operation selection
    "ALL_OPERATIONS",
    "expand_operations",
    "resolve_operations",
    # Naming utilities - language-agnostic
    "NamingCase",
    "to_case",
    "pluralize",
    "singularize",
    # Errors
    "ToolgenError",
    "SchemaError",
    "ValidationError",
    "NamingCollisionError",
    "CacheInconsistencyError",
    # Configuration system
    "GeneratorConfig",
    "GenerationRequest",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system - language-agnostic
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
