"""
CRD Toolgen Code Generation Module

Generates MCP toolset code from Kubernetes CustomResourceDefinitions.
"""

from typing import Any, Dict, Mapping, Optional

from .core.config import GenerationRequest, GeneratorConfig, ConfigManager, load_config
from .core.crd import CRDMetadata, parse_crd
from .core.generator import (
    CodeGenerator,
    GenerationResult,
    generate_batch,
    generate_code,
    generate_toolset,
)
from .core.model import TypeModel, build_type_model
from .registry import GeneratorRegistry, get_generator, list_supported_languages


def generate_from_crd(
    document: Mapping[str, Any],
    language: str = "go",
    config: Optional[Any] = None,
    crud: Optional[str] = None,
) -> Dict[str, str]:
    """
    Generate code from a CRD document. Any error is raised.

    Args:
        document: Parsed CustomResourceDefinition
        language: Target language name
        config: Generator configuration (GeneratorConfig, dict or path)
        crud: Operation tokens such as "cr"; None uses the configured selection

    Returns:
        Ordered mapping of artifact id to rendered source
    """
    generator = get_generator(language, config)
    if crud is None:
        request = GenerationRequest.from_config(generator.config)
    else:
        request = GenerationRequest.from_crud(
            crud, generator.config.package_name, generator.config.module_path
        )
    return generate_toolset(generator, parse_crd(document), request)


# Export main interfaces
__all__ = [
    "GeneratorRegistry",
    "CodeGenerator",
    "GenerationResult",
    "GenerationRequest",
    "GeneratorConfig",
    "ConfigManager",
    "CRDMetadata",
    "TypeModel",
    "build_type_model",
    "parse_crd",
    "load_config",
    "generate_code",
    "generate_toolset",
    "generate_batch",
    "generate_from_crd",
    "get_generator",
    "list_supported_languages",
]
