"""Generate MCP toolset code from Kubernetes CustomResourceDefinitions."""

from .codegen import generate_from_crd, get_generator, list_supported_languages
from .codegen.core.config import GenerationRequest, GeneratorConfig
from .codegen.core.crd import CRDMetadata, parse_crd
from .codegen.core.errors import ToolgenError

__version__ = "0.1.0"

__all__ = [
    "CRDMetadata",
    "GenerationRequest",
    "GeneratorConfig",
    "ToolgenError",
    "generate_from_crd",
    "get_generator",
    "list_supported_languages",
    "parse_crd",
]
