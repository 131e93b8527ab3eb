"""
Go code generator implementation.

Renders an MCP toolset for one custom resource: types, a controller-runtime
client wrapper, tool handlers, validation schemas and package docs.
"""

from pathlib import Path
from typing import Dict, List, Optional, Set

from ....logging_config import get_logger
from ...core.config import GenerationRequest, GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.model import TypeModel
from ...core.schema import PrimitiveKind
from .naming import validate_go_package_name
from .types import GoTypeConfig, GoTypeMapper
from .view import ToolsetView, build_view

logger = get_logger(__name__)

# Output order; "resources" only when CRD or documentation resources are enabled
ARTIFACTS = (
    "toolset",
    "types",
    "client-wrapper",
    "handlers",
    "schema-validators",
    "doc",
    "resources",
)

OPTIONAL_ARTIFACTS = frozenset({"resources"})


def raw_string_lines(lines: List[str]) -> Set[int]:
    """
    Indexes of lines that start or end inside a Go raw string literal.

    Double-quoted strings, rune literals and line comments are skipped so
    that a backtick inside them does not open a raw string.
    """
    inside = set()
    in_raw = False

    for index, line in enumerate(lines):
        starts_raw = in_raw
        i = 0
        while i < len(line):
            char = line[i]
            if in_raw:
                if char == "`":
                    in_raw = False
            elif char == "`":
                in_raw = True
            elif char in "\"'":
                i += 1
                while i < len(line) and line[i] != char:
                    if line[i] == "\\":
                        i += 1
                    i += 1
            elif line.startswith("//", i):
                break
            i += 1

        if starts_raw or in_raw:
            inside.add(index)

    return inside


class GoGenerator(CodeGenerator):
    """Code generator for Go MCP toolsets over custom resources."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize Go generator with configuration."""
        super().__init__(config)

        # Initialize type system
        self.type_config = self._build_type_config()
        self.type_mapper = GoTypeMapper(self.type_config)

    def get_template_directory(self) -> Optional[Path]:
        """Return the Go templates directory."""
        template_dir = Path(__file__).parent / "templates"
        return template_dir if template_dir.exists() else None

    def _build_type_config(self) -> GoTypeConfig:
        """Build GoTypeConfig from generator config."""
        custom = self.config.custom
        return GoTypeConfig(
            unknown_type=self.config.unknown_type,
            pointer_optional_structs=custom.get("pointer_optional_structs", True),
            omit_empty_optional=custom.get("json_tag_omitempty", True),
        )

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "go"

    @property
    def file_extension(self) -> str:
        """Return Go file extension."""
        return ".go"

    @property
    def artifact_ids(self):
        return ARTIFACTS

    def build_view(self, model: TypeModel, request: GenerationRequest) -> ToolsetView:
        """Build the read-only template view for one resource."""
        return build_view(model, request, self.config, self.type_mapper)

    def verbatim_lines(self, lines: List[str]) -> Set[int]:
        """Lines inside raw string literals."""
        return raw_string_lines(lines)

    def project(self, model: TypeModel, request: GenerationRequest) -> Dict[str, str]:
        """Render every artifact for one resource, in ARTIFACTS order."""
        view = self.build_view(model, request)

        files = {}
        for artifact in ARTIFACTS:
            if artifact in OPTIONAL_ARTIFACTS and not view.resources:
                continue
            code = self.render_template(f"{artifact}.go.j2", {"view": view})
            files[artifact] = self.format_code(code)

        logger.debug(
            "Rendered %s for %s in package %s",
            ", ".join(files),
            model.kind,
            view.package,
        )
        return files

    def validate_model(self, model: TypeModel) -> List[str]:
        """Validate a model for Go generation."""
        warnings = super().validate_model(model)

        for node in model.named_types():
            for prop in node.properties:
                if prop.node.primitive in (PrimitiveKind.FLOAT32, PrimitiveKind.FLOAT64):
                    warnings.append(
                        f"Float field {node.canonical_name}.{prop.name}: "
                        "Kubernetes API conventions discourage floats"
                    )

        if self.config.package_name:
            warnings.extend(validate_go_package_name(self.config.package_name))

        # Validate template availability
        for artifact in ARTIFACTS:
            template_name = f"{artifact}.go.j2"
            if not self.template_exists(template_name):
                warnings.append(f"Template {template_name} not found")

        return warnings


def create_go_generator(config: Optional[GeneratorConfig] = None) -> GoGenerator:
    """Create a Go generator with default configuration."""
    return GoGenerator(config or GeneratorConfig())
