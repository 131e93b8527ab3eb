"""
Base generator interface for all code generation targets.

Defines the contract that all language generators must implement, plus
the single-resource (fail-fast) and batch (continue-on-error) drivers.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from ...logging_config import get_logger
from .config import GenerationRequest, GeneratorConfig, get_config_manager
from .crd import CRDMetadata
from .errors import ToolgenError
from .model import TypeModel, build_type_model
from .schema import TypeKind, count_types
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class GeneratorError(ToolgenError):
    """Base exception for code generation errors."""

    pass


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(
            self.get_template_directory(), self.config.template_dir
        )

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go')."""
        pass

    @property
    @abstractmethod
    def artifact_ids(self) -> Tuple[str, ...]:
        """Every artifact this generator can produce, in output order."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this generator.

        Returns:
            Path to template directory or None
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def project(self, model: TypeModel, request: GenerationRequest) -> Dict[str, str]:
        """
        Render every artifact for one resource.

        Args:
            model: Analyzed resource
            request: Operations and package settings

        Returns:
            Ordered mapping of artifact id to formatted source
        """
        pass

    def config_warnings(self) -> List[str]:
        """Warnings about this generator's configuration."""
        return get_config_manager().validate_config(self.config)

    def validate_model(self, model: TypeModel) -> List[str]:
        """
        Check a type model for things worth warning about.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        if not model.has_spec:
            warnings.append(f"{model.kind} has no spec property")

        for node in model.named_types():
            for prop in node.properties:
                if prop.node.kind == TypeKind.UNKNOWN:
                    warnings.append(
                        f"Unknown type in {node.canonical_name}.{prop.name}"
                    )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Normalize generated code.

        Strips trailing whitespace, collapses runs of blank lines into one
        and ends the text with exactly one newline. Lines reported by
        ``verbatim_lines`` are kept unchanged.
        """
        lines = code.split("\n")
        verbatim = self.verbatim_lines(lines)
        formatted_lines = []
        blank = False

        for index, line in enumerate(lines):
            if index in verbatim:
                blank = False
                formatted_lines.append(line)
                continue

            stripped = line.rstrip()
            if not stripped:
                if not blank and formatted_lines:
                    formatted_lines.append("")
                blank = True
            else:
                blank = False
                formatted_lines.append(stripped)

        while formatted_lines and not formatted_lines[-1]:
            formatted_lines.pop()

        return "\n".join(formatted_lines) + "\n"

    def verbatim_lines(self, lines: List[str]) -> Set[int]:
        """Indexes of lines whose text is literal content, such as multi-line string literals."""
        return set()

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        return self.template_engine.template_exists(template_name)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: Dict[str, str],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
    ):
        """
        Initialize generation result.

        Args:
            files: Artifact id to rendered source, in output order
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message = ""
        self.exception = None

    @property
    def code(self) -> str:
        """All artifacts concatenated in output order."""
        return "\n".join(self.files.values())

    @classmethod
    def error(
        cls,
        message: str,
        exception: Exception = None,
        metadata: Dict[str, Any] = None,
    ) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(files={}, metadata=metadata)
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_toolset(
    generator: CodeGenerator,
    metadata: CRDMetadata,
    request: Optional[GenerationRequest] = None,
) -> Dict[str, str]:
    """
    Analyze and render one resource. Any error aborts.

    Args:
        generator: Code generator instance
        metadata: Parsed CRD with storage schema
        request: What to generate; all operations when omitted

    Returns:
        Ordered mapping of artifact id to rendered source

    Raises:
        ToolgenError: Any analysis or rendering failure
    """
    request = request or GenerationRequest.from_config(generator.config)
    model = build_type_model(metadata)
    return generator.project(model, request)


def generate_code(
    generator: CodeGenerator,
    metadata: CRDMetadata,
    request: Optional[GenerationRequest] = None,
) -> GenerationResult:
    """
    Generate code for one resource, reporting failure in the result.

    Args:
        generator: Code generator instance
        metadata: Parsed CRD with storage schema
        request: What to generate; all operations when omitted

    Returns:
        GenerationResult with files, warnings, and metadata
    """
    info = {
        "language": generator.language_name,
        "kind": metadata.kind,
        "group": metadata.group,
        "version": metadata.storage_version,
        "scope": metadata.scope.value,
    }
    try:
        request = request or GenerationRequest.from_config(generator.config)
        model = build_type_model(metadata)
        warnings = generator.validate_model(model)
        files = generator.project(model, request)
    except ToolgenError as e:
        logger.error("Generation failed for %s: %s", metadata.kind, e)
        return GenerationResult.error(str(e), exception=e, metadata=info)

    counts = count_types(model.kind_type)
    info.update(
        {
            "file_extension": generator.file_extension,
            "operations": list(request.selected_operations),
            "artifacts": list(files),
            "type_count": len(model.named_types()) + 1,
            "has_unknowns": counts[TypeKind.UNKNOWN] > 0,
        }
    )
    logger.info(
        "Generated %d artifacts for %s (%s)",
        len(files),
        metadata.kind,
        metadata.api_version,
    )
    return GenerationResult(files, warnings, info)


def generate_batch(
    generator: CodeGenerator,
    resources: Iterable[CRDMetadata],
    request: Optional[GenerationRequest] = None,
) -> List[GenerationResult]:
    """
    Generate code for several resources in input order.

    A failing resource is reported in its result and the batch goes on.
    """
    results = []
    for metadata in resources:
        results.append(generate_code(generator, metadata, request))

    failed = sum(1 for result in results if not result.success)
    if failed:
        logger.warning("%d of %d resources failed", failed, len(results))
    return results
