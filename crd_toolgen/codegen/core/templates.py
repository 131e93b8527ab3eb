"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with common utilities for code generation.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from jinja2 import (
    ChoiceLoader,
    DictLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
    TemplateNotFound,
    select_autoescape,
)
from jinja2 import TemplateError as JinjaTemplateError

from ...logging_config import get_logger
from .errors import ToolgenError
from .naming import escape_go_string

logger = get_logger(__name__)


class TemplateError(ToolgenError):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dirs: Optional[Sequence[Union[str, Path]]] = None):
        """
        Initialize template engine.

        Args:
            template_dirs: Directories searched in order; earlier ones
                override templates of the same name in later ones
        """
        self.template_dirs: List[Path] = [
            Path(directory) for directory in (template_dirs or ()) if directory
        ]
        self._memory = DictLoader({})
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        loaders = [self._memory]
        for directory in self.template_dirs:
            if directory.is_dir():
                loaders.append(FileSystemLoader(str(directory)))
            else:
                logger.warning("Template directory not found: %s", directory)

        self._env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(["html", "xml"], default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )

        self._env.filters["quote"] = self._quote_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except TemplateNotFound as e:
            raise TemplateError(f"Template not found: {template_name}") from e
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e

    def render_string(self, template_string: str, context: Dict[str, Any]) -> str:
        """
        Render a template string with the given context.

        Args:
            template_string: Template content as string
            context: Variables to pass to template

        Returns:
            Rendered content
        """
        try:
            template = self._env.from_string(template_string)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template string: {e}") from e

    def add_template(self, name: str, content: str):
        """
        Add an in-memory template. In-memory templates take precedence
        over files with the same name.

        Args:
            name: Template name
            content: Template content
        """
        self._memory.mapping[name] = content

    def template_exists(self, template_name: str) -> bool:
        """Check if a template exists."""
        try:
            self._env.get_template(template_name)
        except TemplateNotFound:
            return False
        return True

    def list_templates(self) -> List[str]:
        """Names of every template the engine can load."""
        return sorted(set(self._env.list_templates()))

    # Template filters for code generation

    @staticmethod
    def _quote_filter(value: Any) -> str:
        """Render a value as a double-quoted Go string literal."""
        return f'"{escape_go_string(str(value))}"'


def create_template_engine(
    template_dir: Optional[Union[str, Path]] = None,
    override_dir: Optional[Union[str, Path]] = None,
) -> TemplateEngine:
    """
    Create a template engine.

    Args:
        template_dir: Built-in template directory of a generator
        override_dir: User template directory searched first

    Returns:
        Configured TemplateEngine
    """
    return TemplateEngine([override_dir, template_dir])
