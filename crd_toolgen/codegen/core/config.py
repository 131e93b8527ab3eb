"""
Configuration management for code generation.

Handles loading and merging configuration from JSON or YAML files,
providing defaults and validation for generator settings.
"""

import json
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import yaml

from .errors import ToolgenError
from .operations import ALL_OPERATIONS, resolve_operations, validate_operation_names

DEFAULT_MODULE_PATH = "github.com/example/project"


class ConfigError(ToolgenError):
    """Exception raised for configuration-related errors."""

    pass


@dataclass
class GeneratorConfig:
    """Base configuration for code generators."""

    # Package settings
    package_name: str = ""  # empty: derived from the CRD plural
    module_path: str = DEFAULT_MODULE_PATH

    # Operation selection, compact token form ("cr", "crud"); None means all
    crud: Optional[str] = None

    # Templates
    template_dir: Optional[str] = None

    # Output content
    include_comments: bool = True
    generate_crd_resource: bool = False
    generate_doc_resource: bool = False
    doc_source: Optional[str] = None
    doc_content: str = ""

    # Go type for schema nodes without a known shape
    unknown_type: str = "interface{}"

    # Custom settings (language-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class GenerationRequest:
    """What to generate for one resource."""

    selected_operations: Tuple[str, ...] = ALL_OPERATIONS
    package_name: str = ""
    module_path: str = DEFAULT_MODULE_PATH

    @classmethod
    def from_crud(
        cls,
        crud: Optional[str],
        package_name: str = "",
        module_path: str = DEFAULT_MODULE_PATH,
    ) -> "GenerationRequest":
        """Build a request from a ``--crud`` token string (None selects all)."""
        return cls(
            selected_operations=resolve_operations(crud),
            package_name=package_name,
            module_path=module_path,
        )

    @classmethod
    def from_operations(
        cls,
        operations: Sequence[str],
        package_name: str = "",
        module_path: str = DEFAULT_MODULE_PATH,
    ) -> "GenerationRequest":
        """Build a request from explicit operation names (empty selects all)."""
        selected = validate_operation_names(operations) if operations else ALL_OPERATIONS
        return cls(
            selected_operations=selected,
            package_name=package_name,
            module_path=module_path,
        )

    @classmethod
    def from_config(cls, config: GeneratorConfig) -> "GenerationRequest":
        return cls.from_crud(config.crud, config.package_name, config.module_path)

    def with_package(self, package_name: str) -> "GenerationRequest":
        """Copy of this request with the package name filled in."""
        return GenerationRequest(self.selected_operations, package_name, self.module_path)


CONFIG_SUFFIXES = {".json", ".yaml", ".yml"}


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for supported languages."""
        self._configs["go"] = {
            "module_path": DEFAULT_MODULE_PATH,
            "include_comments": True,
            "unknown_type": "interface{}",
            "custom": {
                "jsonschema_import": "github.com/google/jsonschema-go/jsonschema",
                "client_import": "sigs.k8s.io/controller-runtime/pkg/client",
            },
        }

    def get_config(
        self,
        language: str = "go",
        custom_config: Optional[Dict[str, Any]] = None,
        config_file: Optional[Union[str, Path]] = None,
    ) -> GeneratorConfig:
        """
        Get complete configuration for a language.

        Args:
            language: Target language name
            custom_config: Custom configuration overrides
            config_file: Path to JSON or YAML configuration file

        Returns:
            Merged configuration for the language
        """
        base_config = json.loads(json.dumps(self._configs.get(language, {})))

        if config_file:
            base_config.update(self._load_config_file(config_file))

        if custom_config:
            base_config.update(
                {key: value for key, value in custom_config.items() if value is not None}
            )

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from a JSON or YAML file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if path.suffix.lower() not in CONFIG_SUFFIXES:
            raise ConfigError(f"Configuration file must be JSON or YAML: {path}")

        try:
            with open(path, "r", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    config = json.load(f)
                else:
                    config = yaml.safe_load(f) or {}
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {e}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a mapping: {path}")

        # Accept the CLI flag spelling (module-path) as well
        return {key.replace("-", "_"): value for key, value in config.items()}

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GeneratorConfig:
        """Convert dictionary to GeneratorConfig instance."""
        known_fields = set(GeneratorConfig.__dataclass_fields__)

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        if custom_args:
            existing_custom = dict(config_args.get("custom", {}))
            existing_custom.update(custom_args)
            config_args["custom"] = existing_custom

        return GeneratorConfig(**config_args)

    def save_config(self, config: GeneratorConfig, output_path: Union[str, Path]):
        """Save configuration to a JSON or YAML file."""
        path = Path(output_path)
        config_dict = asdict(config)
        config_dict.pop("doc_content", None)
        custom = config_dict.pop("custom", {})
        config_dict.update(custom)

        try:
            with open(path, "w", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    json.dump(config_dict, f, indent=2, ensure_ascii=False)
                else:
                    yaml.safe_dump(config_dict, f, sort_keys=True)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {e}") from e

    def list_languages(self) -> list[str]:
        """Get list of languages with default configurations."""
        return sorted(self._configs)

    def validate_config(self, config: GeneratorConfig) -> list[str]:
        """
        Validate a configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        if config.package_name and not config.package_name.isidentifier():
            warnings.append(f"Invalid Go package name: {config.package_name}")

        if not config.module_path:
            warnings.append("module_path is empty")

        if config.generate_doc_resource and not (config.doc_content or config.doc_source):
            warnings.append("generate_doc_resource is set but no documentation source given")

        if config.template_dir and not Path(config.template_dir).is_dir():
            warnings.append(f"Template directory does not exist: {config.template_dir}")

        return warnings


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(
    language: str = "go",
    custom_config: Optional[Dict[str, Any]] = None,
    config_file: Optional[Union[str, Path]] = None,
) -> GeneratorConfig:
    """
    Convenience function to load configuration.

    Args:
        language: Target language name
        custom_config: Custom configuration overrides
        config_file: Path to JSON or YAML configuration file

    Returns:
        Merged configuration for the language
    """
    return get_config_manager().get_config(language, custom_config, config_file)

