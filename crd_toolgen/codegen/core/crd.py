"""
CustomResourceDefinition metadata extraction.

Reads the identity of a resource (group, names, scope, versions) out of a
CRD document and selects the storage version whose schema drives type
generation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple

from ...logging_config import get_logger
from .errors import SchemaError, ValidationError

logger = get_logger(__name__)

CRD_API_GROUP = "apiextensions.k8s.io"
CRD_KIND = "CustomResourceDefinition"


class Scope(Enum):
    """Resource scope as declared by ``spec.scope``."""

    NAMESPACED = "Namespaced"
    CLUSTER = "Cluster"


@dataclass(frozen=True)
class CRDVersion:
    """One entry of ``spec.versions``."""

    name: str
    served: bool = True
    storage: bool = False
    schema: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class CRDMetadata:
    """Identity of a custom resource plus its storage version schema."""

    group: str
    kind: str
    plural: str
    singular: str = ""
    short_names: Tuple[str, ...] = ()
    list_kind: str = ""
    scope: Scope = Scope.NAMESPACED
    versions: Tuple[str, ...] = ()
    storage_version: str = ""
    name: str = ""
    schema: Optional[Mapping[str, Any]] = field(default=None, compare=False)
    document: Optional[Mapping[str, Any]] = field(default=None, compare=False, repr=False)

    @property
    def is_cluster_scoped(self) -> bool:
        return self.scope == Scope.CLUSTER

    @property
    def api_version(self) -> str:
        """``group/version``, or just the version for the core group."""
        if not self.group:
            return self.storage_version
        return f"{self.group}/{self.storage_version}"

    @property
    def package_name(self) -> str:
        """Go package name derived from the plural name."""
        return self.plural.lower().replace("-", "_")

    @property
    def group_version_kind(self) -> str:
        return f"{self.group}/{self.storage_version}, Kind={self.kind}"

    @property
    def group_version_resource(self) -> str:
        return f"{self.group}/{self.storage_version}/{self.plural}"


def _string(value: Any) -> str:
    return value if isinstance(value, str) else ""


def is_crd_document(document: Any) -> bool:
    """Whether a loaded document looks like a CustomResourceDefinition."""
    if not isinstance(document, Mapping):
        return False
    api_version = _string(document.get("apiVersion"))
    return document.get("kind") == CRD_KIND and api_version.startswith(CRD_API_GROUP)


def _parse_versions(spec: Mapping[str, Any]) -> Tuple[CRDVersion, ...]:
    raw_versions = spec.get("versions") or ()
    if not isinstance(raw_versions, (list, tuple)):
        raise ValidationError("CRD spec.versions must be a list")

    versions = []
    for index, raw in enumerate(raw_versions):
        if not isinstance(raw, Mapping):
            raise ValidationError(f"CRD spec.versions[{index}] must be a mapping")
        name = _string(raw.get("name"))
        if not name:
            raise ValidationError(f"CRD spec.versions[{index}] has no name")
        schema_block = raw.get("schema") or {}
        schema = schema_block.get("openAPIV3Schema") if isinstance(schema_block, Mapping) else None
        versions.append(
            CRDVersion(
                name=name,
                served=bool(raw.get("served", True)),
                storage=bool(raw.get("storage", False)),
                schema=schema,
            )
        )
    return tuple(versions)


def select_storage_version(versions: Tuple[CRDVersion, ...]) -> CRDVersion:
    """Pick the version flagged ``storage: true``, else the first one."""
    if not versions:
        raise ValidationError("CRD must have at least one version")
    for version in versions:
        if version.storage:
            return version
    return versions[0]


def validate_crd(document: Mapping[str, Any]) -> None:
    """
    Validate the identity fields needed for code generation.

    An empty group is allowed (core-style group); an empty kind or plural
    name or a missing version list is not.

    Raises:
        ValidationError: If a required identity field is missing
    """
    if not isinstance(document, Mapping):
        raise ValidationError("CRD document must be a mapping")

    spec = document.get("spec")
    if not isinstance(spec, Mapping):
        raise ValidationError("CRD spec is required")

    names = spec.get("names")
    if not isinstance(names, Mapping):
        raise ValidationError("CRD spec.names is required")
    if not _string(names.get("kind")):
        raise ValidationError("CRD kind is required")
    if not _string(names.get("plural")):
        raise ValidationError("CRD plural name is required")

    if not spec.get("versions"):
        raise ValidationError("CRD must have at least one version")

    scope = spec.get("scope")
    if scope is not None and scope not in {s.value for s in Scope}:
        raise ValidationError(
            f"invalid CRD scope '{scope}', expected Namespaced or Cluster"
        )


def parse_crd(document: Mapping[str, Any]) -> CRDMetadata:
    """
    Extract CRDMetadata from a CRD document.

    Args:
        document: Parsed CustomResourceDefinition (YAML/JSON mapping)

    Returns:
        CRDMetadata with the storage version schema attached

    Raises:
        ValidationError: Invalid or missing identity fields
        SchemaError: The storage version has no openAPIV3Schema
    """
    validate_crd(document)

    spec = document["spec"]
    names = spec["names"]
    versions = _parse_versions(spec)
    storage = select_storage_version(versions)

    if storage.schema is None:
        raise SchemaError(
            f"storage version '{storage.name}' has no openAPIV3Schema",
            (_string(names.get("kind")), storage.name),
        )

    kind = names["kind"]
    metadata = document.get("metadata") or {}
    short_names = names.get("shortNames") or ()

    info = CRDMetadata(
        name=_string(metadata.get("name")) if isinstance(metadata, Mapping) else "",
        group=_string(spec.get("group")),
        kind=kind,
        plural=names["plural"],
        singular=_string(names.get("singular")) or kind.lower(),
        short_names=tuple(str(name) for name in short_names),
        list_kind=_string(names.get("listKind")) or f"{kind}List",
        scope=Scope(spec.get("scope") or Scope.NAMESPACED.value),
        versions=tuple(version.name for version in versions),
        storage_version=storage.name,
        schema=storage.schema,
        document=document,
    )
    logger.debug(
        "Parsed CRD %s (%s, %s)", info.kind, info.api_version, info.scope.value
    )
    return info


def summarize(info: CRDMetadata) -> Dict[str, Any]:
    """Plain dictionary view used for reports."""
    return {
        "kind": info.kind,
        "group": info.group,
        "version": info.storage_version,
        "plural": info.plural,
        "scope": info.scope.value,
        "versions": list(info.versions),
        "short_names": list(info.short_names),
    }
