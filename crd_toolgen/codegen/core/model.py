"""
Type model for one custom resource.

Bundles the CRD identity with the analyzed Kind, Spec and Status types.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from ...logging_config import get_logger
from .crd import CRDMetadata
from .errors import NamingCollisionError, SchemaError
from .schema import Property, TypeNode, iter_object_types
from .walker import SchemaWalker

logger = get_logger(__name__)

# Root fields covered by TypeMeta/ObjectMeta in generated types
OBJECT_META_FIELDS = frozenset({"apiVersion", "kind", "metadata"})


@dataclass(frozen=True)
class TypeModel:
    """Immutable analysis result for one CRD storage version."""

    metadata: CRDMetadata
    kind_type: TypeNode
    spec_type: Optional[TypeNode] = None
    status_type: Optional[TypeNode] = None

    @property
    def kind(self) -> str:
        return self.metadata.kind

    @property
    def list_kind(self) -> str:
        return self.metadata.list_kind

    @property
    def has_spec(self) -> bool:
        return self.spec_type is not None

    @property
    def has_status(self) -> bool:
        return self.status_type is not None

    def kind_fields(self) -> Tuple[Property, ...]:
        """Root properties other than apiVersion, kind and metadata."""
        return tuple(
            prop
            for prop in self.kind_type.properties
            if prop.name not in OBJECT_META_FIELDS
        )

    def named_types(self) -> List[TypeNode]:
        """Object types below the root that need their own declaration."""
        types = []
        seen = {self.kind_type.canonical_name}
        for prop in self.kind_fields():
            for node in iter_object_types(prop.node):
                if node.canonical_name not in seen:
                    seen.add(node.canonical_name)
                    types.append(node)
        return types


def build_type_model(metadata: CRDMetadata, walker: Optional[SchemaWalker] = None) -> TypeModel:
    """
    Analyze the storage version schema of a CRD.

    Args:
        metadata: Parsed CRD identity with schema attached
        walker: Walker to use; a fresh one is created when omitted

    Returns:
        TypeModel for the resource

    Raises:
        SchemaError: Schema missing or malformed
        NamingCollisionError: Conflicting generated type names
    """
    if metadata.schema is None:
        raise SchemaError(
            "CRD schema is required for type generation",
            (metadata.kind, metadata.storage_version),
        )

    walker = walker or SchemaWalker()
    kind_type = walker.analyze(metadata.schema, metadata.kind)

    spec = kind_type.get_property("spec")
    status = kind_type.get_property("status")

    model = TypeModel(
        metadata=metadata,
        kind_type=kind_type,
        spec_type=spec.node if spec else None,
        status_type=status.node if status else None,
    )
    for node in model.named_types():
        if node.canonical_name == metadata.list_kind:
            raise NamingCollisionError(
                metadata.list_kind, (metadata.list_kind,), (metadata.kind, node.canonical_name)
            )
    logger.debug(
        "Built type model for %s: %d named types",
        metadata.kind,
        len(model.named_types()),
    )
    return model
