"""
Read-only template view of a TypeModel.

Everything the Go templates need is resolved here once: Go type strings,
sorted struct fields, per-operation names and input schemas. Templates
only iterate and print.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

import yaml

from ....logging_config import get_logger
from ...core.config import GenerationRequest, GeneratorConfig
from ...core.errors import NamingCollisionError, ValidationError
from ...core.model import TypeModel
from ...core.naming import pluralize, to_camel, wrap_comment
from ...core.schema import PrimitiveKind, Property, TypeKind, TypeNode
from .naming import (
    field_name,
    handler_name,
    method_name,
    schema_var_name,
    tool_name,
    validate_go_package_name,
)
from .schema_code import render_schema
from .types import GoTypeMapper

logger = get_logger(__name__)

COMMENT_WIDTH = 76

OPERATION_DESCRIPTIONS = {
    "create": "Create a new {kind}",
    "get": "Get a {kind} by name",
    "list": "List {plural}",
    "update": "Update the spec of an existing {kind}",
    "delete": "Delete a {kind} by name",
}


@dataclass(frozen=True)
class FieldView:
    name: str
    json_name: str
    go_type: str
    tag: str
    required: bool
    comment: str = ""


@dataclass(frozen=True)
class StructView:
    name: str
    fields: Tuple[FieldView, ...]
    comment: str = ""


@dataclass(frozen=True)
class OperationView:
    """Names and input schema of one generated operation."""

    name: str
    method_name: str
    tool_name: str
    handler_name: str
    schema_var: str
    description: str
    input_schema: str
    takes_name: bool
    takes_spec: bool


@dataclass(frozen=True)
class SchemaVarView:
    name: str
    literal: str
    comment: str = ""


@dataclass(frozen=True)
class ResourceView:
    var_name: str
    uri: str
    name: str
    description: str
    mime_type: str
    content: str


@dataclass(frozen=True)
class ToolsetView:
    """Everything the templates print for one resource."""

    package: str
    module_path: str
    include_comments: bool

    kind: str
    kind_var: str
    plural: str
    singular: str
    list_kind: str
    group: str
    version: str
    api_version: str
    scope: str
    namespaced: bool
    short_names: Tuple[str, ...]

    toolset_type: str
    client_type: str
    handlers_type: str
    tool_type: str
    resource_type: str
    toolset_name: str
    toolset_description: str

    kind_comment: str
    kind_fields: Tuple[FieldView, ...]
    structs: Tuple[StructView, ...]
    spec_type: str
    spec_schema_var: str
    operations: Tuple[OperationView, ...]
    schemas: Tuple[SchemaVarView, ...]
    resources: Tuple[ResourceView, ...]

    @property
    def has_spec(self) -> bool:
        return bool(self.spec_type)

    @property
    def needs_decode(self) -> bool:
        """Whether any handler decodes a spec parameter."""
        return any(op.takes_spec for op in self.operations)

    @property
    def operation_names(self) -> Tuple[str, ...]:
        return tuple(op.name for op in self.operations)

    def has_operation(self, name: str) -> bool:
        return name in self.operation_names

    def method_for(self, name: str) -> str:
        """Client method generated for an operation."""
        for op in self.operations:
            if op.name == name:
                return op.method_name
        raise KeyError(name)


def go_raw_string(text: str) -> str:
    """Go raw string literal; backticks are spliced in as quoted strings."""
    return "`" + text.replace("`", '` + "`" + `') + "`"


def resolve_package_name(
    model: TypeModel, request: GenerationRequest, config: GeneratorConfig
) -> str:
    """Requested package, else configured package, else derived from the plural."""
    package = request.package_name or config.package_name or model.metadata.package_name
    problems = validate_go_package_name(package)
    if problems:
        raise ValidationError(f"invalid package name '{package}': {'; '.join(problems)}")
    return package


class ViewBuilder:
    """Builds a ToolsetView from a TypeModel."""

    def __init__(self, config: GeneratorConfig, type_mapper: GoTypeMapper):
        self.config = config
        self.type_mapper = type_mapper

    def build(self, model: TypeModel, request: GenerationRequest) -> ToolsetView:
        metadata = model.metadata
        kind = metadata.kind

        helper_types = {
            "toolset_type": f"{kind}Toolset",
            "client_type": f"{kind}Client",
            "handlers_type": f"{kind}Handlers",
            "tool_type": f"{kind}Tool",
            "resource_type": f"{kind}Resource",
        }
        self._check_helper_names(model, helper_types.values())

        spec_type = model.spec_type.canonical_name if model.spec_type is not None else ""
        spec_var = f"{to_camel(kind)}SpecSchema" if model.spec_type is not None else ""

        operations = tuple(
            self._operation(op, model, spec_var) for op in request.selected_operations
        )

        schemas = []
        if model.spec_type is not None:
            schemas.append(
                SchemaVarView(
                    name=spec_var,
                    literal=render_schema(model.spec_type),
                    comment=self._comment(f"{spec_var} validates {kind} spec values"),
                )
            )

        return ToolsetView(
            package=resolve_package_name(model, request, self.config),
            module_path=request.module_path or self.config.module_path,
            include_comments=self.config.include_comments,
            kind=kind,
            kind_var=to_camel(kind),
            plural=metadata.plural,
            singular=metadata.singular,
            list_kind=metadata.list_kind,
            group=metadata.group,
            version=metadata.storage_version,
            api_version=metadata.api_version,
            scope=metadata.scope.value,
            namespaced=not metadata.is_cluster_scoped,
            short_names=metadata.short_names,
            toolset_name=metadata.plural.lower(),
            toolset_description=f"Tools for managing {kind} custom resources",
            kind_comment=self._comment(
                model.kind_type.description or f"{kind} is the Schema for the {metadata.plural} API"
            ),
            kind_fields=tuple(
                self._field(prop, allow_pointer=False) for prop in model.kind_fields()
            ),
            structs=tuple(self._struct(node) for node in model.named_types()),
            spec_type=spec_type,
            spec_schema_var=spec_var,
            operations=operations,
            schemas=tuple(schemas),
            resources=self._resources(model),
            **helper_types,
        )

    def _check_helper_names(self, model: TypeModel, helper_names) -> None:
        declared = {node.canonical_name for node in model.named_types()}
        for name in sorted(helper_names):
            if name in declared:
                raise NamingCollisionError(name, (model.kind, "generated helper"), (name,))

    def _comment(self, text: str, prefix: str = "") -> str:
        """Wrapped ``//`` comment, or empty when comments are disabled."""
        if not self.config.include_comments or not text:
            return ""
        return wrap_comment(text, COMMENT_WIDTH - len(prefix.expandtabs(4)))

    def _field(self, prop: Property, allow_pointer: bool = True) -> FieldView:
        return FieldView(
            name=field_name(prop.name),
            json_name=prop.name,
            go_type=self.type_mapper.map_property(prop, allow_pointer).name,
            tag=self.type_mapper.json_tag(prop),
            required=prop.required,
            comment=self._comment(prop.node.description, "\t"),
        )

    def _struct(self, node: TypeNode) -> StructView:
        return StructView(
            name=node.canonical_name,
            fields=tuple(self._field(prop) for prop in node.properties),
            comment=self._comment(node.description),
        )

    def _operation(self, operation: str, model: TypeModel, spec_var: str) -> OperationView:
        metadata = model.metadata
        kind = metadata.kind
        takes_name = operation != "list"
        takes_spec = operation in ("create", "update") and bool(spec_var)

        params = []
        if takes_name:
            params.append(_string_param("name", f"Name of the {kind}", required=True))
        if not metadata.is_cluster_scoped:
            params.append(
                _string_param(
                    "namespace", f"Namespace of the {kind}, defaults to the client namespace"
                )
            )
        if operation == "list":
            params.append(
                _string_param("labelSelector", f"Label selector to filter {metadata.plural}")
            )
        references: Dict[str, str] = {}
        if takes_spec:
            params.append(Property("spec", model.spec_type, required=operation == "update"))
            references[model.spec_type.canonical_name] = spec_var

        schema_var = schema_var_name(operation, kind)
        input_node = TypeNode(
            canonical_name=schema_var,
            kind=TypeKind.OBJECT,
            properties=tuple(params),
        )
        description = OPERATION_DESCRIPTIONS[operation].format(
            kind=kind, plural=pluralize(kind)
        )
        return OperationView(
            name=operation,
            method_name=method_name(operation, kind),
            tool_name=tool_name(operation, kind),
            handler_name=handler_name(operation, kind),
            schema_var=schema_var,
            description=description,
            input_schema=render_schema(input_node, references=references),
            takes_name=takes_name,
            takes_spec=takes_spec,
        )

    def _resources(self, model: TypeModel) -> Tuple[ResourceView, ...]:
        metadata = model.metadata
        kind_var = to_camel(metadata.kind)
        resources = []

        if self.config.generate_crd_resource:
            if metadata.document is None:
                logger.warning("No CRD document for %s, skipping CRD resource", metadata.kind)
            else:
                crd_name = metadata.name or f"{metadata.plural}.{metadata.group}"
                resources.append(
                    ResourceView(
                        var_name=f"{kind_var}CRDResource",
                        uri=f"k8s://crd/{crd_name}",
                        name=f"{metadata.kind} CustomResourceDefinition",
                        description=f"CustomResourceDefinition of {metadata.kind}",
                        mime_type="application/yaml",
                        content=go_raw_string(
                            yaml.safe_dump(dict(metadata.document), sort_keys=True)
                        ),
                    )
                )

        if self.config.generate_doc_resource:
            if not self.config.doc_content:
                logger.warning(
                    "No documentation content for %s, skipping documentation resource",
                    metadata.kind,
                )
            else:
                resources.append(
                    ResourceView(
                        var_name=f"{kind_var}DocResource",
                        uri=f"docs://{metadata.plural.lower()}",
                        name=f"{metadata.kind} documentation",
                        description=f"Usage documentation for {metadata.kind} resources",
                        mime_type="text/markdown",
                        content=go_raw_string(self.config.doc_content),
                    )
                )

        return tuple(resources)


def _string_param(name: str, description: str, required: bool = False) -> Property:
    node = TypeNode(
        canonical_name=name,
        kind=TypeKind.PRIMITIVE,
        primitive=PrimitiveKind.STRING,
        description=description,
    )
    return Property(name, node, required)


def build_view(
    model: TypeModel,
    request: GenerationRequest,
    config: Optional[GeneratorConfig] = None,
    type_mapper: Optional[GoTypeMapper] = None,
) -> ToolsetView:
    """Build the template view for one resource."""
    return ViewBuilder(config or GeneratorConfig(), type_mapper or GoTypeMapper()).build(
        model, request
    )
