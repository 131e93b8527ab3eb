"""End-to-end tests for Go toolset generation."""

import copy

import pytest
import yaml
from conftest import make_crd

from crd_toolgen.codegen import generate_from_crd
from crd_toolgen.codegen.core.config import GenerationRequest, GeneratorConfig
from crd_toolgen.codegen.core.crd import parse_crd
from crd_toolgen.codegen.core.errors import NamingCollisionError, SchemaError, ValidationError
from crd_toolgen.codegen.core.generator import (
    GenerationResult,
    generate_batch,
    generate_code,
    generate_toolset,
)
from crd_toolgen.codegen.core.model import build_type_model
from crd_toolgen.codegen.languages.go import ARTIFACTS, GoGenerator

BASE_ARTIFACTS = ["toolset", "types", "client-wrapper", "handlers", "schema-validators", "doc"]


def render(generator, crd, crud=None, package_name=""):
    request = GenerationRequest.from_crud(crud, package_name)
    return generate_toolset(generator, parse_crd(crd), request)


def test_artifacts_in_fixed_order(generator, widget_crd):
    files = render(generator, widget_crd)

    assert list(files) == BASE_ARTIFACTS
    assert list(ARTIFACTS[:-1]) == BASE_ARTIFACTS


def test_generation_is_deterministic(generator, widget_crd):
    assert render(generator, widget_crd) == render(GoGenerator(), copy.deepcopy(widget_crd))


def test_output_does_not_depend_on_property_order(generator, widget_crd):
    shuffled = copy.deepcopy(widget_crd)
    spec = shuffled["spec"]["versions"][0]["schema"]["openAPIV3Schema"]["properties"]["spec"]
    spec["properties"] = dict(reversed(list(spec["properties"].items())))

    assert render(generator, shuffled) == render(generator, widget_crd)


def test_output_is_formatted(generator, widget_crd):
    for artifact, code in render(generator, widget_crd).items():
        assert code.endswith("}\n") or code.endswith("package widgets\n"), artifact
        assert "\n\n\n" not in code, artifact
        assert all(line == line.rstrip() for line in code.split("\n")), artifact


def test_package_clause(generator, widget_crd):
    files = render(generator, widget_crd)

    for artifact in BASE_ARTIFACTS[:-1]:
        assert files[artifact].startswith("package widgets\n"), artifact
    assert files["doc"].startswith("// Package widgets provides MCP tools")


def test_types(generator, widget_crd):
    types = render(generator, widget_crd)["types"]

    assert 'var GroupVersion = schema.GroupVersion{Group: "example.com", Version: "v1"}' in types
    assert "type Widget struct {" in types
    assert "\tSpec WidgetSpec `json:\"spec,omitempty\"`" in types
    assert "\tStatus WidgetStatus `json:\"status,omitempty\"`" in types
    assert "type WidgetList struct {" in types
    assert "\tItems           []Widget `json:\"items\"`" in types
    assert "// WidgetSpec defines the desired state of a Widget." in types
    assert "\tLabels map[string]string `json:\"labels,omitempty\"`" in types
    assert "\tName string `json:\"name\"`" in types
    assert "\tPorts []WidgetSpecPortItem `json:\"ports,omitempty\"`" in types
    assert "\tReplicas int32 `json:\"replicas,omitempty\"`" in types
    assert "\tPort int64 `json:\"port\"`" in types
    assert "\tObservedGeneration int64 `json:\"observedGeneration,omitempty\"`" in types
    assert "func (in *Widget) DeepCopyObject() runtime.Object {" in types
    assert "func (in *WidgetList) DeepCopyObject() runtime.Object {" in types


def test_named_types_declared_in_model_order(generator, widget_crd):
    types = render(generator, widget_crd)["types"]

    positions = [
        types.index(f"type {name} struct")
        for name in ("Widget", "WidgetList", "WidgetSpec", "WidgetSpecPortItem", "WidgetStatus")
    ]
    assert positions == sorted(positions)


def test_client_wrapper(generator, widget_crd):
    client = render(generator, widget_crd)["client-wrapper"]

    assert "func NewWidgetClient(c client.Client, namespace string) *WidgetClient {" in client
    assert "func (c *WidgetClient) InNamespace(namespace string) *WidgetClient {" in client
    for signature in (
        "CreateWidget(ctx context.Context, obj *Widget) error",
        "GetWidget(ctx context.Context, name string) (*Widget, error)",
        "ListWidgets(ctx context.Context, opts ...client.ListOption) (*WidgetList, error)",
        "UpdateWidget(ctx context.Context, obj *Widget) error",
        "DeleteWidget(ctx context.Context, name string) error",
    ):
        assert f"func (c *WidgetClient) {signature} {{" in client


def test_handlers_and_toolset(generator, widget_crd):
    files = render(generator, widget_crd)
    handlers = files["handlers"]
    toolset = files["toolset"]

    for tool, handler in (
        ("widget_create", "HandleCreateWidget"),
        ("widget_get", "HandleGetWidget"),
        ("widgets_list", "HandleListWidgets"),
        ("widget_update", "HandleUpdateWidget"),
        ("widget_delete", "HandleDeleteWidget"),
    ):
        assert f'\tcase "{tool}":\n\t\treturn h.{handler}(ctx, params)' in handlers
        assert f'\t\t\tName:        "{tool}",' in toolset
        assert f"\t\t\tHandler:     t.handlers.{handler}," in toolset

    assert '\t"encoding/json"' in handlers
    assert '\t"strings"' in handlers
    assert '\treturn "widgets"' in toolset


def test_tools_follow_operation_order(generator, widget_crd):
    toolset = render(generator, widget_crd, crud="dc")["toolset"]

    assert toolset.index('"widget_delete"') < toolset.index('"widget_create"')


def test_schema_validators(generator, widget_crd):
    schemas = render(generator, widget_crd)["schema-validators"]

    assert "var widgetSpecSchema = &jsonschema.Schema{" in schemas
    assert '\t\t"replicas": &jsonschema.Schema{' in schemas
    assert "\t\t\tMinimum: jsonschema.Ptr(float64(0))," in schemas
    assert "\t\t\tMaximum: jsonschema.Ptr(float64(10))," in schemas
    assert "\t\t\tMaxLength: jsonschema.Ptr(63)," in schemas
    assert '\t\t\tEnum: []any{"small", "large"},' in schemas
    assert "var createWidgetInputSchema = &jsonschema.Schema{" in schemas
    assert "var listWidgetsInputSchema = &jsonschema.Schema{" in schemas
    assert '\t\t"spec": widgetSpecSchema,' in schemas

    update = schemas[schemas.index("var updateWidgetInputSchema") :]
    assert '\tRequired: []string{"name", "spec"},' in update


def test_doc(generator, widget_crd):
    doc = render(generator, widget_crd)["doc"]

    assert "// Group:   example.com" in doc
    assert "// Scope:   Namespaced" in doc
    assert "// Short names: wd" in doc
    assert "//   - widgets_list: List Widgets" in doc
    assert "// Import path: github.com/example/project/widgets" in doc


def test_cluster_scope_has_no_namespace(generator, cluster_crd):
    files = render(generator, cluster_crd)

    for artifact in ("client-wrapper", "handlers", "schema-validators"):
        assert "namespace" not in files[artifact].lower(), artifact
    assert "func NewGlobalConfigClient(c client.Client) *GlobalConfigClient {" in files["client-wrapper"]
    assert "client.ObjectKey{Name: name}" in files["client-wrapper"]
    assert "// Scope:   Cluster" in files["doc"]


def test_crud_selection_limits_methods(generator, widget_crd):
    files = render(generator, widget_crd, crud="cr")

    assert "CreateWidget" in files["client-wrapper"]
    assert "GetWidget" in files["client-wrapper"]
    assert "ListWidgets" in files["client-wrapper"]
    assert "UpdateWidget" not in files["client-wrapper"]
    assert "DeleteWidget" not in files["client-wrapper"]
    assert "widget_delete" not in files["handlers"]
    assert "updateWidgetInputSchema" not in files["schema-validators"]
    assert files["toolset"].count("Name:        ") == 3


def test_imports_follow_selected_operations(generator, widget_crd):
    handlers = render(generator, widget_crd, crud="d")["handlers"]

    assert '"encoding/json"' not in handlers
    assert '"strings"' not in handlers
    assert "func decodeParam" not in handlers
    assert "func parseLabelSelector" not in handlers


def test_update_without_get_builds_object(generator, widget_crd):
    handlers = render(generator, widget_crd, crud="u")["handlers"]

    assert "c.GetWidget(" not in handlers
    assert "\tobj := &Widget{}" in handlers


def test_kind_without_spec(generator):
    crd = make_crd({"type": "object", "properties": {"data": {"type": "string"}}})

    files = render(generator, crd)

    assert "SpecSchema" not in files["schema-validators"]
    assert "decodeParam" not in files["handlers"]
    assert "\tData string `json:\"data,omitempty\"`" in files["types"]


def test_package_name_override(generator, widget_crd):
    files = render(generator, widget_crd, package_name="widgetapi")

    assert files["types"].startswith("package widgetapi\n")
    assert "// Import path: github.com/example/project/widgetapi" in files["doc"]


def test_invalid_package_name(generator, widget_crd):
    with pytest.raises(ValidationError, match="invalid package name 'Widget-API'"):
        render(generator, widget_crd, package_name="Widget-API")


def test_helper_type_collision(generator):
    schema = {
        "type": "object",
        "properties": {"client": {"type": "object", "properties": {"x": {"type": "string"}}}},
    }

    with pytest.raises(NamingCollisionError, match="WidgetClient"):
        render(generator, make_crd(schema))


def test_without_comments(widget_crd):
    files = render(GoGenerator(GeneratorConfig(include_comments=False)), widget_crd)

    for artifact in BASE_ARTIFACTS[:-1]:
        lines = files[artifact].split("\n")
        assert not any(line.strip().startswith("//") for line in lines), artifact


def test_crd_resource(widget_crd):
    files = render(GoGenerator(GeneratorConfig(generate_crd_resource=True)), widget_crd)

    assert list(files) == BASE_ARTIFACTS + ["resources"]
    resources = files["resources"]
    assert "var widgetCRDResource = WidgetResource{" in resources
    assert '\tURI:         "k8s://crd/widgets.example.com",' in resources
    assert "kind: CustomResourceDefinition" in resources
    assert "func (t *WidgetToolset) GetResources() []WidgetResource {" in resources


def test_doc_resource(widget_crd):
    config = GeneratorConfig(generate_doc_resource=True, doc_content="# Widget guide\n")

    resources = render(GoGenerator(config), widget_crd)["resources"]

    assert '\tURI:         "docs://widgets",' in resources
    assert "\tContent:     `# Widget guide\n`," in resources
    assert "widgetCRDResource" not in resources


def embedded_content(resources, var_name):
    block = resources.split(f"var {var_name} = ", 1)[1]
    return block.split("\tContent:     `", 1)[1].split("`,\n}", 1)[0]


def test_crd_resource_embeds_document_unchanged(widget_crd):
    crd = copy.deepcopy(widget_crd)
    schema = crd["spec"]["versions"][0]["schema"]["openAPIV3Schema"]
    schema["description"] = "para one\n\n\npara two   \n"

    resources = render(GoGenerator(GeneratorConfig(generate_crd_resource=True)), crd)["resources"]

    embedded = yaml.safe_load(embedded_content(resources, "widgetCRDResource"))
    assert embedded == crd
    assert resources.endswith("}\n")


def test_doc_resource_keeps_markdown_whitespace(widget_crd):
    guide = "# Guide\n\nline one  \nline two\n\n\n\nend\n"
    config = GeneratorConfig(generate_doc_resource=True, doc_content=guide)

    resources = render(GoGenerator(config), widget_crd)["resources"]

    assert embedded_content(resources, "widgetDocResource") == guide


def test_format_code_skips_raw_strings(generator):
    code = 'x := "`"  \n\n\ny := `a  \n\n\n\nb`  \n\n\nz := 1\n'

    assert generator.format_code(code) == 'x := "`"\n\ny := `a  \n\n\n\nb`  \n\nz := 1\n'


def test_doc_resource_without_content_is_skipped(widget_crd):
    config = GeneratorConfig(generate_doc_resource=True)

    assert "resources" not in render(GoGenerator(config), widget_crd)


def test_generate_code_metadata(generator, widget_metadata):
    result = generate_code(generator, widget_metadata)

    assert result.success
    assert result.warnings == []
    assert result.metadata["kind"] == "Widget"
    assert result.metadata["operations"] == ["create", "get", "list", "update", "delete"]
    assert result.metadata["artifacts"] == BASE_ARTIFACTS
    assert result.metadata["type_count"] == 4
    assert result.metadata["has_unknowns"] is False
    assert result.code.startswith("package widgets")


def test_float_fields_warn(generator, cluster_crd):
    result = generate_code(generator, parse_crd(cluster_crd))

    assert result.success
    assert any("GlobalConfigSpec.retention" in warning for warning in result.warnings)


def test_generate_code_reports_failures(generator):
    schema = {
        "type": "object",
        "properties": {"client": {"type": "object", "properties": {"x": {"type": "string"}}}},
    }

    result = generate_code(generator, parse_crd(make_crd(schema)))

    assert not result.success
    assert result.files == {}
    assert isinstance(result.exception, NamingCollisionError)
    assert "WidgetClient" in result.error_message


def test_generate_code_reports_non_string_property_keys(generator):
    schema = {
        "type": "object",
        "properties": {"spec": {"type": "object", "properties": {True: {"type": "boolean"}}}},
    }

    result = generate_code(generator, parse_crd(make_crd(schema)))

    assert not result.success
    assert isinstance(result.exception, SchemaError)
    assert "must be a string" in result.error_message


def test_batch_continues_after_failure(generator, widget_metadata, cluster_crd):
    broken = parse_crd(
        make_crd(
            {"type": "object", "properties": {"list": {"type": "object", "properties": {"x": {}}}}},
            kind="Gizmo",
            plural="gizmos",
        )
    )

    results = generate_batch(generator, [widget_metadata, broken, parse_crd(cluster_crd)])

    assert [result.success for result in results] == [True, False, True]
    assert [result.metadata["kind"] for result in results] == ["Widget", "Gizmo", "GlobalConfig"]


def test_generation_result_error():
    result = GenerationResult.error("boom", metadata={"kind": "Widget"})

    assert not result.success
    assert result.error_message == "boom"
    assert result.code == ""


def test_format_code(generator):
    assert generator.format_code("a  \n\n\n\nb\t\n\n\n") == "a\n\nb\n"
    assert generator.format_code("\n\nx") == "x\n"


def test_validate_model_warns_on_unknowns(generator):
    model = build_type_model(
        parse_crd(make_crd({"type": "object", "properties": {"spec": {"properties": {"raw": {}}}}}))
    )

    warnings = generator.validate_model(model)

    assert "Unknown type in WidgetSpec.raw" in warnings


def test_generate_from_crd(widget_crd):
    files = generate_from_crd(widget_crd, language="golang", crud="r")

    assert list(files) == BASE_ARTIFACTS
    assert "CreateWidget" not in files["client-wrapper"]


def test_generate_from_crd_uses_configured_crud(widget_crd):
    files = generate_from_crd(widget_crd, config={"crud": "d"})

    assert "DeleteWidget" in files["client-wrapper"]
    assert "CreateWidget" not in files["client-wrapper"]


def test_generate_from_crd_argument_overrides_config(widget_crd):
    files = generate_from_crd(widget_crd, config={"crud": "d"}, crud="c")

    assert "CreateWidget" in files["client-wrapper"]
    assert "DeleteWidget" not in files["client-wrapper"]
