"""Tests for Go type mapping and schema literals."""

from crd_toolgen.codegen.core.schema import Property
from crd_toolgen.codegen.core.walker import SchemaWalker
from crd_toolgen.codegen.languages.go.schema_code import go_literal, render_schema
from crd_toolgen.codegen.languages.go.types import GoTypeConfig, GoTypeMapper
from crd_toolgen.codegen.languages.go.view import go_raw_string

SPEC_SCHEMA = {
    "type": "object",
    "required": ["name"],
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "tags": {"type": "array", "items": {"type": "string"}},
        "limits": {"type": "object", "additionalProperties": {"type": "integer"}},
        "extra": {"type": "object"},
        "payload": {},
        "template": {"type": "object", "properties": {"image": {"type": "string"}}},
    },
}


def analyze(schema=SPEC_SCHEMA, name="ThingSpec"):
    return SchemaWalker().analyze(schema, name)


def go_types(mapper, node):
    return {prop.name: mapper.map_property(prop).name for prop in node.properties}


def test_default_type_mapping():
    node = analyze()

    assert go_types(GoTypeMapper(), node) == {
        "extra": "map[string]interface{}",
        "limits": "map[string]int32",
        "name": "string",
        "payload": "interface{}",
        "tags": "[]string",
        "template": "*ThingSpecTemplate",
    }


def test_required_structs_are_values():
    node = analyze()
    template = node.get_property("template")
    required = Property(template.name, template.node, required=True)

    assert GoTypeMapper().map_property(required).name == "ThingSpecTemplate"
    assert GoTypeMapper().map_property(template, allow_pointer=False).name == "ThingSpecTemplate"


def test_type_config_options():
    mapper = GoTypeMapper(GoTypeConfig(unknown_type="any", pointer_optional_structs=False))

    types = go_types(mapper, analyze())

    assert types["payload"] == "any"
    assert types["extra"] == "map[string]any"
    assert types["template"] == "ThingSpecTemplate"


def test_json_tags():
    node = analyze()
    mapper = GoTypeMapper()

    assert mapper.json_tag(node.get_property("name")) == '`json:"name"`'
    assert mapper.json_tag(node.get_property("tags")) == '`json:"tags,omitempty"`'
    assert GoTypeMapper(GoTypeConfig(omit_empty_optional=False)).json_tag(
        node.get_property("tags")
    ) == '`json:"tags"`'


def test_render_schema_literal():
    schema = {
        "type": "object",
        "required": ["name"],
        "properties": {
            "tags": {"type": "array", "items": {"type": "string"}},
            "name": {"type": "string", "minLength": 1},
        },
    }

    literal = render_schema(analyze(schema, "Thing"))

    assert literal == "\n".join(
        [
            "&jsonschema.Schema{",
            '\tType: "object",',
            "\tProperties: map[string]*jsonschema.Schema{",
            '\t\t"name": &jsonschema.Schema{',
            '\t\t\tType: "string",',
            "\t\t\tMinLength: jsonschema.Ptr(1),",
            "\t\t},",
            '\t\t"tags": &jsonschema.Schema{',
            '\t\t\tType: "array",',
            "\t\t\tItems: &jsonschema.Schema{",
            '\t\t\t\tType: "string",',
            "\t\t\t},",
            "\t\t},",
            "\t},",
            '\tRequired: []string{"name"},',
            "}",
        ]
    )


def test_render_schema_constraints():
    schema = {
        "type": "integer",
        "description": 'Replica "count"',
        "enum": [1, 3],
        "minimum": 0,
        "maximum": 2.5,
    }

    literal = render_schema(analyze(schema, "Replicas"))

    assert '\tDescription: "Replica \\"count\\"",' in literal
    assert "\tEnum: []any{1, 3}," in literal
    assert "\tMinimum: jsonschema.Ptr(float64(0))," in literal
    assert "\tMaximum: jsonschema.Ptr(float64(2.5))," in literal
    assert "Description" not in render_schema(analyze(schema, "Replicas"), include_descriptions=False)


def test_render_schema_keeps_string_values_exact():
    schema = {
        "type": "string",
        "description": "Spaced   out\ntext",
        "pattern": "^a  b\\n$",
        "format": "x\ty",
        "enum": [" x", "a  b"],
    }

    literal = render_schema(analyze(schema, "Mode"))

    assert '\tPattern: "^a  b\\\\n$",' in literal
    assert '\tFormat: "x\\ty",' in literal
    assert '\tEnum: []any{" x", "a  b"},' in literal
    assert '\tDescription: "Spaced out text",' in literal


def test_render_schema_references():
    node = analyze()

    literal = render_schema(node, references={"ThingSpecTemplate": "templateSchema"})

    assert '\t\t"template": templateSchema,' in literal
    assert "image" not in literal


def test_go_literal():
    assert go_literal(None) == "nil"
    assert go_literal(True) == "true"
    assert go_literal(7) == "7"
    assert go_literal("a\nb") == '"a\\nb"'
    assert go_literal({"k": 1}) == '"{\\"k\\": 1}"'


def test_go_raw_string_splices_backticks():
    assert go_raw_string("plain") == "`plain`"
    assert go_raw_string("use `kubectl`") == '`use ` + "`" + `kubectl` + "`" + ``'
