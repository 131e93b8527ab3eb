"""Tests for the Jinja2 template engine wrapper."""

import pytest

from crd_toolgen.codegen.core.templates import (
    TemplateEngine,
    TemplateError,
    create_template_engine,
)


def test_quote_filter():
    engine = TemplateEngine()

    rendered = engine.render_string("{{ text | quote }} {{ 3 | quote }}", {"text": 'a "b"\nc'})

    assert rendered == '"a \\"b\\" c" "3"'


def test_undefined_variables_fail():
    engine = TemplateEngine()

    with pytest.raises(TemplateError, match="missing"):
        engine.render_string("{{ missing }}", {})


def test_in_memory_templates():
    engine = TemplateEngine()
    engine.add_template("greeting.j2", "hello {{ who }}")

    assert engine.template_exists("greeting.j2")
    assert engine.render_template("greeting.j2", {"who": "widget"}) == "hello widget"
    assert "greeting.j2" in engine.list_templates()


def test_unknown_template():
    engine = TemplateEngine()

    assert not engine.template_exists("nope.j2")
    with pytest.raises(TemplateError, match="Template not found: nope.j2"):
        engine.render_template("nope.j2", {})


def test_override_directory_takes_precedence(tmp_path):
    builtin = tmp_path / "builtin"
    override = tmp_path / "override"
    builtin.mkdir()
    override.mkdir()
    (builtin / "doc.go.j2").write_text("builtin", encoding="utf-8")
    (builtin / "types.go.j2").write_text("builtin types", encoding="utf-8")
    (override / "doc.go.j2").write_text("override", encoding="utf-8")

    engine = create_template_engine(builtin, override)

    assert engine.render_template("doc.go.j2", {}) == "override"
    assert engine.render_template("types.go.j2", {}) == "builtin types"


def test_missing_template_directory_is_skipped(tmp_path):
    engine = create_template_engine(tmp_path / "absent")

    assert engine.list_templates() == []
