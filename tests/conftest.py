"""Shared fixtures for crd_toolgen tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import yaml

from crd_toolgen.codegen.core.config import GenerationRequest, GeneratorConfig
from crd_toolgen.codegen.core.crd import CRDMetadata, parse_crd
from crd_toolgen.codegen.core.model import TypeModel, build_type_model
from crd_toolgen.codegen.languages.go import GoGenerator

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a single-document YAML fixture."""
    with (FIXTURE_DIR / name).open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    if not isinstance(data, dict):
        pytest.fail(f"Fixture {name} must parse to a mapping, got {type(data)!r}")
    return data


def make_crd(
    schema: dict[str, Any],
    kind: str = "Widget",
    plural: str = "widgets",
    scope: str = "Namespaced",
    group: str = "example.com",
) -> dict[str, Any]:
    """Minimal CRD document around an openAPIV3Schema."""
    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": f"{plural}.{group}"},
        "spec": {
            "group": group,
            "names": {"kind": kind, "plural": plural},
            "scope": scope,
            "versions": [
                {
                    "name": "v1",
                    "served": True,
                    "storage": True,
                    "schema": {"openAPIV3Schema": schema},
                }
            ],
        },
    }


@pytest.fixture
def fixture_dir() -> Path:
    return FIXTURE_DIR


@pytest.fixture
def widget_crd() -> dict[str, Any]:
    return load_fixture("simple-crd.yaml")


@pytest.fixture
def cluster_crd() -> dict[str, Any]:
    return load_fixture("cluster-scoped-crd.yaml")


@pytest.fixture
def multi_version_crd() -> dict[str, Any]:
    return load_fixture("multi-version-crd.yaml")


@pytest.fixture
def widget_metadata(widget_crd) -> CRDMetadata:
    return parse_crd(widget_crd)


@pytest.fixture
def widget_model(widget_metadata) -> TypeModel:
    return build_type_model(widget_metadata)


@pytest.fixture
def generator() -> GoGenerator:
    return GoGenerator(GeneratorConfig())


@pytest.fixture
def all_operations() -> GenerationRequest:
    return GenerationRequest()
