"""Tests for document serialization and loading."""

from __future__ import annotations

import json
from pathlib import Path
from types import ModuleType

import pytest
import yaml

from openapi_docrouter.loader import OpenAPILoadError, load_openapi_document
from openapi_docrouter.writer import (
    DocumentSerializationError,
    dump_document,
    infer_format,
    write_document,
)


def test_json_round_trip(todo_app: ModuleType) -> None:
    """JSON output parses back to an equal document."""
    document = todo_app.build_router().openapi()
    assert json.loads(dump_document(document, fmt="json")) == document


def test_yaml_round_trip_without_anchors(todo_app: ModuleType) -> None:
    """YAML output parses back to an equal document and never uses aliases."""
    document = todo_app.build_router().openapi()
    shared = {"type": "string"}
    document["components"]["schemas"]["SharedA"] = shared
    document["components"]["schemas"]["SharedB"] = shared

    text = dump_document(document, fmt="yaml")
    assert "&id" not in text
    assert yaml.safe_load(text) == document


def test_unserializable_document_raises() -> None:
    """Values the serializer cannot encode surface a single error type."""
    with pytest.raises(DocumentSerializationError, match="failed to serialize document"):
        dump_document({"value": object()}, fmt="json")
    with pytest.raises(DocumentSerializationError, match="failed to serialize document"):
        dump_document({"value": object()}, fmt="yaml")


def test_unknown_format_raises() -> None:
    """Only JSON and YAML are supported."""
    with pytest.raises(DocumentSerializationError):
        dump_document({}, fmt="toml")


def test_infer_format() -> None:
    """The file suffix selects the output format."""
    assert infer_format(Path("openapi.yaml")) == "yaml"
    assert infer_format(Path("openapi.YML")) == "yaml"
    assert infer_format(Path("openapi.json")) == "json"
    assert infer_format(Path("openapi")) == "json"


@pytest.mark.parametrize("fmt", ["json", "yaml"])
def test_written_document_loads_back(todo_app: ModuleType, tmp_path: Path, fmt: str) -> None:
    """Written documents load and validate as OpenAPI."""
    document = todo_app.build_router().openapi()
    path = write_document(document, tmp_path / "nested" / f"openapi.{fmt}", fmt=fmt)

    assert load_openapi_document(path) == document


def test_loading_rejects_non_mapping(tmp_path: Path) -> None:
    """A document must deserialize to a mapping."""
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(OpenAPILoadError):
        load_openapi_document(path)


def test_loading_missing_file(tmp_path: Path) -> None:
    """Missing files raise a load error."""
    with pytest.raises(OpenAPILoadError):
        load_openapi_document(tmp_path / "missing.json")
