"""OpenAPI document loading and basic validation."""

from __future__ import annotations

from pathlib import Path

import yaml
from openapi_python_client.schema import OpenAPI
from pydantic import ValidationError

from .json_types import JSONObject, JSONValue


class OpenAPILoadError(RuntimeError):
    """Raised when a written OpenAPI document cannot be loaded back."""


def load_openapi_document(path: Path) -> JSONObject:
    """Load and validate an OpenAPI document from JSON or YAML."""
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = yaml.safe_load(handle)
    except OSError as exc:
        raise OpenAPILoadError(f"Failed to read OpenAPI file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise OpenAPILoadError(f"Failed to parse {path}: {exc}") from exc

    payload_value: JSONValue = payload
    if not isinstance(payload_value, dict):
        raise OpenAPILoadError(
            f"OpenAPI document must deserialize to a mapping, got {type(payload_value)!r}"
        )

    validate_openapi_document(payload_value)
    return payload_value


def validate_openapi_document(document: JSONObject) -> None:
    """Validate a document against the OpenAPI object model."""
    try:
        OpenAPI.model_validate(document)
    except ValidationError as exc:
        raise OpenAPILoadError(f"OpenAPI schema validation failed: {exc}") from exc
