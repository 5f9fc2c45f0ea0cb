"""Structural verification of generated OpenAPI documents."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from jsonschema.exceptions import SchemaError
from jsonschema.validators import Draft4Validator

from .json_types import JSONObject, JSONValue
from .loader import OpenAPILoadError, validate_openapi_document


@dataclass(frozen=True)
class VerificationIssue:
    """One problem found in a generated document."""

    location: str
    message: str


@dataclass(frozen=True)
class VerificationReport:
    """Result of the verification phase."""

    checked_schema_count: int
    issue_count: int
    issues: tuple[VerificationIssue, ...]


def verify_document(document: JSONObject) -> VerificationReport:
    """Check a document against the OpenAPI model, JSON Schema and its own refs.

    Component schemas are checked with the draft-4 meta-schema, the JSON Schema
    draft that OpenAPI 3.0 schema objects are derived from.
    """
    issues: list[VerificationIssue] = []

    try:
        validate_openapi_document(document)
    except OpenAPILoadError as exc:
        issues.append(VerificationIssue(location="$", message=str(exc)))

    schemas = _component_schemas(document)
    for name, schema in schemas.items():
        try:
            Draft4Validator.check_schema(schema)
        except SchemaError as exc:
            issues.append(
                VerificationIssue(
                    location=f"$.components.schemas.{name}",
                    message=f"invalid schema: {exc.message}",
                )
            )

    for location, ref in _iter_refs(document, path="$"):
        if not _resolves(document, ref):
            issues.append(VerificationIssue(location=location, message=f"unresolved $ref {ref}"))

    return VerificationReport(
        checked_schema_count=len(schemas),
        issue_count=len(issues),
        issues=tuple(issues),
    )


def format_report(report: VerificationReport) -> str:
    """Render report as CLI output text."""
    lines = [
        f"Verified schemas: {report.checked_schema_count}",
        f"Issues: {report.issue_count}",
    ]
    for issue in report.issues:
        lines.extend(
            [
                f"- {issue.location}",
                f"  {short_repr(issue.message)}",
            ]
        )
    return "\n".join(lines)


def short_repr(value: Any, *, limit: int = 160) -> str:
    """A short representation for issue diagnostics."""
    text = value if isinstance(value, str) else repr(value)
    return text if len(text) <= limit else f"{text[: limit - 3]}..."


def _component_schemas(document: JSONObject) -> dict[str, JSONObject]:
    components = document.get("components")
    if not isinstance(components, dict):
        return {}
    schemas = components.get("schemas")
    if not isinstance(schemas, dict):
        return {}
    return {name: schema for name, schema in schemas.items() if isinstance(schema, dict)}


def _iter_refs(node: JSONValue, *, path: str) -> Iterator[tuple[str, str]]:
    if isinstance(node, list):
        for index, item in enumerate(node):
            yield from _iter_refs(item, path=f"{path}[{index}]")
        return
    if not isinstance(node, dict):
        return
    for key, value in node.items():
        if key == "$ref" and isinstance(value, str):
            yield path, value
        else:
            yield from _iter_refs(value, path=f"{path}.{key}")


def _resolves(document: JSONObject, ref: str) -> bool:
    if not ref.startswith("#/"):
        return False
    current: JSONValue = document
    for token in ref[2:].split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if not isinstance(current, dict) or token not in current:
            return False
        current = current[token]
    return True
