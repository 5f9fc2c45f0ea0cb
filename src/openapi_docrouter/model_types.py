"""Internal datatypes for type inspection and route documentation."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from .json_types import JSONValue, MutableJSONObject


class TypeKind(Enum):
    """Structural kind of an inspected type."""

    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    STRING = "string"
    STRUCT = "struct"
    SEQUENCE = "sequence"
    MAP = "map"
    TIMESTAMP = "timestamp"
    RAW_PAYLOAD = "raw_payload"
    OTHER = "other"


@dataclass(frozen=True)
class TypeDescriptor:
    """Structural description of a Python type.

    Struct fields are not stored here; they are enumerated on demand by
    ``inspector.describe_fields`` so that self-referential types can be
    described without unbounded recursion.
    """

    kind: TypeKind
    python_type: Any
    name: str = ""
    element: Optional[TypeDescriptor] = None
    value: Optional[TypeDescriptor] = None
    enum_values: tuple[JSONValue, ...] = ()


@dataclass(frozen=True)
class FieldDescriptor:
    """One serialized field of a struct type."""

    name: str
    attribute: str
    required: bool
    type: TypeDescriptor
    description: Optional[str] = None
    example: Optional[JSONValue] = None
    enum: tuple[JSONValue, ...] = ()


@dataclass(frozen=True)
class Example:
    """A literal example attached to a documented response."""

    value: JSONValue
    content_type: str = "application/json"


@dataclass(frozen=True)
class RouteResponse:
    """A documented response for one HTTP status code."""

    status_code: str
    description: str
    schema: Any = None
    examples: tuple[Example, ...] = ()


@dataclass(frozen=True)
class RouteInfo:
    """Documentation record for one declared route."""

    method: str
    path: str
    name: str = ""
    description: str = ""
    handler: Optional[Callable[..., Any]] = None
    request_type: Any = None
    response_type: Any = None
    responses: dict[str, RouteResponse] = field(default_factory=dict)
    tags: tuple[str, ...] = ()
    secured: bool = False


@dataclass(frozen=True)
class Server:
    """An OpenAPI server entry."""

    url: str
    description: str = ""


@dataclass(frozen=True)
class TagInfo:
    """An OpenAPI tag description."""

    name: str
    description: str = ""


@dataclass(frozen=True)
class DocumentInfo:
    """Top-level ``info`` metadata for a generated document."""

    title: str
    description: str = ""
    version: str = "1.0.0"

    def to_json(self) -> MutableJSONObject:
        """Return the OpenAPI ``info`` object."""
        return {
            "title": self.title,
            "description": self.description,
            "version": self.version,
        }


@dataclass(frozen=True)
class GenerationResult:
    """Generation output metadata."""

    output_path: str
    schema_names: tuple[str, ...]
    warnings: tuple[str, ...]
