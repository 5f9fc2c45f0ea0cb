"""Derive OpenAPI documents from typed route declarations."""

from __future__ import annotations

from .cli import main
from .generator import GenerationRun, run_generation
from .inspector import (
    DuplicateFieldNameError,
    SchemaGenerationError,
    describe_fields,
    inspect_value,
    parse_json_tag,
)
from .model_types import (
    DocumentInfo,
    Example,
    FieldDescriptor,
    RouteInfo,
    RouteResponse,
    Server,
    TagInfo,
    TypeDescriptor,
    TypeKind,
)
from .openapi import OpenAPIGenerator
from .registry import SchemaRegistry
from .router import DocRouter, RouteConfig
from .schema import SchemaGenerator, generate_schema
from .schema_utils import extract_nested_types
from .writer import DocumentSerializationError, dump_document

__all__ = [
    "DocRouter",
    "DocumentInfo",
    "DocumentSerializationError",
    "DuplicateFieldNameError",
    "Example",
    "FieldDescriptor",
    "GenerationRun",
    "OpenAPIGenerator",
    "RouteConfig",
    "RouteInfo",
    "RouteResponse",
    "SchemaGenerationError",
    "SchemaGenerator",
    "SchemaRegistry",
    "Server",
    "TagInfo",
    "TypeDescriptor",
    "TypeKind",
    "describe_fields",
    "dump_document",
    "extract_nested_types",
    "generate_schema",
    "inspect_value",
    "main",
    "parse_json_tag",
    "run_generation",
]
