"""Convert inspected Python types into OpenAPI 3.0 schema objects."""

from __future__ import annotations

import logging
from typing import Any, Optional

from .inspector import describe_fields, inspect_value
from .json_types import JSONValue, Schema
from .model_types import FieldDescriptor, TypeDescriptor, TypeKind

logger = logging.getLogger(__name__)

_PRIMITIVE_TYPES: dict[TypeKind, str] = {
    TypeKind.BOOLEAN: "boolean",
    TypeKind.INTEGER: "integer",
    TypeKind.FLOAT: "number",
    TypeKind.STRING: "string",
}


def basic_type_schema(kind: TypeKind) -> Optional[Schema]:
    """Map a primitive kind to its schema, or ``None`` for non-primitive kinds."""
    schema_type = _PRIMITIVE_TYPES.get(kind)
    if schema_type is None:
        return None
    return {"type": schema_type}


def special_type_schema(kind: TypeKind) -> Optional[Schema]:
    """Map a well-known special kind to its fixed schema."""
    if kind is TypeKind.TIMESTAMP:
        return {"type": "string", "format": "date-time"}
    if kind is TypeKind.RAW_PAYLOAD:
        return {"type": "object"}
    return None


def circular_reference_schema(name: str) -> Schema:
    """Return the marker emitted instead of re-expanding an ancestor struct."""
    return {"type": "object", "description": f"circular reference to {name}"}


class SchemaGenerator:
    """Generate inline schemas for values and type annotations.

    The generator tracks the struct types currently being expanded on the call
    stack. A struct that reappears below itself is replaced by a circular
    reference marker; siblings are still expanded in full because a type is
    removed from the stack once its own expansion finishes.
    """

    def __init__(self) -> None:
        self._expanding: set[Any] = set()

    def generate(self, value: Any) -> Optional[Schema]:
        """Generate a schema for a value or annotation, ``None`` for ``None``."""
        descriptor = inspect_value(value)
        if descriptor is None:
            return None
        return self.generate_for(descriptor)

    def generate_for(self, descriptor: TypeDescriptor) -> Schema:
        """Generate a schema for an already inspected type."""
        special = special_type_schema(descriptor.kind)
        if special is not None:
            return special

        primitive = basic_type_schema(descriptor.kind)
        if primitive is not None:
            if descriptor.enum_values:
                primitive["enum"] = list(descriptor.enum_values)
            return primitive

        if descriptor.kind is TypeKind.STRUCT:
            return self._struct_schema(descriptor)
        if descriptor.kind is TypeKind.SEQUENCE:
            return {"type": "array", "items": self._nested_schema(descriptor.element)}
        if descriptor.kind is TypeKind.MAP:
            return {
                "type": "object",
                "additionalProperties": self._nested_schema(descriptor.value),
            }
        return {"type": "object"}

    def _struct_schema(self, descriptor: TypeDescriptor) -> Schema:
        struct_type = descriptor.python_type
        if struct_type in self._expanding:
            logger.debug("Circular reference to %s; emitting marker schema", descriptor.name)
            return circular_reference_schema(descriptor.name)

        self._expanding.add(struct_type)
        try:
            properties: dict[str, JSONValue] = {}
            required: list[JSONValue] = []
            for field in describe_fields(descriptor):
                if field.required:
                    required.append(field.name)
                properties[field.name] = self._field_schema(field)
        finally:
            self._expanding.discard(struct_type)

        schema: Schema = {"type": "object", "properties": properties}
        if required:
            schema["required"] = required
        return schema

    def _field_schema(self, field: FieldDescriptor) -> Schema:
        schema = self.generate_for(field.type)
        if basic_type_schema(field.type.kind) is not None:
            _add_field_metadata(schema, field)
        return schema

    def _nested_schema(self, descriptor: Optional[TypeDescriptor]) -> Schema:
        if descriptor is None:
            return {"type": "object"}
        return self.generate_for(descriptor)


def _add_field_metadata(schema: Schema, field: FieldDescriptor) -> None:
    if field.description:
        schema["description"] = field.description
    if field.example is not None and field.example != "":
        schema["example"] = field.example
    if field.enum:
        schema["enum"] = list(field.enum)


def generate_schema(value: Any) -> Optional[Schema]:
    """Generate a schema with a fresh circular-reference guard."""
    return SchemaGenerator().generate(value)
