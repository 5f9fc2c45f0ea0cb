"""Shared helpers for JSON-Schema shape operations."""

from __future__ import annotations

from .json_types import JSONObject, JSONValue, Schema
from .registry import SchemaRegistry

SCHEMA_REF_PREFIX = "#/components/schemas/"
RESPONSE_REF_PREFIX = "#/components/responses/"


def component_ref(name: str) -> Schema:
    """Return a ``$ref`` to a named component schema."""
    return {"$ref": f"{SCHEMA_REF_PREFIX}{name}"}


def response_ref(name: str) -> Schema:
    """Return a ``$ref`` to a named component response."""
    return {"$ref": f"{RESPONSE_REF_PREFIX}{name}"}


def is_object_schema(schema: JSONObject) -> bool:
    """Return whether a schema is an inline object with its own properties.

    Args:
        schema (JSONObject): Schema node to inspect.

    Returns:
        bool: Whether the node can be promoted to a named component.
    """
    return schema.get("type") == "object" and isinstance(schema.get("properties"), dict)


def title_case(name: str) -> str:
    """Upper-case the first character of a property name."""
    return name[:1].upper() + name[1:]


def extract_nested_types(schema: Schema, prefix: str, registry: SchemaRegistry) -> None:
    """Hoist inline object schemas below ``schema`` into the registry.

    Object properties become ``<prefix><Property>``, object array items become
    ``<prefix><Property>Item`` and object map values become
    ``<prefix><Property>Value``. Each promoted schema is replaced in its parent
    by a ``$ref`` and processed again with its own name as the prefix. A
    derived name that is already registered is referenced as-is.

    Args:
        schema (Schema): Schema to rewrite in place.
        prefix (str): Name prefix for promoted schemas.
        registry (SchemaRegistry): Registry receiving promoted schemas.
    """
    if schema.get("type") != "object":
        return
    properties = schema.get("properties")
    if not isinstance(properties, dict):
        return

    for property_name, property_schema in list(properties.items()):
        if not isinstance(property_schema, dict):
            continue
        type_name = f"{prefix}{title_case(property_name)}"

        if is_object_schema(property_schema):
            properties[property_name] = _promote(property_schema, type_name, registry)
            continue

        if property_schema.get("type") == "array":
            _promote_child(property_schema, "items", f"{type_name}Item", registry)
        elif property_schema.get("type") == "object":
            _promote_child(
                property_schema, "additionalProperties", f"{type_name}Value", registry
            )


def _promote_child(parent: Schema, key: str, type_name: str, registry: SchemaRegistry) -> None:
    child: JSONValue = parent.get(key)
    if isinstance(child, dict) and is_object_schema(child):
        parent[key] = _promote(child, type_name, registry)


def _promote(schema: Schema, type_name: str, registry: SchemaRegistry) -> Schema:
    if not registry.has(type_name):
        registry.register(type_name, schema)
        extract_nested_types(schema, type_name, registry)
    return component_ref(type_name)
