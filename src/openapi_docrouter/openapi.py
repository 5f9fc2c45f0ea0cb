"""Assemble OpenAPI 3.0 documents from route declarations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Optional

from .inspector import inspect_value, type_name
from .json_types import Document, JSONValue, MutableJSONObject, Schema
from .model_types import DocumentInfo, RouteInfo, RouteResponse, Server, TagInfo, TypeKind
from .naming import (
    BODY_METHODS,
    HTTP_METHODS,
    OperationIdAllocator,
    extract_path_params,
    is_documentable_path,
    normalize_method,
    route_id,
)
from .registry import SchemaRegistry
from .schema import generate_schema
from .schema_utils import component_ref, extract_nested_types, response_ref

logger = logging.getLogger(__name__)

OPENAPI_VERSION = "3.0.0"
JSON_MEDIA_TYPE = "application/json"
SUCCESS_STATUS = "200"
BEARER_SCHEME_NAME = "bearerAuth"


class OpenAPIGenerator:
    """Generate an OpenAPI document for a fixed set of routes.

    Every generator owns its own ``SchemaRegistry``; instances must not be
    shared between concurrent generation calls.
    """

    def __init__(
        self,
        *,
        info: DocumentInfo,
        routes: Iterable[RouteInfo],
        servers: Iterable[Server] = (),
        tags: Iterable[TagInfo] = (),
        bearer_auth: bool = False,
        responses: Optional[Mapping[str, MutableJSONObject]] = None,
        route_responses: Optional[Mapping[str, Mapping[str, str]]] = None,
    ) -> None:
        self.info = info
        self.routes = tuple(routes)
        self.servers = tuple(servers)
        self.tags = tuple(tags)
        self.bearer_auth = bearer_auth
        self._registry = SchemaRegistry()
        self._custom_responses: dict[str, MutableJSONObject] = dict(responses or {})
        self._route_responses: dict[str, dict[str, str]] = {
            key: dict(value) for key, value in (route_responses or {}).items()
        }
        self._warnings: list[str] = []

    @property
    def registry(self) -> SchemaRegistry:
        """Schema registry filled by this generator."""
        return self._registry

    @property
    def warnings(self) -> tuple[str, ...]:
        """Warnings collected by the most recent ``generate`` call."""
        return tuple(self._warnings)

    def register_response(self, name: str, response: MutableJSONObject) -> None:
        """Add a reusable response under ``components.responses``."""
        self._custom_responses[name] = response

    def register_route_response(
        self,
        path: str,
        method: str,
        status_code: str,
        response_name: str,
    ) -> None:
        """Reference a registered response from one route and status code."""
        self._route_responses.setdefault(route_id(method, path), {})[str(status_code)] = (
            response_name
        )

    def generate(self) -> Document:
        """Build the OpenAPI document.

        Returns:
            Document: JSON-compatible OpenAPI 3.0 document.
        """
        self._warnings = []
        paths = self._generate_paths()

        document: Document = {
            "openapi": OPENAPI_VERSION,
            "info": self.info.to_json(),
        }
        if self.servers:
            document["servers"] = [
                {"url": server.url, "description": server.description} for server in self.servers
            ]
        if self.tags:
            document["tags"] = [
                {"name": tag.name, "description": tag.description} for tag in self.tags
            ]
        if self.bearer_auth:
            document["security"] = _bearer_requirement()
        document["paths"] = paths
        document["components"] = self._generate_components()
        return document

    def schema_ref(self, value: Any) -> Optional[Schema]:
        """Return a reference to the schema of ``value``, registering it on first use.

        Anonymous shapes (for example ``list[Todo]`` or ``dict[str, int]``) are
        returned inline together with the objects nested inside them and never
        add registry entries.
        """
        if value is None:
            return None

        name = type_name(value)
        if not name:
            return generate_schema(value)

        if not self._registry.has(name):
            schema = generate_schema(value)
            if schema is None:
                return None
            self._registry.register(name, schema)
            extract_nested_types(schema, name, self._registry)
        return component_ref(name)

    def _generate_paths(self) -> MutableJSONObject:
        paths: dict[str, MutableJSONObject] = {}
        allocator = OperationIdAllocator()

        for route in self.routes:
            method = normalize_method(route.method)
            if not is_documentable_path(route.path):
                self._warn(f"Skipping route {route.method} {route.path}: path uses a pattern")
                continue
            if method not in HTTP_METHODS:
                self._warn(f"Skipping route {route.method} {route.path}: unsupported method")
                continue

            path_item = paths.setdefault(route.path, {})
            previous = path_item.get(method)
            if isinstance(previous, dict):
                self._warn(f"Route {route.method} {route.path} is declared more than once")
                op_id = str(previous["operationId"])
            else:
                op_id = allocator.allocate(method, route.path)
            path_item[method] = self._generate_operation(
                route,
                method=method,
                operation_id=op_id,
            )

        return dict(paths)

    def _generate_operation(
        self,
        route: RouteInfo,
        *,
        method: str,
        operation_id: str,
    ) -> MutableJSONObject:
        operation: MutableJSONObject = {}
        if route.name:
            operation["summary"] = route.name
        if route.description:
            operation["description"] = route.description
        operation["operationId"] = operation_id
        if route.tags:
            operation["tags"] = list(route.tags)
        if route.secured and self.bearer_auth:
            operation["security"] = _bearer_requirement()

        parameters = _path_parameters(extract_path_params(route.path))
        if parameters:
            operation["parameters"] = parameters

        if route.request_type is not None and method in BODY_METHODS:
            operation["requestBody"] = self._generate_request_body(route)

        operation["responses"] = self._generate_responses(route)
        return operation

    def _generate_request_body(self, route: RouteInfo) -> MutableJSONObject:
        return {
            "description": f"request body for {route.name or route.path}",
            "required": True,
            "content": {JSON_MEDIA_TYPE: {"schema": self.schema_ref(route.request_type)}},
        }

    def _generate_responses(self, route: RouteInfo) -> MutableJSONObject:
        responses: MutableJSONObject = {}

        if route.response_type is not None:
            schema = self._success_schema(route.response_type)
            responses[SUCCESS_STATUS] = {
                "description": "Successful response",
                "content": {JSON_MEDIA_TYPE: {"schema": schema}},
            }

        for status_code, response in route.responses.items():
            responses[str(status_code)] = self._declared_response(response)

        for status_code, response_name in self._route_responses.get(
            route_id(route.method, route.path), {}
        ).items():
            if status_code in responses:
                continue
            responses[status_code] = response_ref(response_name)

        if not responses:
            responses[SUCCESS_STATUS] = {"description": "successful operation"}
        return responses

    def _success_schema(self, response_type: Any) -> Optional[Schema]:
        descriptor = inspect_value(response_type)
        if descriptor is None or descriptor.kind is not TypeKind.SEQUENCE:
            return self.schema_ref(response_type)

        element = descriptor.element
        if element is None or element.kind is not TypeKind.STRUCT or not element.name:
            return self.schema_ref(response_type)

        self.schema_ref(element.python_type)
        array_name = f"array_{element.name}"
        if not self._registry.has(array_name):
            self._registry.register(
                array_name,
                {"type": "array", "items": component_ref(element.name)},
            )
        return component_ref(array_name)

    def _declared_response(self, response: RouteResponse) -> MutableJSONObject:
        declared: MutableJSONObject = {"description": response.description}
        schema = self.schema_ref(response.schema)
        if schema is None:
            return declared

        media: MutableJSONObject = {"schema": schema}
        if response.examples:
            media["examples"] = {
                f"example{index}": {"value": example.value}
                for index, example in enumerate(response.examples, start=1)
            }
        declared["content"] = {JSON_MEDIA_TYPE: media}
        return declared

    def _generate_components(self) -> MutableJSONObject:
        schemas: dict[str, JSONValue] = dict(self._registry.all_schemas())
        components: MutableJSONObject = {"schemas": schemas}
        if self._custom_responses:
            components["responses"] = dict(self._custom_responses)
        if self.bearer_auth:
            components["securitySchemes"] = {
                BEARER_SCHEME_NAME: {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT",
                    "description": "JWT token for authentication",
                }
            }
        return components

    def _warn(self, message: str) -> None:
        logger.warning(message)
        self._warnings.append(message)


def _path_parameters(params: list[str]) -> list[JSONValue]:
    return [
        {
            "name": param,
            "in": "path",
            "required": True,
            "schema": {"type": "string"},
            "description": f"{param} parameter",
        }
        for param in params
    ]


def _bearer_requirement() -> list[JSONValue]:
    return [{BEARER_SCHEME_NAME: []}]
