"""Route declarations that carry documentation for OpenAPI generation.

Request dispatch is left to the hosting web framework; ``DocRouter`` only
records what each route accepts and returns.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Optional

from .json_types import Document, MutableJSONObject
from .model_types import DocumentInfo, Example, RouteInfo, RouteResponse, Server, TagInfo
from .naming import route_id
from .openapi import OpenAPIGenerator
from .writer import dump_document


class DocRouter:
    """Collect route documentation and render it as an OpenAPI document."""

    def __init__(self, title: str, description: str = "", version: str = "1.0.0") -> None:
        self.info = DocumentInfo(title=title, description=description, version=version)
        self._routes: list[RouteInfo] = []
        self._servers: list[Server] = []
        self._tags: list[TagInfo] = []
        self._bearer_auth = False
        self._custom_responses: dict[str, MutableJSONObject] = {}
        self._route_responses: dict[str, dict[str, str]] = {}

    @property
    def routes(self) -> tuple[RouteInfo, ...]:
        """Routes registered so far, in declaration order."""
        return tuple(self._routes)

    def with_server(self, url: str, description: str = "") -> DocRouter:
        """Add a server entry."""
        self._servers.append(Server(url=url, description=description))
        return self

    def with_tag(self, name: str, description: str = "") -> DocRouter:
        """Add a tag definition."""
        self._tags.append(TagInfo(name=name, description=description))
        return self

    def with_bearer_auth(self) -> DocRouter:
        """Enable the JWT bearer security scheme."""
        self._bearer_auth = True
        return self

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
        """Associate a registered response with one route and status code."""
        self._route_responses.setdefault(route_id(method, path), {})[str(status_code)] = (
            response_name
        )

    def route(
        self,
        method: str,
        path: str,
        handler: Optional[Callable[..., Any]] = None,
    ) -> RouteConfig:
        """Start declaring a route."""
        return RouteConfig(self, method=method, path=path, handler=handler)

    def add_route(self, route: RouteInfo) -> None:
        """Record a fully built route declaration."""
        self._routes.append(route)

    def build_generator(self) -> OpenAPIGenerator:
        """Return a generator with its own schema registry for the current routes."""
        return OpenAPIGenerator(
            info=self.info,
            routes=self._routes,
            servers=self._servers,
            tags=self._tags,
            bearer_auth=self._bearer_auth,
            responses=self._custom_responses,
            route_responses=self._route_responses,
        )

    def openapi(self) -> Document:
        """Generate the OpenAPI document."""
        return self.build_generator().generate()

    def openapi_json(self) -> str:
        """Generate the OpenAPI document as indented JSON."""
        return dump_document(self.openapi(), fmt="json")

    def openapi_yaml(self) -> str:
        """Generate the OpenAPI document as YAML."""
        return dump_document(self.openapi(), fmt="yaml")


class RouteConfig:
    """Chainable builder for one route declaration."""

    def __init__(
        self,
        router: DocRouter,
        *,
        method: str,
        path: str,
        handler: Optional[Callable[..., Any]] = None,
    ) -> None:
        self._router = router
        self._method = method
        self._path = path
        self._handler = handler
        self._name = ""
        self._description = ""
        self._request_type: Any = None
        self._response_type: Any = None
        self._responses: dict[str, RouteResponse] = {}
        self._tags: tuple[str, ...] = ()
        self._secured = False

    def with_name(self, name: str) -> RouteConfig:
        """Set the operation summary."""
        self._name = name
        return self

    def with_description(self, description: str) -> RouteConfig:
        """Set the operation description."""
        self._description = description
        return self

    def with_request(self, request_type: Any) -> RouteConfig:
        """Set the request body type or example value."""
        self._request_type = request_type
        return self

    def with_response(self, response_type: Any) -> RouteConfig:
        """Set the success response type or example value."""
        self._response_type = response_type
        return self

    def with_error_response(
        self,
        status_code: str | int,
        description: str,
        schema: Any = None,
        *examples: Example,
    ) -> RouteConfig:
        """Document a non-default response for one status code."""
        code = str(status_code)
        self._responses[code] = RouteResponse(
            status_code=code,
            description=description,
            schema=schema,
            examples=tuple(examples),
        )
        return self

    def with_tags(self, *tags: str) -> RouteConfig:
        """Set the operation tags."""
        self._tags = tags
        return self

    def with_security(self) -> RouteConfig:
        """Mark the route as requiring bearer authentication."""
        self._secured = True
        return self

    def build(self) -> RouteInfo:
        """Return the route declaration without registering it."""
        return RouteInfo(
            method=self._method,
            path=self._path,
            name=self._name,
            description=self._description,
            handler=self._handler,
            request_type=self._request_type,
            response_type=self._response_type,
            responses=dict(self._responses),
            tags=self._tags,
            secured=self._secured,
        )

    def register(self) -> RouteInfo:
        """Record the route on its router and return the declaration."""
        route = self.build()
        self._router.add_route(route)
        return route
