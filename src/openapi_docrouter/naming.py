"""Naming helpers for operations, paths and path parameters."""

from __future__ import annotations

import re

HTTP_METHODS: tuple[str, ...] = (
    "get",
    "put",
    "post",
    "delete",
    "patch",
    "head",
    "options",
    "trace",
)
BODY_METHODS: frozenset[str] = frozenset({"post", "put", "patch"})

_PATH_PARAM_RE = re.compile(r"^\{(?P<name>[^{}]+)\}$")
_UNSUPPORTED_PATH_CHARS: tuple[str, ...] = ("(", "^")


def normalize_method(method: str) -> str:
    """Return the lower-case OpenAPI operation key for an HTTP method."""
    return method.strip().lower()


def route_id(method: str, path: str) -> str:
    """Key used to associate pre-registered responses with a route."""
    return f"{normalize_method(method)}:{path}"


def is_documentable_path(path: str) -> bool:
    """Return whether a path can be expressed as an OpenAPI path template."""
    return not any(char in path for char in _UNSUPPORTED_PATH_CHARS)


def extract_path_params(path: str) -> list[str]:
    """Return ``{name}`` placeholder names in the order they appear."""
    params: list[str] = []
    for segment in path.split("/"):
        match = _PATH_PARAM_RE.match(segment)
        if match:
            params.append(match.group("name"))
    return params


def operation_id(method: str, path: str) -> str:
    """Derive the base operation id, e.g. ``get_todos_{id}`` for ``GET /todos/{id}``."""
    segments = [segment for segment in path.split("/") if segment]
    return f"{normalize_method(method)}_{'_'.join(segments) or 'root'}"


class OperationIdAllocator:
    """Hand out operation ids that are unique within one document."""

    def __init__(self) -> None:
        self._used: set[str] = set()

    def allocate(self, method: str, path: str) -> str:
        """Return the base id for a route, suffixed with a counter on collision."""
        base = operation_id(method, path)
        candidate = base
        counter = 2
        while candidate in self._used:
            candidate = f"{base}_{counter}"
            counter += 1
        self._used.add(candidate)
        return candidate
