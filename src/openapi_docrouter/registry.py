"""Named schema storage for one document generation pass."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Optional

from .json_types import Schema


class SchemaRegistry:
    """Track named schemas so that generated documents can reference them."""

    def __init__(self) -> None:
        self._schemas: dict[str, Schema] = {}

    def register(self, name: str, schema: Schema) -> None:
        """Store a schema under a name, replacing any previous entry."""
        self._schemas[name] = schema

    def has(self, name: str) -> bool:
        """Return whether a schema is registered under ``name``."""
        return name in self._schemas

    def get(self, name: str) -> Optional[Schema]:
        """Return the schema registered under ``name``, if any."""
        return self._schemas.get(name)

    def all_schemas(self) -> dict[str, Schema]:
        """Return a shallow copy of every registered schema keyed by name."""
        return dict(self._schemas)

    def __contains__(self, name: str) -> bool:
        return name in self._schemas

    def __iter__(self) -> Iterator[str]:
        return iter(self._schemas)

    def __len__(self) -> int:
        return len(self._schemas)
