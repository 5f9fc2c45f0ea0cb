"""Shared pytest fixtures."""

from __future__ import annotations

from types import ModuleType

import pytest

from fixture_helpers import load_todo_app


@pytest.fixture()
def todo_app() -> ModuleType:
    """The todo application fixture module."""
    return load_todo_app()
