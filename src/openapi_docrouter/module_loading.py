"""Helpers for loading application modules that declare routes."""

from __future__ import annotations

import importlib.util
from pathlib import Path
import sys
from types import ModuleType

from .router import DocRouter

DEFAULT_ROUTER_ATTRIBUTE = "router"


class ModuleLoadError(RuntimeError):
    """Raised when an application module or its router cannot be loaded."""


def load_module_from_path(*, module_name: str, module_path: Path) -> ModuleType:
    """Load a module from file path and register it in ``sys.modules``.

    Registration happens before execution so that dataclasses and pydantic
    models in the module can resolve their own forward references.

    Args:
        module_name (str): Temporary import name for the module.
        module_path (Path): File system path to the Python module.

    Returns:
        ModuleType: Imported Python module object.
    """
    spec = importlib.util.spec_from_file_location(module_name, module_path)
    if spec is None or spec.loader is None:
        raise ModuleLoadError(f"Unable to import module from: {module_path}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception:
        sys.modules.pop(module_name, None)
        raise
    return module


def parse_app_target(target: str) -> tuple[Path, str]:
    """Split ``path/to/app.py:attribute`` into a path and attribute name."""
    path_text, separator, attribute = target.rpartition(":")
    if not separator or not path_text.endswith(".py"):
        return Path(target), DEFAULT_ROUTER_ATTRIBUTE
    return Path(path_text), attribute or DEFAULT_ROUTER_ATTRIBUTE


def load_router(target: str) -> DocRouter:
    """Load the ``DocRouter`` named by an ``app.py:attribute`` target.

    The attribute may be a router instance or a zero-argument factory
    returning one.
    """
    module_path, attribute = parse_app_target(target)
    if not module_path.is_file():
        raise ModuleLoadError(f"Application module not found: {module_path}")

    module_name = f"openapi_docrouter_app_{module_path.stem}"
    try:
        module = load_module_from_path(module_name=module_name, module_path=module_path)
    except ModuleLoadError:
        raise
    except Exception as exc:
        raise ModuleLoadError(f"Failed to import {module_path}: {exc}") from exc

    value = getattr(module, attribute, None)
    if callable(value) and not isinstance(value, DocRouter):
        try:
            value = value()
        except Exception as exc:
            raise ModuleLoadError(f"{module_path}:{attribute} factory failed: {exc}") from exc
    if not isinstance(value, DocRouter):
        raise ModuleLoadError(
            f"{module_path}:{attribute} must be a DocRouter, got {type(value)!r}"
        )
    return value
