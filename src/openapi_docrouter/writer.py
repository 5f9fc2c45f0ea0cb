"""Serialization and filesystem writers for generated documents."""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from .json_types import JSONObject

SUPPORTED_FORMATS: tuple[str, ...] = ("json", "yaml")


class DocumentSerializationError(RuntimeError):
    """Raised when a generated document cannot be serialized."""


class WriteError(RuntimeError):
    """Raised when output files cannot be written."""


class _NoAliasSafeDumper(yaml.SafeDumper):
    """Safe dumper that repeats shared nodes instead of emitting anchors."""

    def ignore_aliases(self, data: JSONObject) -> bool:
        return True


def dump_document(document: JSONObject, *, fmt: str = "json") -> str:
    """Serialize a document as indented JSON or YAML.

    Args:
        document (JSONObject): Document to serialize.
        fmt (str): Either ``"json"`` or ``"yaml"``.

    Returns:
        str: Serialized document text.
    """
    if fmt not in SUPPORTED_FORMATS:
        raise DocumentSerializationError(f"Unsupported output format: {fmt}")
    try:
        if fmt == "yaml":
            return yaml.dump(
                document,
                Dumper=_NoAliasSafeDumper,
                sort_keys=False,
                allow_unicode=True,
            )
        return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError, yaml.YAMLError) as exc:
        raise DocumentSerializationError(f"failed to serialize document: {exc}") from exc


def infer_format(path: Path) -> str:
    """Pick an output format from a file suffix, defaulting to JSON."""
    if path.suffix.lower() in {".yaml", ".yml"}:
        return "yaml"
    return "json"


def write_document(document: JSONObject, path: Path, *, fmt: str) -> Path:
    """Serialize and write a document, creating parent directories.

    Args:
        document (JSONObject): Document to write.
        path (Path): Destination file.
        fmt (str): Either ``"json"`` or ``"yaml"``.

    Returns:
        Path: The written file path.
    """
    text = dump_document(document, fmt=fmt)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as exc:
        raise WriteError(f"Failed to write {path}: {exc}") from exc
    return path
