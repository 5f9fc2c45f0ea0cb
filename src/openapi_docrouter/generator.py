"""High-level generator orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .model_types import GenerationResult
from .module_loading import load_router
from .verify import VerificationReport, verify_document
from .writer import write_document


@dataclass(frozen=True)
class GenerationRun:
    """Generation result with optional verification report."""

    result: GenerationResult
    verification_report: Optional[VerificationReport]


def run_generation(
    *,
    app_target: str,
    output_path: Path,
    fmt: str,
    verify: bool,
) -> GenerationRun:
    """Generate an OpenAPI document for the routes of an application module.

    Args:
        app_target (str): ``path/to/app.py:attribute`` naming a ``DocRouter``.
        output_path (Path): File the document is written to.
        fmt (str): Output format, ``"json"`` or ``"yaml"``.
        verify (bool): Whether to verify the document after generation.

    Returns:
        GenerationRun: Generation metadata and optional verification report.
    """
    router = load_router(app_target)
    generator = router.build_generator()
    document = generator.generate()
    write_document(document, output_path, fmt=fmt)

    result = GenerationResult(
        output_path=str(output_path),
        schema_names=tuple(generator.registry),
        warnings=generator.warnings,
    )

    if not verify:
        return GenerationRun(result=result, verification_report=None)

    return GenerationRun(result=result, verification_report=verify_document(document))


__all__ = [
    "GenerationRun",
    "run_generation",
]
