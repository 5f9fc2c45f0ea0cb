"""Command line interface for OpenAPI document generation."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional

from .generator import run_generation
from .inspector import SchemaGenerationError
from .module_loading import ModuleLoadError
from .verify import format_report
from .writer import SUPPORTED_FORMATS, DocumentSerializationError, WriteError, infer_format


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="openapi-docrouter",
        description="Generate an OpenAPI document from documented route declarations",
    )
    parser.add_argument(
        "--app",
        required=True,
        help="Application module and router attribute, e.g. app.py:router",
    )
    parser.add_argument("--output", required=True, help="Path of the document to write")
    parser.add_argument(
        "--format",
        choices=SUPPORTED_FORMATS,
        default=None,
        help="Output format (defaults to the output file suffix, then json)",
    )
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Validate the generated document and its references",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    output_path = Path(args.output)
    fmt = args.format or infer_format(output_path)

    try:
        run = run_generation(
            app_target=args.app,
            output_path=output_path,
            fmt=fmt,
            verify=bool(args.verify),
        )
    except (
        ModuleLoadError,
        SchemaGenerationError,
        DocumentSerializationError,
        WriteError,
    ) as exc:
        parser.error(str(exc))
        return 2

    for warning in run.result.warnings:
        print(f"Warning: {warning}")

    if run.verification_report is not None:
        print(format_report(run.verification_report))
        if run.verification_report.issue_count > 0:
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
