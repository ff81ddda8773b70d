# File: dtoschema/cli.py
"""
DTOSchema - Command-Line Interface
===================================

Validates JSON / YAML data files against a schema document.  Built on the
standard-library ``argparse`` module.

Usage examples::

    # Validate one file as a "post"
    python -m dtoschema --schema schema.yaml --type post post.json

    # Several files, machine-readable output
    dtoschema -s schema.yaml -t post a.json b.yaml --format json

    # Only check types and required fields
    dtoschema -s schema.yaml -t post post.json --structure-only

    # Only load and resolve the schema
    dtoschema -s schema.yaml --check-schema

Exit codes:
    0: every file is valid
    1: at least one file is invalid
    2: schema definition error
    4: input/argument error
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, NoReturn, Optional, Sequence, Tuple

from dtoschema.exceptions import SchemaDefinitionError
from dtoschema.loader import load_data_file, load_schema
from dtoschema.models import OutputFormat
from dtoschema.report import ValidationReport
from dtoschema.schema import Schema
from dtoschema.utils import Timer

# ---------------------------------------------------------------------------
# Logger (configured in _setup_logging)
# ---------------------------------------------------------------------------
logger: logging.Logger = logging.getLogger("dtoschema")


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------

EXIT_SUCCESS: int = 0
EXIT_VALIDATION_ERROR: int = 1
EXIT_SCHEMA_ERROR: int = 2
EXIT_INPUT_ERROR: int = 4


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


# Indexed by verbosity + 1: --quiet, default, -v, -vv
_VERBOSITY_LEVELS: Tuple[int, ...] = (
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
    logging.DEBUG,
)


def _setup_logging(verbosity: int) -> None:
    """
    Send dtoschema log records to stderr.

    Args:
        verbosity: -1 with ``--quiet``, otherwise the number of ``-v`` flags.
            Values past either end of ``_VERBOSITY_LEVELS`` are clamped.
    """
    index: int = max(0, min(verbosity + 1, len(_VERBOSITY_LEVELS) - 1))
    level: int = _VERBOSITY_LEVELS[index]

    handler: logging.StreamHandler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%H:%M:%S")
    )

    package_logger: logging.Logger = logging.getLogger("dtoschema")
    package_logger.setLevel(level)
    # one handler per cli_main call, even when called repeatedly in-process
    package_logger.handlers[:] = [handler]
    package_logger.propagate = False


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser."""
    from dtoschema import __version__

    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="dtoschema",
        description=(
            "DTOSchema: validate decoded JSON / YAML data against named DTO "
            "types declared in a schema document."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  %(prog)s -s schema.yaml -t post post.json\n"
            "  %(prog)s -s schema.yaml -t post a.json b.yaml --format json\n"
            "  %(prog)s -s schema.yaml --check-schema\n"
        ),
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"DTOSchema v{__version__}",
    )

    parser.add_argument(
        "-s", "--schema",
        type=str,
        required=True,
        metavar="PATH",
        help="Path to the schema document (JSON or YAML).",
    )
    parser.add_argument(
        "-t", "--type",
        dest="dto_type",
        type=str,
        default=None,
        metavar="NAME",
        help="DTO type to validate the data as. Required unless --check-schema is set.",
    )
    parser.add_argument(
        "data",
        nargs="*",
        metavar="DATA",
        help="Data files to validate (JSON or YAML; '-' reads JSON from stdin).",
    )

    # --- Modes ---
    mode_group = parser.add_argument_group("operation modes")
    mode_group.add_argument(
        "--check-schema",
        action="store_true",
        default=False,
        help="Only load and resolve the schema.",
    )
    mode_group.add_argument(
        "--structure-only",
        action="store_true",
        default=False,
        help="Only check types and required fields, skip checks and invariants.",
    )

    # --- Output ---
    output_group = parser.add_argument_group("output")
    output_group.add_argument(
        "--format",
        dest="output_format",
        type=str,
        default=OutputFormat.TEXT.value,
        choices=[f.value for f in OutputFormat],
        help="Report format (default: text).",
    )

    # --- Verbosity ---
    verbosity_group = parser.add_argument_group("verbosity")
    verbosity_group.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v for INFO, -vv for DEBUG).",
    )
    verbosity_group.add_argument(
        "-q", "--quiet",
        action="store_true",
        default=False,
        help="Suppress all output except errors.",
    )

    return parser


# ---------------------------------------------------------------------------
# Modes
# ---------------------------------------------------------------------------


def _run_check_schema(schema: Schema, schema_path: Path) -> int:
    print(
        f"{schema_path.name}: OK "
        f"({len(schema.validator_names)} type(s), {len(schema.check_names)} check(s))"
    )
    for name in schema.validator_names:
        print(f"  - {name}")
    return EXIT_SUCCESS


def _validate_file(
    schema: Schema,
    dto_type: str,
    data_path: str,
    structure_only: bool,
) -> ValidationReport:
    data: Any = load_data_file(data_path)
    if structure_only:
        ok: bool = schema.is_valid_structure(dto_type, data)
        return ValidationReport(
            dto_type, [] if ok else ["Invalid structure"], source=data_path
        )
    return schema.report(dto_type, data, source=data_path)


def _print_reports(reports: List[ValidationReport], output_format: str) -> None:
    if output_format == OutputFormat.JSON.value:
        payload: List[Dict[str, Any]] = [r.to_dict() for r in reports]
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return
    for report in reports:
        print(report.format_report())


def _run_validation(schema: Schema, args: argparse.Namespace) -> int:
    """
    Validate every data file and print the reports.

    Returns the appropriate exit code.
    """
    reports: List[ValidationReport] = []
    with Timer("validation", unit="file") as timer:
        for data_path in args.data:
            try:
                report: ValidationReport = _validate_file(
                    schema, args.dto_type, data_path, args.structure_only
                )
            except (FileNotFoundError, ValueError) as exc:
                logger.error("Failed to load data: %s", exc)
                return EXIT_INPUT_ERROR
            except RecursionError:
                logger.error("Failed to validate %s: data is nested too deeply.", data_path)
                return EXIT_INPUT_ERROR
            logger.info("%s", report.summary())
            reports.append(report)
            timer.count += 1

    _print_reports(reports, args.output_format)
    if all(r.is_valid for r in reports):
        return EXIT_SUCCESS
    return EXIT_VALIDATION_ERROR


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def cli_main(argv: Optional[Sequence[str]] = None) -> NoReturn:
    """
    Main CLI entry point.

    Can be called from ``__main__.py`` or directly for testing.

    Args:
        argv: Optional argument list (defaults to sys.argv[1:]).
    """
    parser: argparse.ArgumentParser = _build_parser()
    args: argparse.Namespace = parser.parse_args(argv)

    if args.quiet:
        verbosity: int = -1
    else:
        verbosity = args.verbose
    _setup_logging(verbosity)

    schema_path: Path = Path(args.schema).resolve()

    # --- Schema ---
    try:
        with Timer("load schema", unit="type") as timer:
            schema: Schema = load_schema(schema_path)
            timer.count = len(schema.validator_names)
    except FileNotFoundError as exc:
        logger.error("%s", exc)
        sys.exit(EXIT_INPUT_ERROR)
    except SchemaDefinitionError as exc:
        logger.error("Schema error: %s", exc)
        sys.exit(EXIT_SCHEMA_ERROR)

    if args.check_schema:
        sys.exit(_run_check_schema(schema, schema_path))

    # --- Argument validation ---
    if args.dto_type is None or not args.data:
        logger.error(
            "A DTO type and at least one data file are required. "
            "Use -t/--type NAME DATA... or --check-schema."
        )
        parser.print_usage(sys.stderr)
        sys.exit(EXIT_INPUT_ERROR)

    if args.dto_type not in schema:
        logger.error(
            "Unknown DTO type '%s'. Declared types: %s",
            args.dto_type,
            ", ".join(schema.validator_names) or "(none)",
        )
        sys.exit(EXIT_INPUT_ERROR)

    logger.info("Schema:  %s", schema_path)
    logger.info("Type:    %s", args.dto_type)
    logger.info("Files:   %d", len(args.data))

    exit_code: int = _run_validation(schema, args)
    if exit_code == EXIT_SUCCESS:
        logger.info("All files valid.")
    sys.exit(exit_code)


# ---------------------------------------------------------------------------
# Module-level exports
# ---------------------------------------------------------------------------

__all__: List[str] = [
    "cli_main",
    "EXIT_SUCCESS",
    "EXIT_VALIDATION_ERROR",
    "EXIT_SCHEMA_ERROR",
    "EXIT_INPUT_ERROR",
]
