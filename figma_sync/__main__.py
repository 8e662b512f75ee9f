"""CLI entry point for figma-sync.

Commands:
    audit      Compare the schema with the manifest and write drift reports
    templates  Render Code Connect templates for every schema component
    validate   Load the schema (and optionally the manifest) and report errors
    env        List the environment variables and their resolved values
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from figma_sync.config import (
    EnvVar,
    get_environment,
    get_environment_info,
    list_environment_variables,
    loader_config_from_environment,
)
from figma_sync.core import ParseError, get_logger, setup_logging
from figma_sync.manifest import parse_manifest
from figma_sync.pipeline import render_templates, run_audit, write_report, write_templates
from figma_sync.report import exit_code_for
from figma_sync.schema import parse_schema

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")

REPORT_JSON_NAME = "drift-report.json"
REPORT_MD_NAME = "drift-report.md"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _document_options(parser: argparse.ArgumentParser, manifest_required: bool = True) -> None:
    """Add the --schema/--manifest/--strict options shared by all commands."""
    parser.add_argument(
        "--schema",
        type=Path,
        default=None,
        help=f"Schema document (default: ${EnvVar.SCHEMA_PATH.value.name})",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        default=None,
        help=(
            f"Manifest document (default: ${EnvVar.MANIFEST_PATH.value.name})"
            if manifest_required
            else "Manifest document to validate as well"
        ),
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help=f"Reject unknown document keys (default: ${EnvVar.STRICT.value.name})",
    )


# =============================================================================
# Audit Command
# =============================================================================


def cmd_audit(args: argparse.Namespace) -> int:
    """Audit schema against manifest and write both report forms."""
    schema_path = get_environment(EnvVar.SCHEMA_PATH, args.schema)
    manifest_path = get_environment(EnvVar.MANIFEST_PATH, args.manifest)
    reports_dir = get_environment(EnvVar.REPORTS_DIR)
    json_path = args.report_json or reports_dir / REPORT_JSON_NAME
    md_path = args.report_md or reports_dir / REPORT_MD_NAME

    try:
        report = run_audit(
            _read(schema_path),
            _read(manifest_path),
            loader_config_from_environment(args.strict),
        )
    except (OSError, ParseError) as e:
        logger.error(f"Audit failed: {e}")
        return 2

    try:
        write_report(report, json_path, md_path)
    except OSError as e:
        logger.error(f"Could not write report: {e}")
        return 2
    logger.info(f"Wrote {json_path}")
    logger.info(f"Wrote {md_path}")

    for warning in report.warnings:
        logger.warning(warning)
    if report.has_issues:
        logger.error(f"Drift detected: {len(report.issues)} issue(s)")
    else:
        logger.info("No drift detected")
    return exit_code_for(report)


# =============================================================================
# Templates Command
# =============================================================================


def cmd_templates(args: argparse.Namespace) -> int:
    """Render templates for every schema component."""
    schema_path = get_environment(EnvVar.SCHEMA_PATH, args.schema)
    manifest_path = get_environment(EnvVar.MANIFEST_PATH, args.manifest)
    out_dir = get_environment(EnvVar.TEMPLATES_DIR, args.out_dir)
    config = loader_config_from_environment(args.strict)

    try:
        schema = parse_schema(_read(schema_path), config)
        manifest = parse_manifest(_read(manifest_path), config)
    except (OSError, ParseError) as e:
        logger.error(f"Template generation failed: {e}")
        return 2

    batch = render_templates(schema, manifest, workers=args.workers)
    try:
        written = write_templates(batch.artifacts, out_dir)
    except OSError as e:
        logger.error(f"Could not write templates: {e}")
        return 2
    for path in written:
        logger.info(f"Wrote {path}")

    if batch.has_failures:
        for failure in batch.failures:
            logger.error(f"  {failure.component_name}: {failure.reason}")
        logger.error(f"{len(batch.failures)} component(s) could not be rendered")
        return 1
    return 0


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Load documents and report the first problem of each."""
    schema_path = get_environment(EnvVar.SCHEMA_PATH, args.schema)
    config = loader_config_from_environment(args.strict)
    status = 0

    try:
        schema = parse_schema(_read(schema_path), config)
        logger.info(f"{schema_path}: OK ({len(schema.components)} component(s))")
    except (OSError, ParseError) as e:
        logger.error(f"{schema_path}: {e}")
        for problem in getattr(e, "problems", [])[1:]:
            logger.error(f"  {problem.path or '<root>'}: {problem.message}")
        status = 1

    if args.manifest is not None:
        try:
            manifest = parse_manifest(_read(args.manifest), config)
            logger.info(f"{args.manifest}: OK ({len(manifest.entries)} entr(y/ies))")
        except (OSError, ParseError) as e:
            logger.error(f"{args.manifest}: {e}")
            for problem in getattr(e, "problems", [])[1:]:
                logger.error(f"  {problem.path or '<root>'}: {problem.message}")
            status = 1

    return status


# =============================================================================
# Env Command
# =============================================================================


def cmd_env(_args: argparse.Namespace) -> int:
    """List environment variables with their resolved values."""
    for var in list_environment_variables():
        info = get_environment_info(var)
        logger.info(f"{info.name} [{info.category}] = {get_environment(var)}")
        logger.info(f"    {info.description}")
    return 0


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="figma-sync",
        description="Schema/manifest drift auditing and Code Connect template generation",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help=f"Log level (default: ${EnvVar.LOG_LEVEL.value.name})",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # audit command
    audit_parser = subparsers.add_parser(
        "audit",
        help="Compare schema with manifest and write drift reports",
    )
    _document_options(audit_parser)
    audit_parser.add_argument(
        "--report-json",
        type=Path,
        default=None,
        help=f"JSON report path (default: <reports dir>/{REPORT_JSON_NAME})",
    )
    audit_parser.add_argument(
        "--report-md",
        type=Path,
        default=None,
        help=f"Markdown report path (default: <reports dir>/{REPORT_MD_NAME})",
    )
    audit_parser.set_defaults(func=cmd_audit)

    # templates command
    templates_parser = subparsers.add_parser(
        "templates",
        help="Render Code Connect templates",
    )
    _document_options(templates_parser)
    templates_parser.add_argument(
        "--out-dir",
        "-o",
        type=Path,
        default=None,
        help=f"Output directory (default: ${EnvVar.TEMPLATES_DIR.value.name})",
    )
    templates_parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of rendering threads (default: 1)",
    )
    templates_parser.set_defaults(func=cmd_templates)

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate schema and manifest documents",
    )
    _document_options(validate_parser, manifest_required=False)
    validate_parser.set_defaults(func=cmd_validate)

    # env command
    env_parser = subparsers.add_parser(
        "env",
        help="List environment variables",
    )
    env_parser.set_defaults(func=cmd_env)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else argv)

    setup_logging(get_environment(EnvVar.LOG_LEVEL, args.log_level))

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
