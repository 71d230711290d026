"""
Entry points for scheduled triggers.

Usage:
    confluence-notifier run confluence-update-notify   # Run one job
    confluence-notifier run-all                        # Run every job in turn
    confluence-notifier page 12345                     # Print a page as JSON (debugging)
    confluence-notifier validate [-v]                  # Validate configuration
    confluence-notifier show                           # Show configuration (secrets masked)

Serverless hosts call handler(event, context) with {"job": "<job name>"};
without a job every job runs.
"""

import argparse
import json
import sys
from datetime import datetime
from typing import Any

from notifier_config import ConfigStatus, ConfigurationError, Settings, ValidationResult
from notifier_logging import ContextScope, context_from_env, get_logger

from .context import RunContext
from .errors import ConfluenceApiError
from .jobs import JobOutcome, create_job
from .routes import JobName, parse_job_name
from .transport import HttpTransport


logger = get_logger("confluence-notifier")


def run_job(
    job: JobName | str,
    settings: Settings | None = None,
    transport: HttpTransport | None = None,
    now: datetime | None = None,
) -> JobOutcome:
    """Run a single job with freshly loaded configuration.

    Raises:
        ConfigurationError: If configuration is missing or invalid
        ValueError: If the job name is unknown
    """
    job = job if isinstance(job, JobName) else parse_job_name(job)
    ctx = RunContext.from_settings(settings or Settings.load(), transport=transport)
    try:
        return create_job(job, ctx).run(now)
    finally:
        ctx.close()


def run_all(
    settings: Settings | None = None,
    transport: HttpTransport | None = None,
    now: datetime | None = None,
) -> dict[str, JobOutcome]:
    """Run every job in one shared context.

    Raises:
        ConfigurationError: If configuration is missing or invalid
    """
    ctx = RunContext.from_settings(settings or Settings.load(), transport=transport)
    try:
        return {job.value: create_job(job, ctx).run(now) for job in JobName}
    finally:
        ctx.close()


def handler(event: dict[str, Any] | None, context: Any = None) -> dict[str, Any]:
    """Serverless entry point.

    Args:
        event: Trigger payload, optionally {"job": "<job name>"}
        context: Platform context object (unused)

    Returns:
        {"statusCode": ..., "results": {job: outcome}} or an error body
    """
    event = event or {}
    job_name = event.get("job")

    with ContextScope(run_id=context_from_env().run_id):
        try:
            if job_name:
                results = {parse_job_name(job_name).value: run_job(job_name)}
            else:
                results = run_all()
        except ConfigurationError as e:
            logger.error("Configuration error", error=str(e), keys=e.keys)
            return {"statusCode": 500, "error": str(e), "keys": e.keys}
        except ValueError as e:
            logger.error("Invalid event", error=str(e), job=job_name)
            return {"statusCode": 400, "error": str(e)}

    failed = any(outcome is JobOutcome.FAILED for outcome in results.values())
    return {
        "statusCode": 500 if failed else 200,
        "results": {name: outcome.value for name, outcome in results.items()},
    }


def cmd_run(args: argparse.Namespace) -> int:
    """Run one job and return exit code."""
    outcome = run_job(args.job)
    print(f"{args.job}: {outcome.value}")
    return 1 if outcome is JobOutcome.FAILED else 0


def cmd_run_all(args: argparse.Namespace) -> int:
    """Run every job and return exit code."""
    results = run_all()
    for name, outcome in results.items():
        print(f"{name}: {outcome.value}")
    return 1 if JobOutcome.FAILED in results.values() else 0


def cmd_page(args: argparse.Namespace) -> int:
    """Print one page as returned by Confluence."""
    job = parse_job_name(args.job)
    ctx = RunContext.from_settings(Settings.load())
    try:
        page = ctx.confluence_client(job).get_page(args.page_id, expand=args.expand)
    except ConfluenceApiError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        ctx.close()

    print(json.dumps(page, indent=2, ensure_ascii=False))
    return 0


def _print_validation_result(name: str, result: ValidationResult, *, verbose: bool = False) -> None:
    """Print a single validation result."""
    status_icons = {
        ConfigStatus.VALID: "[OK]",
        ConfigStatus.INVALID: "[FAIL]",
    }
    icon = status_icons.get(result.status, "[?]")
    print(f"{icon} {name}: {result.status.value}")

    for error in result.errors:
        print(f"      ERROR: {error}")

    if verbose:
        for warning in result.warnings:
            print(f"      WARNING: {warning}")


def cmd_validate(args: argparse.Namespace) -> int:
    """Validate configurations and return exit code."""
    aggregate = Settings.load().validate_all()

    for name, result in aggregate.results.items():
        _print_validation_result(name, result, verbose=args.verbose)

    if aggregate.all_valid:
        print("\nAll configurations valid.")
        return 0

    print("\nSome configurations have errors.")
    return 1


def cmd_show(args: argparse.Namespace) -> int:
    """Show current configuration (secrets masked)."""
    print(json.dumps(Settings.load().to_dict(), indent=2))
    return 0


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    job_names = [job.value for job in JobName]

    parser = argparse.ArgumentParser(
        prog="confluence-notifier",
        description="Notify Slack about changed Confluence pages.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run one job")
    run_parser.add_argument("job", choices=job_names, help="Job to run")

    subparsers.add_parser("run-all", help="Run every job")

    page_parser = subparsers.add_parser("page", help="Fetch a page by id (debugging)")
    page_parser.add_argument("page_id", help="Confluence page id")
    page_parser.add_argument(
        "--job", "-j", default=JobName.UPDATE_NOTIFY.value, choices=job_names,
        help="Job whose Confluence settings to use",
    )
    page_parser.add_argument("--expand", "-e", default="version", help="Fields to expand")

    validate_parser = subparsers.add_parser("validate", help="Validate configuration")
    validate_parser.add_argument("--verbose", "-v", action="store_true", help="Show warnings")

    subparsers.add_parser("show", help="Show current configuration")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, 1 for a failed job, 2 for bad configuration)
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    commands = {
        "run": cmd_run,
        "run-all": cmd_run_all,
        "page": cmd_page,
        "validate": cmd_validate,
        "show": cmd_show,
    }

    try:
        with ContextScope(run_id=context_from_env().run_id):
            return commands[args.command](args)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
