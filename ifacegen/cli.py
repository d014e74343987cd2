"""CLI entrypoints for ifacegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .analyzers import ParseError
from .config import FORMATTER_CHOICES, ConfigError
from .logging import configure_logging
from .models import RunReport
from .orchestrator import Orchestrator
from .postproc.formatter import FormatError


def _add_common_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only report warnings and errors.",
    )


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Root directory to scan (defaults to current directory).",
    )
    parser.add_argument(
        "--formatter",
        choices=FORMATTER_CHOICES,
        default=None,
        help="Formatter applied to generated files (overrides .ifacegen.yml).",
    )
    parser.add_argument(
        "--fail-fast",
        action="store_true",
        default=None,
        help="Abort on the first file that cannot be parsed.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ifacegen",
        description="Generate Go interfaces from the exported methods of concrete types.",
    )
    _add_common_options(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write interface_<package>.go next to the sources in every directory.",
    )
    _add_common_options(generate_parser, suppress_default=True)
    _add_run_options(generate_parser)
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print a diff of what would change without writing files.",
    )

    check_parser = subparsers.add_parser(
        "check",
        help="Exit non-zero when any generated interface file is missing or stale.",
    )
    _add_common_options(check_parser, suppress_default=True)
    _add_run_options(check_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for ifacegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        quiet=bool(args.quiet),
        log_file=args.log_file,
    )

    orchestrator = Orchestrator()
    dry_run = args.command == "check" or bool(getattr(args, "dry_run", False))

    try:
        report = orchestrator.run(
            args.path,
            dry_run=dry_run,
            formatter=args.formatter,
            fail_fast=args.fail_fast,
        )
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")
    except ConfigError as exc:
        parser.exit(1, f"Invalid configuration: {exc}\n")
    except ParseError as exc:
        parser.exit(1, f"ifacegen {args.command} failed: {exc}\n")
    except FormatError as exc:
        parser.exit(1, f"ifacegen {args.command} failed: {exc}\n")

    _print_errors(report)

    if args.command == "check":
        stale = report.stale
        for unit in stale:
            print(f"stale: {_relativize(unit.path)}")
        if stale or not report.ok:
            parser.exit(1)
        print("Generated interfaces are up to date")
        return

    if dry_run:
        changed = [unit for unit in report.units if unit.diff]
        if not changed:
            print("No changes (dry-run)")
        for unit in changed:
            print(unit.diff, end="")
    else:
        for unit in report.written:
            print(f"Wrote {_relativize(unit.path)}")

    if not report.ok:
        parser.exit(1)


def _print_errors(report: RunReport) -> None:
    for error in report.errors:
        print(f"error ({error.kind}): {error.message}", file=sys.stderr)


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
