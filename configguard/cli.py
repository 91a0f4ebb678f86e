"""
cli.py - ``configguard`` command-line entry point.

Exit codes
----------
0 success · 2 not found · 3 file read · 4 parse error · 5 unsupported format
· 10 validation failure · 11 schema error · 12 pattern error · 20 CLI misuse
· 30 serialization / I/O · 99 internal error
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Sequence

from .errors import ConfigGuardError, CliError, SerializationError
from .guard import BatchSummary, ConfigGuard, FileOutcome
from .parser import build_arg_parser
from .report import ReportFormat, format_result, format_summary, to_json

__all__ = ["main", "run"]

log = logging.getLogger("configguard")


# --------------------------------------------------------------------------- #
# Logging Configuration                                                       #
# --------------------------------------------------------------------------- #

def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level="DEBUG" if verbose else "WARNING",
        format="%(asctime)s %(levelname)s %(message)s",
        stream=sys.stderr,
    )


# --------------------------------------------------------------------------- #
# Output                                                                      #
# --------------------------------------------------------------------------- #

def _emit(text: str, output: str | None) -> None:
    if output is None:
        print(text)
        return
    try:
        path = Path(output)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text + "\n", encoding="utf-8")
    except OSError as exc:
        raise SerializationError(f"Failed to write report to '{output}': {exc}") from exc


def _outcome_text(outcome: FileOutcome, fmt: ReportFormat) -> str:
    if outcome.error is not None:
        if fmt is ReportFormat.MARKDOWN:
            return f"## {outcome.path}\n**Status**: error - {outcome.error}"
        return f"❌ {outcome.path}: Error - {outcome.error}"
    return format_result(outcome.result, fmt, path=outcome.path)


def _batch_report(summary: BatchSummary, fmt: ReportFormat) -> str:
    if fmt is ReportFormat.JSON:
        return format_summary(summary, fmt)

    chunks = [_outcome_text(o, fmt) for o in summary.outcomes]
    if fmt is ReportFormat.TEXT:
        chunks += [
            f"{'✅' if o.valid else '❌'} {o.path}: {o.status.title()}"
            for o in summary.outcomes if o.error is None
        ]
        chunks += [
            f"Error processing directory {d}: {exc}"
            for d, exc in summary.failed_directories.items()
        ]
    chunks.append(format_summary(summary, fmt))
    return "\n\n".join(chunks)


def _report_failure(exc: ConfigGuardError, fmt: ReportFormat, output: str | None) -> None:
    if fmt is ReportFormat.JSON:
        payload = {
            "valid": False,
            "error_count": 1,
            "errors": [{"message": str(exc), "path": "", "exit_code": exc.exit_code}],
        }
        try:
            _emit(to_json(payload), output)
            return
        except SerializationError:
            pass  # fall through to stderr
    print(f"Error: {exc}", file=sys.stderr)


# --------------------------------------------------------------------------- #
# Commands                                                                    #
# --------------------------------------------------------------------------- #

def run(args: argparse.Namespace) -> int:
    """Execute a parsed ``validate`` command and return the exit code."""
    if args.command != "validate":
        raise CliError(f"Unknown command: {args.command}")

    fmt = ReportFormat(args.format)
    guard = ConfigGuard.load(args.schema, strict=args.strict, annotate_lines=args.annotate_lines)

    if args.directory:
        summary = guard.check_directories(args.config)
    elif len(args.config) == 1:
        outcome = guard.check_file(args.config[0])
        if outcome.error is not None:
            raise outcome.error
        _emit(format_result(outcome.result, fmt, path=None if fmt is ReportFormat.TEXT else outcome.path), args.output)
        return 0 if outcome.valid else 10
    else:
        summary = guard.check_files(args.config)

    _emit(_batch_report(summary, fmt), args.output)
    totals = summary.totals()
    log.info("%d of %d documents valid", totals["valid"], totals["processed"])
    return 0 if summary.valid else 10


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_arg_parser()
    try:
        args = parser.parse_args(argv)
    except CliError as exc:
        print(parser.format_usage(), end="", file=sys.stderr)
        print(f"Error: {exc}", file=sys.stderr)
        return exc.exit_code

    _configure_logging(args.verbose)
    fmt = ReportFormat(args.format)
    try:
        return run(args)
    except ConfigGuardError as exc:
        _report_failure(exc, fmt, args.output)
        return exc.exit_code
    except Exception:
        log.exception("Internal error")
        return 99


if __name__ == "__main__":
    sys.exit(main())
