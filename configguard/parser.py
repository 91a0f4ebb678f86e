"""
parser.py - command-line definition for configguard
====================================================

Public API
----------
`build_arg_parser() -> argparse.ArgumentParser`
    The ``configguard`` parser with its ``validate`` sub-command.

`parse_args(argv=None) -> argparse.Namespace`
    Parse *argv* (default ``sys.argv[1:]``), raising :class:`CliError`
    instead of exiting on misuse.

Arguments can be kept in a file and passed as ``@args.txt`` (one token per
line).
"""

from __future__ import annotations

import argparse
from typing import NoReturn, Sequence

from . import __version__
from .errors import CliError
from .report import ReportFormat

__all__ = ["build_arg_parser", "parse_args"]


class _ArgumentParser(argparse.ArgumentParser):
    """argparse parser that raises instead of calling ``sys.exit(2)``."""

    def error(self, message: str) -> NoReturn:
        raise CliError(message)


# --------------------------------------------------------------------------- #
# Parser builder                                                              #
# --------------------------------------------------------------------------- #

def build_arg_parser() -> argparse.ArgumentParser:
    p = _ArgumentParser(
        prog="configguard",
        description="Configuration validation tool",
        fromfile_prefix_chars="@",
        add_help=False,
    )

    # standard meta flags ----------------------------------------------------
    p.add_argument("-h", "--help", action="help", help="Show this help message and exit.")
    p.add_argument(
        "--version",
        action="version",
        version=f"configguard {__version__}",
        help="Print version and exit.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    v = sub.add_parser(
        "validate",
        help="Validate configuration files against a schema.",
        description="Validate a configuration against a schema",
        fromfile_prefix_chars="@",
    )
    v.add_argument(
        "config",
        nargs="+",
        metavar="CONFIG",
        help="Path to the configuration file(s) to validate (directories with --directory).",
    )
    v.add_argument(
        "-s", "--schema",
        required=True,
        metavar="SCHEMA",
        help="Path to the schema file (YAML, or JSON with a .json extension).",
    )
    v.add_argument(
        "-f", "--format",
        default=ReportFormat.TEXT.value,
        choices=[f.value for f in ReportFormat],
        help="Output format (default: text).",
    )
    v.add_argument(
        "--strict",
        action="store_true",
        help="Enable strict mode (reject unknown keys everywhere).",
    )
    v.add_argument(
        "-d", "--directory",
        action="store_true",
        help="Validate all compatible files in the given directories.",
    )
    v.add_argument(
        "-o", "--output",
        metavar="FILE",
        help="Write the report to FILE instead of standard output.",
    )
    v.add_argument(
        "--no-lines",
        dest="annotate_lines",
        action="store_false",
        help="Do not annotate errors with approximate source line numbers.",
    )
    v.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log progress and debug detail to standard error.",
    )

    return p


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_arg_parser().parse_args(argv)
