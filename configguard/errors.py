"""
errors.py - exception hierarchy for configguard
================================================

Every failure the tool can report maps onto exactly one exception class,
and every class carries the process exit code the command line uses for it.

Public API
----------
ConfigGuardError
    Base class; ``exit_code`` is a class attribute.

ConfigNotFoundError, FileReadError, ParseError, UnsupportedFormatError
    Input errors, fatal to one document only.

SchemaError, PatternError
    Schema errors, fatal at load time.

ValidationFailed
    Raised by callers that prefer an exception over inspecting a
    :class:`~configguard.validator.ValidationResult`.

CliError, SerializationError, InternalError
    Command-line misuse, report output problems, anything unexpected.
"""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

__all__ = [
    "ConfigGuardError",
    "ConfigNotFoundError",
    "FileReadError",
    "ParseError",
    "UnsupportedFormatError",
    "ValidationFailed",
    "SchemaError",
    "PatternError",
    "CliError",
    "SerializationError",
    "InternalError",
]


class ConfigGuardError(Exception):
    """Base exception for configguard errors."""

    exit_code = 99


# --------------------------------------------------------------------------- #
# Input errors                                                                #
# --------------------------------------------------------------------------- #

class ConfigNotFoundError(ConfigGuardError, FileNotFoundError):
    """A document, schema or directory does not exist."""

    exit_code = 2

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(f"File not found: {self.path}")


class FileReadError(ConfigGuardError):
    """A file exists but could not be read."""

    exit_code = 3

    def __init__(self, path: str | Path, error: str):
        self.path = Path(path)
        super().__init__(f"Failed to read file '{self.path}': {error}")


class ParseError(ConfigGuardError):
    """Malformed YAML or JSON syntax."""

    exit_code = 4

    def __init__(self, fmt: str, detail: str):
        self.format = fmt
        super().__init__(f"Failed to parse {fmt.upper()}: {detail}")


class UnsupportedFormatError(ConfigGuardError):
    """The file extension is not one of .yaml, .yml or .json."""

    exit_code = 5

    def __init__(self, path: str | Path, extension: str):
        self.path = Path(path)
        self.extension = extension
        super().__init__(
            f"Unsupported file format for '{self.path}' with extension '{extension}'"
        )


# --------------------------------------------------------------------------- #
# Validation & schema errors                                                  #
# --------------------------------------------------------------------------- #

class ValidationFailed(ConfigGuardError):
    """A document was checked and at least one violation was found."""

    exit_code = 10

    def __init__(self, errors: Sequence = (), message: str | None = None):
        self.errors = tuple(errors)
        if message is None:
            message = f"{len(self.errors)} validation errors"
            if self.errors:
                first = self.errors[0]
                message += f" (first error: Validation error at '{first.path}': {first.message})"
        super().__init__(message)


class SchemaError(ConfigGuardError, ValueError):
    """The schema itself is malformed or internally inconsistent."""

    exit_code = 11


class PatternError(SchemaError):
    """A ``pattern`` constraint does not compile."""

    exit_code = 12


# --------------------------------------------------------------------------- #
# Tooling errors                                                              #
# --------------------------------------------------------------------------- #

class CliError(ConfigGuardError):
    """Command-line misuse."""

    exit_code = 20


class SerializationError(ConfigGuardError):
    """A report could not be serialized or written."""

    exit_code = 30


class InternalError(ConfigGuardError):
    """Anything that should not happen."""

    exit_code = 99
