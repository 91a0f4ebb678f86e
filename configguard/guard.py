"""
guard.py - High-level API: one schema, many documents.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Optional

from . import line_mapper
from .document import SUPPORTED_EXTENSIONS, Document
from .errors import ConfigGuardError, ConfigNotFoundError, FileReadError, InternalError
from .schema import Schema
from .validator import ValidationResult, validate

__all__ = ["ConfigGuard", "FileOutcome", "BatchSummary"]

log = logging.getLogger(__name__)


@dataclass
class FileOutcome:
    """What happened to one document: a result, or the input error that stopped it."""

    path: Path
    result: Optional[ValidationResult] = None
    error: Optional[ConfigGuardError] = None

    @property
    def valid(self) -> bool:
        return self.result is not None and self.result.valid

    @property
    def status(self) -> str:
        if self.error is not None:
            return "error"
        return "valid" if self.valid else "invalid"

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"file": str(self.path), "status": self.status, "valid": self.valid}
        if self.result is not None:
            out["error_count"] = len(self.result.errors)
            out["errors"] = [e.to_dict() for e in self.result.errors]
        if self.error is not None:
            out["error"] = str(self.error)
            out["exit_code"] = self.error.exit_code
        return out


@dataclass
class BatchSummary:
    """Outcomes of a multi-document run."""

    outcomes: list[FileOutcome] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    # per-directory counts, in the order directories were processed
    directories: dict[Path, dict[str, int]] = field(default_factory=dict)
    failed_directories: dict[Path, ConfigGuardError] = field(default_factory=dict)

    @property
    def valid(self) -> bool:
        return not self.failed_directories and all(o.valid for o in self.outcomes)

    def totals(self) -> dict[str, int]:
        processed = len(self.outcomes)
        valid = sum(1 for o in self.outcomes if o.valid)
        return {
            "processed": processed,
            "valid": valid,
            "invalid": processed - valid,
            "skipped": len(self.skipped),
        }

    def merge(self, other: "BatchSummary") -> None:
        self.outcomes.extend(other.outcomes)
        self.skipped.extend(other.skipped)
        self.directories.update(other.directories)
        self.failed_directories.update(other.failed_directories)


class ConfigGuard:
    """Validate documents against one loaded schema."""

    def __init__(self, schema: Schema, *, strict: bool = False, annotate_lines: bool = True):
        self.schema = schema
        self.strict = strict
        self.annotate_lines = annotate_lines

    @classmethod
    def load(cls, schema_path: str | Path, **kwargs: Any) -> "ConfigGuard":
        """Load the schema at *schema_path* and return a guard for it."""
        return cls(Schema.from_file(schema_path), **kwargs)

    # ------------------------------------------------------------------ #
    # Single documents                                                   #
    # ------------------------------------------------------------------ #
    def check(self, value: Any) -> ValidationResult:
        """Validate an already-parsed value tree."""
        return validate(value, self.schema, self.strict)

    def check_document(self, doc: Document) -> ValidationResult:
        """Validate *doc*, raising :class:`InternalError` if it is too deep to walk."""
        try:
            result = self.check(doc.data)
        except RecursionError as exc:
            raise InternalError(
                f"Document {doc.path or '<string>'} is nested too deeply to validate"
            ) from exc
        if self.annotate_lines:
            result = line_mapper.annotate_result(result, doc.text, doc.format)
        return result

    def check_file(self, path: str | Path) -> FileOutcome:
        """Load and validate one file; input and depth errors are captured, not raised."""
        path = Path(path)
        try:
            result = self.check_document(Document.from_file(path))
        except ConfigGuardError as exc:
            log.warning("Skipping %s: %s", path, exc)
            return FileOutcome(path, error=exc)
        log.info("%s: %s", path, "valid" if result.valid else f"{len(result.errors)} errors")
        return FileOutcome(path, result=result)

    # ------------------------------------------------------------------ #
    # Batches                                                            #
    # ------------------------------------------------------------------ #
    def check_files(self, paths: Iterable[str | Path]) -> BatchSummary:
        summary = BatchSummary()
        for p in paths:
            summary.outcomes.append(self.check_file(p))
        return summary

    def check_directory(self, directory: str | Path) -> BatchSummary:
        """Validate every ``.yaml``/``.yml``/``.json`` file directly in *directory*.

        Other files are counted as skipped.  Sub-directories are not visited.
        """
        directory = Path(directory)
        if not directory.is_dir():
            raise ConfigNotFoundError(directory)
        try:
            entries = sorted(p for p in directory.iterdir() if p.is_file())
        except OSError as exc:
            raise FileReadError(directory, str(exc)) from exc

        log.info("Processing directory: %s", directory)
        summary = BatchSummary()
        for entry in entries:
            if entry.suffix.lower() in SUPPORTED_EXTENSIONS:
                summary.outcomes.append(self.check_file(entry))
            else:
                log.debug("Skipping %s (incompatible extension)", entry)
                summary.skipped.append(entry)
        summary.directories[directory] = summary.totals()
        return summary

    def check_directories(self, directories: Iterable[str | Path]) -> BatchSummary:
        """Like :meth:`check_directory` for several directories; a missing one is recorded, not raised."""
        summary = BatchSummary()
        for d in directories:
            try:
                summary.merge(self.check_directory(d))
            except ConfigGuardError as exc:
                log.error("Error processing directory %s: %s", d, exc)
                summary.failed_directories[Path(d)] = exc
        return summary
