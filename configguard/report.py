"""
report.py - render validation results for people and machines.

Public API
----------
ReportFormat
    ``text`` | ``json`` | ``markdown``.

format_result(result, fmt, *, path=None) -> str
    One document's outcome.

format_summary(summary, fmt) -> str
    Totals of a multi-document or directory run.
"""
from __future__ import annotations

import enum
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from .errors import SerializationError
from .validator import ValidationError, ValidationResult

if TYPE_CHECKING:
    from .guard import BatchSummary

__all__ = ["ReportFormat", "format_result", "format_summary", "to_json"]


class ReportFormat(str, enum.Enum):
    TEXT = "text"
    JSON = "json"
    MARKDOWN = "markdown"

    def __str__(self) -> str:
        return self.value


# --------------------------------------------------------------------------- #
# Shared helpers                                                              #
# --------------------------------------------------------------------------- #

def _format_scalar(v: Any) -> str:
    """Return a Markdown-safe scalar string."""
    if v is True:   return "true"
    if v is False:  return "false"
    if v is None:   return "null"
    return str(v)


def _format_list(v: Sequence[Any]) -> str:
    """Return a bulleted Markdown list (no surrounding blank lines)."""
    return "\n".join(f"- {_format_scalar(item)}" for item in v)


def to_json(obj: Any) -> str:
    """Pretty JSON, mapping serializer failures onto :class:`SerializationError`."""
    try:
        return json.dumps(obj, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(f"Failed to serialize JSON report: {exc}") from exc


def _json_payload(result: ValidationResult, path: Path | str | None) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    if path is not None:
        payload["file"] = str(path)
    payload["valid"] = result.valid
    payload["error_count"] = len(result.errors)
    payload["errors"] = [e.to_dict() for e in result.errors]
    return payload


# --------------------------------------------------------------------------- #
# Per-document reports                                                        #
# --------------------------------------------------------------------------- #

def _text_error(i: int, error: ValidationError) -> list[str]:
    where = f"'{error.path}'"
    if error.line is not None:
        where += f" (line {error.line})"
    lines = [f"{i}. Error at path {where}: {error.message}"]
    if error.description:
        lines.append(f"   Field description: {error.description}")
    lines.append(f"   Expected: {error.expected}")
    lines.append(f"   Found: {error.actual}")
    return lines


def _text_report(result: ValidationResult, path: Path | str | None) -> str:
    prefix = f"{path}: " if path is not None else ""
    if result.valid:
        return f"{prefix}Configuration validation passed."

    out = [f"{prefix}Configuration validation failed with {len(result.errors)} errors:"]
    for i, error in enumerate(result.errors, start=1):
        if i > 1:
            out.append("")  # blank line between errors
        out.extend(_text_error(i, error))
    return "\n".join(out)


def _markdown_report(result: ValidationResult, path: Path | str | None, heading_level: int = 2) -> str:
    h = "#" * heading_level
    parts = [f"{h} {path if path is not None else 'Configuration'}"]
    if result.valid:
        parts.append("**Status**: valid")
        return "\n".join(parts)

    parts.append(f"**Status**: invalid ({len(result.errors)} errors)")
    for i, error in enumerate(result.errors, start=1):
        parts.append("")
        parts.append(f"{h}# {i}. `{error.path or '<root>'}`: {error.message}")
        details = [
            f"**Expected**: {error.expected}",
            f"**Found**: {error.actual}",
        ]
        if error.line is not None:
            details.append(f"**Line**: {error.line}")
        if error.description:
            details.append(f"**Description**: {error.description}")
        parts.append(_format_list(details))
    return "\n".join(parts)


def format_result(
    result: ValidationResult,
    fmt: ReportFormat | str = ReportFormat.TEXT,
    *,
    path: Path | str | None = None,
) -> str:
    fmt = ReportFormat(fmt)
    if fmt is ReportFormat.JSON:
        return to_json(_json_payload(result, path))
    if fmt is ReportFormat.MARKDOWN:
        return _markdown_report(result, path)
    return _text_report(result, path)


# --------------------------------------------------------------------------- #
# Batch summaries                                                             #
# --------------------------------------------------------------------------- #

def _counts(c: Mapping[str, Any]) -> dict[str, int]:
    return {k: c[k] for k in ("processed", "valid", "invalid", "skipped")}


def format_summary(summary: "BatchSummary", fmt: ReportFormat | str = ReportFormat.TEXT) -> str:
    fmt = ReportFormat(fmt)
    totals = summary.totals()

    if fmt is ReportFormat.JSON:
        payload: dict[str, Any] = {
            "valid": summary.valid,
            "total": _counts(totals),
            "files": [o.to_dict() for o in summary.outcomes],
        }
        if summary.directories:
            payload["directories"] = [
                {"directory": str(d), **_counts(c)} for d, c in summary.directories.items()
            ]
        return to_json(payload)

    if fmt is ReportFormat.MARKDOWN:
        rows = ["| | count |", "| --- | --- |"]
        rows += [f"| {k.title()} | {v} |" for k, v in _counts(totals).items()]
        return "## Validation Summary\n\n" + "\n".join(rows)

    return "\n".join([
        "Validation Summary:",
        f"  Processed: {totals['processed']} files",
        f"  Valid: {totals['valid']} files",
        f"  Invalid: {totals['invalid']} files",
        f"  Skipped: {totals['skipped']} files (incompatible extension)",
    ])
