"""
line_mapper.py - best-effort source line annotation for validation errors.

This is a heuristic text scan, not a parser: it remembers the first line on
which each bare key name appears and attaches that line to every error whose
path ends in that key.  A name used at several nesting levels (``name``
under both ``metadata`` and ``containers[0]``) always maps to its first
occurrence.  Errors whose key is not found keep ``line=None``.
"""

from __future__ import annotations

import dataclasses
import json
import re
from typing import Dict, Iterable, List, Optional

from .document import DocumentFormat
from .validator import ValidationError, ValidationResult

__all__ = ["map_lines", "last_key", "annotate", "annotate_result"]

# block-style ``key:`` optionally behind list dashes, plain or quoted
_YAML_BLOCK_KEY = re.compile(
    r"""^\s*(?:-\s+)*
        (?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<plain>[^\s#'"{\[\]},:-][^#]*?|-[^\s#][^#]*?))
        \s*:(?:\s|$)""",
    re.VERBOSE,
)
# keys inside flow mappings: ``{name: web, image: nginx}``
_YAML_FLOW_KEY = re.compile(r"""[{,]\s*(?:"([^"]*)"|'([^']*)'|([^\s{},:'"\[\]]+))\s*:""")
_JSON_KEY = re.compile(r'"((?:[^"\\]|\\.)*)"\s*:')
_INDEX_SUFFIX = re.compile(r"(?:\[\d+\])+$")


def _yaml_keys(line: str) -> Iterable[str]:
    stripped = line.lstrip()
    if not stripped or stripped.startswith("#") or stripped.startswith(("---", "...")):
        return
    m = _YAML_BLOCK_KEY.match(line)
    if m:
        yield next(g for g in (m.group("dq"), m.group("sq"), m.group("plain")) if g is not None)
    if "{" not in line:
        return
    for fm in _YAML_FLOW_KEY.finditer(line):
        yield next(g for g in fm.groups() if g is not None)


def _json_keys(line: str) -> Iterable[str]:
    for m in _JSON_KEY.finditer(line):
        raw = m.group(1)
        try:
            yield json.loads(f'"{raw}"')
        except ValueError:
            yield raw


def map_lines(text: str, fmt: DocumentFormat | str) -> Dict[str, int]:
    """Map each key name to the 1-based line of its first appearance."""
    scan = _json_keys if DocumentFormat(fmt) is DocumentFormat.JSON else _yaml_keys
    lines: Dict[str, int] = {}
    for lineno, line in enumerate(text.splitlines(), start=1):
        for key in scan(line):
            lines.setdefault(key, lineno)
    return lines


def last_key(path: str) -> Optional[str]:
    """``.spec.ports[2]`` -> ``ports``; the root path has no key."""
    head, dot, key = _INDEX_SUFFIX.sub("", path).rpartition(".")
    return key if dot else None


def annotate(
    errors: Iterable[ValidationError],
    text: str,
    fmt: DocumentFormat | str,
) -> List[ValidationError]:
    """Return copies of *errors* with ``line`` filled in where it can be found."""
    lines = map_lines(text, fmt)
    out: List[ValidationError] = []
    for err in errors:
        key = last_key(err.path)
        line = lines.get(key) if key is not None else None
        out.append(dataclasses.replace(err, line=line) if line is not None else err)
    return out


def annotate_result(result: ValidationResult, text: str | None, fmt: DocumentFormat | str) -> ValidationResult:
    if result.valid or not text:
        return result
    return ValidationResult.invalid(annotate(result.errors, text, fmt))
