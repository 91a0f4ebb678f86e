"""
loader.py - read declarative schema sources into raw mappings.

Public API
----------
load_schema(path) : raw schema mapping from disk or from the bundled schemas
read_schema_text(text, fmt) : raw schema mapping from a string
"""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any, Mapping

from .document import DocumentFormat, parse_text, read_text
from .errors import ConfigNotFoundError, ParseError, SchemaError

__all__ = ["load_schema", "read_schema_text"]

log = logging.getLogger(__name__)

# --------------------------------------------------------------------------- #
# Helpers                                                                     #
# --------------------------------------------------------------------------- #

def _schema_format(name: str | Path) -> DocumentFormat:
    """JSON for ``.json`` files; everything else is read as YAML."""
    if Path(name).suffix.lower() == ".json":
        return DocumentFormat.JSON
    return DocumentFormat.YAML


def read_schema_text(
    text: str,
    fmt: DocumentFormat | str = DocumentFormat.YAML,
    *,
    source: str = "<string>",
) -> Mapping[str, Any]:
    """Parse schema *text*, raising crisp :class:`SchemaError` on failure."""
    try:
        raw = parse_text(text, fmt)
    except ParseError as exc:
        raise SchemaError(f"Failed to parse schema from {source}: {exc}") from exc
    if not isinstance(raw, Mapping):
        raise SchemaError(
            f"Schema in {source} must be a mapping with a 'type' key, "
            f"got {type(raw).__name__}"
        )
    return raw


# --------------------------------------------------------------------------- #
# Public utilities                                                            #
# --------------------------------------------------------------------------- #

def load_schema(path: str | Path) -> Mapping[str, Any]:
    p = Path(path)

    # 1) direct file on disk ------------------------------------------------
    if p.is_file():
        return read_schema_text(read_text(p), _schema_format(p), source=str(p))

    # 2) bundled resource (basename) -----------------------------------------
    pkg = resources.files("configguard.schemas")
    resource = pkg.joinpath(p.name)
    if resource.is_file():
        log.debug("Using bundled schema %s", p.name)
        return read_schema_text(
            resource.read_text(encoding="utf-8"),
            _schema_format(p),
            source=f"bundled schema '{p.name}'",
        )

    # 3) give up -----------------------------------------------------------
    raise ConfigNotFoundError(p)
