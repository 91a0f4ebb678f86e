"""
document.py - format-agnostic configuration documents.

A :class:`Document` wraps the parsed value tree of a YAML or JSON file
together with where it came from.  The value tree only ever contains
``dict``, ``list``, ``str``, ``int``, ``float``, ``bool`` and ``None``, so
the validator never needs to know which format it was read from.

YAML is read with the YAML 1.1 resolvers PyYAML ships, minus two: dates and
timestamps stay strings, and plain mapping keys such as ``on``, ``yes`` or
``no`` stay strings instead of turning into booleans.  Values are not
affected: ``enabled: on`` is still ``True``.
"""
from __future__ import annotations

import enum
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigNotFoundError, FileReadError, ParseError, UnsupportedFormatError

__all__ = [
    "DocumentFormat",
    "Document",
    "detect_format",
    "parse_text",
    "SUPPORTED_EXTENSIONS",
]

log = logging.getLogger(__name__)


class DocumentFormat(str, enum.Enum):
    YAML = "yaml"
    JSON = "json"


SUPPORTED_EXTENSIONS: dict[str, DocumentFormat] = {
    ".yaml": DocumentFormat.YAML,
    ".yml": DocumentFormat.YAML,
    ".json": DocumentFormat.JSON,
}


# --------------------------------------------------------------------------- #
# Parsing                                                                     #
# --------------------------------------------------------------------------- #

_BOOL_TAG = "tag:yaml.org,2002:bool"
_STR_TAG = "tag:yaml.org,2002:str"


class _ConfigLoader(yaml.SafeLoader):
    """Safe loader that keeps dates, timestamps and boolean-looking keys as strings."""

    def construct_mapping(self, node, deep=False):
        for key_node, _ in node.value:
            if (
                isinstance(key_node, yaml.ScalarNode)
                and key_node.tag == _BOOL_TAG
                and key_node.style is None
            ):
                key_node.tag = _STR_TAG
        return super().construct_mapping(node, deep=deep)


_ConfigLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != "tag:yaml.org,2002:timestamp"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def detect_format(path: str | Path) -> DocumentFormat:
    """Map a file extension onto a :class:`DocumentFormat`."""
    suffix = Path(path).suffix.lower()
    try:
        return SUPPORTED_EXTENSIONS[suffix]
    except KeyError:
        raise UnsupportedFormatError(path, suffix.lstrip(".")) from None


def parse_text(text: str, fmt: DocumentFormat | str) -> Any:
    """Parse *text* into a plain value tree, raising :class:`ParseError`.

    Documents nested deeper than the interpreter's recursion limit are
    rejected as unparseable.
    """
    fmt = DocumentFormat(fmt)
    try:
        if fmt is DocumentFormat.JSON:
            return json.loads(text)
        return yaml.load(text, Loader=_ConfigLoader)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ParseError(fmt.value, str(exc)) from exc
    except RecursionError as exc:
        raise ParseError(fmt.value, "document is nested too deeply") from exc


def read_text(path: str | Path) -> str:
    """Read a UTF-8 file, mapping OS failures onto configguard errors."""
    path = Path(path)
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigNotFoundError(path) from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(path, str(exc)) from exc


# --------------------------------------------------------------------------- #
# Document                                                                    #
# --------------------------------------------------------------------------- #

class Document:
    """A parsed configuration document."""

    def __init__(
        self,
        data: Any,
        *,
        format: DocumentFormat = DocumentFormat.YAML,
        path: Path | None = None,
        text: str | None = None,
    ):
        self.data = data
        self.format = DocumentFormat(format)
        self.path = path
        self.text = text

    def __repr__(self) -> str:
        return f"Document(format={self.format.value!r}, path={self.path!r})"

    @classmethod
    def from_str(cls, text: str, fmt: DocumentFormat | str) -> "Document":
        """Parse raw *text*; the text is kept for line mapping."""
        fmt = DocumentFormat(fmt)
        return cls(parse_text(text, fmt), format=fmt, text=text)

    @classmethod
    def from_file(cls, path: str | Path) -> "Document":
        """Detect the format from the extension, read and parse the file."""
        path = Path(path)
        fmt = detect_format(path)
        text = read_text(path)
        log.debug("Loaded %s document %s (%d bytes)", fmt.value, path, len(text))
        doc = cls.from_str(text, fmt)
        doc.path = path
        return doc
