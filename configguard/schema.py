"""
schema.py - typed rule tree for configuration validation
=========================================================

A schema is a tree of :class:`SchemaRule` nodes parsed from a declarative
YAML or JSON source::

    type: object
    keys:
      name: {type: string, required: true, pattern: "^[a-z-]+$"}
      replicas: {type: integer, min: 0}

Public API
----------
SchemaType
    The closed set of rule types.

SchemaRule
    One node of the tree.  Which constraint fields may be set depends on
    ``data_type``.

Schema
    Owns the root rule.  Every constructor checks the whole tree once, so
    an inconsistent schema never reaches the validator.

check_rule(rule)
    Structural self-validation of a rule tree; compiles ``pattern`` regexes.
"""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Optional

from . import loader, utils
from .document import DocumentFormat
from .errors import PatternError, SchemaError

__all__ = [
    "SchemaType",
    "SchemaRule",
    "Schema",
    "check_rule",
]

log = logging.getLogger(__name__)


class SchemaType(str, enum.Enum):
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    OBJECT = "object"
    LIST = "list"
    ANY = "any"
    NULL = "null"

    def __str__(self) -> str:
        return self.value


_NUMERIC = (SchemaType.INTEGER, SchemaType.FLOAT)

# every key the rule grammar understands
_RULE_FIELDS = frozenset({
    "type", "description", "required",
    "keys", "allow_unknown_keys", "items",
    "min_length", "max_length", "pattern", "enum", "min", "max",
})

# attribute name -> (source key, types it is legal for, how to say so)
_CONSTRAINTS: dict[str, tuple[str, tuple[SchemaType, ...], str]] = {
    "keys":        ("keys",       (SchemaType.OBJECT,), "type 'object'"),
    "items":       ("items",      (SchemaType.LIST,), "type 'list'"),
    "min_length":  ("min_length", (SchemaType.STRING, SchemaType.LIST), "type 'string' or 'list'"),
    "max_length":  ("max_length", (SchemaType.STRING, SchemaType.LIST), "type 'string' or 'list'"),
    "pattern":     ("pattern",    (SchemaType.STRING,), "type 'string'"),
    "enum_values": ("enum",       (SchemaType.STRING,) + _NUMERIC, "type 'string', 'integer' or 'float'"),
    "min":         ("min",        _NUMERIC, "numeric types"),
    "max":         ("max",        _NUMERIC, "numeric types"),
}


@dataclass
class SchemaRule:
    """One typed constraint specification in the schema tree."""

    data_type: SchemaType
    description: Optional[str] = None
    required: bool = False
    keys: Optional[dict[str, "SchemaRule"]] = None
    allow_unknown_keys: bool = True
    items: Optional["SchemaRule"] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    enum_values: Optional[list[Any]] = None
    min: Optional[float] = None
    max: Optional[float] = None
    # compiled ``pattern``, filled in by :func:`check_rule`
    regex: Optional[re.Pattern] = field(default=None, repr=False, compare=False)

    @property
    def context(self) -> str:
        """How error messages refer to this rule."""
        if self.description:
            return f"for field '{self.description}'"
        return f"for field of type {self.data_type}"

    @classmethod
    def from_mapping(cls, raw: Any) -> "SchemaRule":
        """Build a rule tree from its declarative form (no consistency checks)."""
        return _build_rule(raw)


# --------------------------------------------------------------------------- #
# Declarative source -> rule tree                                             #
# --------------------------------------------------------------------------- #

def _expect(raw: Mapping[str, Any], key: str, ok: bool, what: str) -> None:
    if not ok:
        raise SchemaError(
            f"'{key}' must be {what}, got {utils._type_name(raw[key])} "
            f"({utils._format_value(raw[key])})"
        )


def _build_rule(raw: Any) -> SchemaRule:
    if not isinstance(raw, Mapping):
        raise SchemaError(
            f"Schema rule must be a mapping, got {utils._type_name(raw)}"
        )

    unknown = sorted(str(k) for k in raw if k not in _RULE_FIELDS)
    if unknown:
        raise SchemaError(f"Unknown schema field(s) {unknown}")

    if "type" not in raw:
        raise SchemaError("Schema rule is missing the required 'type' field")
    # YAML reads a bare ``type: null`` as None
    type_name = "null" if raw["type"] is None else raw["type"]
    try:
        if not isinstance(type_name, str):
            raise ValueError(type_name)
        data_type = SchemaType(type_name)
    except ValueError:
        allowed = ", ".join(t.value for t in SchemaType)
        raise SchemaError(
            f"Invalid type {utils._format_value(type_name)}; "
            f"check that all types are valid ({allowed})"
        ) from None

    rule = SchemaRule(data_type=data_type)

    if "description" in raw:
        _expect(raw, "description", isinstance(raw["description"], str), "a string")
        rule.description = raw["description"]
    if "required" in raw:
        _expect(raw, "required", isinstance(raw["required"], bool), "a boolean")
        rule.required = raw["required"]
    if "allow_unknown_keys" in raw:
        if data_type is not SchemaType.OBJECT:
            raise SchemaError(
                f"'allow_unknown_keys' is only valid for type 'object', "
                f"not '{data_type}' {rule.context}"
            )
        _expect(raw, "allow_unknown_keys", isinstance(raw["allow_unknown_keys"], bool), "a boolean")
        rule.allow_unknown_keys = raw["allow_unknown_keys"]

    for key in ("min_length", "max_length"):
        if key in raw:
            value = raw[key]
            _expect(raw, key, utils._is_integer(value) and value >= 0, "a non-negative integer")
            setattr(rule, key, value)

    for key in ("min", "max"):
        if key in raw:
            value = raw[key]
            _expect(raw, key, utils._is_number(value) and value == value, "a number")
            setattr(rule, key, value)

    if "pattern" in raw:
        _expect(raw, "pattern", isinstance(raw["pattern"], str), "a string")
        rule.pattern = raw["pattern"]

    if "enum" in raw:
        _expect(raw, "enum", isinstance(raw["enum"], list), "a list")
        rule.enum_values = list(raw["enum"])

    if "keys" in raw:
        _expect(raw, "keys", isinstance(raw["keys"], Mapping), "a mapping")
        rule.keys = {}
        for name, child in raw["keys"].items():
            try:
                rule.keys[str(name)] = _build_rule(child)
            except SchemaError as exc:
                raise type(exc)(f"Invalid schema rule for key '{name}': {exc}") from exc

    if "items" in raw:
        try:
            rule.items = _build_rule(raw["items"])
        except SchemaError as exc:
            raise type(exc)(
                f"Invalid schema rule for list items {rule.context}: {exc}"
            ) from exc

    return rule


# --------------------------------------------------------------------------- #
# Structural self-validation                                                  #
# --------------------------------------------------------------------------- #

def check_rule(rule: SchemaRule) -> None:
    """Recursively assert that *rule* is internally consistent.

    * every constraint field set on the rule is legal for its ``data_type``
    * ``min_length <= max_length`` and ``min <= max``
    * ``pattern`` compiles (the compiled regex is stored on the rule)
    * children under ``keys`` and ``items`` satisfy the same
    """
    context = rule.context

    for attr, (source_key, legal_for, legal_desc) in _CONSTRAINTS.items():
        if getattr(rule, attr) is not None and rule.data_type not in legal_for:
            raise SchemaError(
                f"'{source_key}' is only valid for {legal_desc}, "
                f"not '{rule.data_type}' {context}"
            )

    if rule.min_length is not None and rule.max_length is not None:
        if rule.min_length > rule.max_length:
            raise SchemaError(
                f"'min_length' cannot be greater than 'max_length' {context}"
            )

    if rule.min is not None and rule.max is not None:
        if not (utils._is_number(rule.min) and utils._is_number(rule.max)):
            raise SchemaError(
                f"Non-numeric values used for 'min'/'max' in schema {context} - "
                f"min: {rule.min!r}, max: {rule.max!r}"
            )
        if rule.min > rule.max:
            raise SchemaError(
                f"'min' ({utils._format_number(rule.min)}) cannot be greater than "
                f"'max' ({utils._format_number(rule.max)}) {context}"
            )

    if rule.pattern is not None:
        try:
            rule.regex = re.compile(rule.pattern)
        except re.error as exc:
            raise PatternError(
                f"Invalid regex pattern '{rule.pattern}' {context}: {exc}"
            ) from exc

    if rule.keys is not None:
        for name, child in rule.keys.items():
            try:
                check_rule(child)
            except SchemaError as exc:
                raise type(exc)(f"Invalid schema rule for key '{name}': {exc}") from exc

    if rule.items is not None:
        try:
            check_rule(rule.items)
        except SchemaError as exc:
            raise type(exc)(
                f"Invalid schema rule for list items {context}: {exc}"
            ) from exc


# --------------------------------------------------------------------------- #
# Schema                                                                      #
# --------------------------------------------------------------------------- #

class Schema:
    """A loaded, self-consistent schema."""

    def __init__(self, root: SchemaRule):
        check_rule(root)
        self.root = root

    def __repr__(self) -> str:
        return f"Schema(root={self.root.data_type.value!r})"

    @classmethod
    def from_mapping(cls, raw: Any) -> "Schema":
        return cls(_build_rule(raw))

    @classmethod
    def load(cls, raw_text: str, fmt: DocumentFormat | str = DocumentFormat.YAML) -> "Schema":
        """Parse and check a schema given as YAML or JSON text."""
        return cls.from_mapping(loader.read_schema_text(raw_text, fmt))

    @classmethod
    def from_file(cls, path: str | Path) -> "Schema":
        """Load a schema file (``.json`` as JSON, anything else as YAML).

        Names that do not exist on disk are looked up among the schemas
        bundled with the package.
        """
        raw = loader.load_schema(path)
        try:
            schema = cls.from_mapping(raw)
        except SchemaError as exc:
            raise type(exc)(f"Invalid schema {path}: {exc}") from exc
        log.info("Loaded schema %s (root type %s)", path, schema.root.data_type)
        return schema
