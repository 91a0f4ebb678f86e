"""
validator.py - recursive, all-errors validation engine
======================================================

Walks a parsed value tree and a :class:`~configguard.schema.SchemaRule`
tree in lock-step and collects *every* violation in a single pass.  A type
mismatch stops descent into that one node; nothing stops the walk.

Public API
----------
ValidationError
    One finding: ``path``, ``message``, ``expected``, ``actual`` plus the
    rule's ``description`` and an optional source ``line``.

ValidationResult
    ``valid`` iff no errors were collected.

validate(value, schema, strict=False) -> ValidationResult
    Validate a whole document.

validate_node(value, rule, path, errors, strict)
    Validate one subtree, appending findings to *errors*.

Paths start empty at the root, grow by ``.field`` for object members and
by ``[i]`` for list elements: ``.spec.containers[0].image``.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import asdict, dataclass
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from . import utils
from .errors import ValidationFailed
from .schema import Schema, SchemaRule, SchemaType

__all__ = [
    "ValidationError",
    "ValidationResult",
    "validate",
    "validate_node",
]

log = logging.getLogger(__name__)

# relative tolerance for numeric enum membership
ENUM_REL_TOL = 1e-9

# --------------------------------------------------------------------------- #
# Results                                                                     #
# --------------------------------------------------------------------------- #

@dataclass(frozen=True)
class ValidationError:
    path: str
    message: str
    expected: str
    actual: str
    description: Optional[str] = None
    line: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def __str__(self) -> str:
        return (
            f"Validation error at '{self.path}': {self.message} "
            f"(expected: {self.expected}, found: {self.actual})"
        )


class ValidationResult:
    """Outcome of one :func:`validate` call; never partially valid."""

    __slots__ = ("_errors",)

    def __init__(self, errors: Iterable[ValidationError] = ()):
        self._errors: Tuple[ValidationError, ...] = tuple(errors)

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(cls, errors: Iterable[ValidationError]) -> "ValidationResult":
        return cls(errors)

    @property
    def errors(self) -> Tuple[ValidationError, ...]:
        return self._errors

    @property
    def valid(self) -> bool:
        return not self._errors

    def __bool__(self) -> bool:
        return self.valid

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValidationResult):
            return NotImplemented
        return self._errors == other._errors

    def __repr__(self) -> str:
        if self.valid:
            return "ValidationResult(valid)"
        return f"ValidationResult(invalid, {len(self._errors)} errors)"

    def raise_for_errors(self) -> None:
        """Raise :class:`ValidationFailed` when the result is invalid."""
        if not self.valid:
            raise ValidationFailed(self._errors)


# --------------------------------------------------------------------------- #
# Entry point                                                                 #
# --------------------------------------------------------------------------- #

def validate(value: Any, schema: Schema | SchemaRule, strict: bool = False) -> ValidationResult:
    """Validate the value tree *value* against *schema*.

    With *strict* every object is treated as if ``allow_unknown_keys`` were
    false, regardless of what its rule says.

    A bare :class:`SchemaRule` is accepted as a convenience: it is wrapped
    in a :class:`Schema` on every call, so the whole rule tree is checked
    and its patterns compiled (onto the rule) each time.  Load a
    :class:`Schema` once when validating many documents.
    """
    root = schema.root if isinstance(schema, Schema) else Schema(schema).root
    errors: List[ValidationError] = []
    validate_node(value, root, "", errors, strict)
    if errors:
        log.debug("Validation collected %d errors", len(errors))
        return ValidationResult.invalid(errors)
    return ValidationResult.ok()


# --------------------------------------------------------------------------- #
# Core recursive validator                                                    #
# --------------------------------------------------------------------------- #

def _matches_type(value: Any, data_type: SchemaType) -> bool:
    if data_type is SchemaType.ANY:
        return True
    if data_type is SchemaType.NULL:
        return value is None
    if data_type is SchemaType.BOOLEAN:
        return isinstance(value, bool)
    if data_type is SchemaType.INTEGER:
        return utils._is_integer(value)
    if data_type is SchemaType.FLOAT:
        return utils._is_float(value)
    if data_type is SchemaType.STRING:
        return isinstance(value, str)
    if data_type is SchemaType.OBJECT:
        return isinstance(value, Mapping)
    if data_type is SchemaType.LIST:
        return isinstance(value, list)
    return False


def _error(rule: SchemaRule, path: str, message: str, expected: str, actual: str) -> ValidationError:
    return ValidationError(
        path=path,
        message=message,
        expected=expected,
        actual=actual,
        description=rule.description,
    )


def validate_node(
    value: Any,
    rule: SchemaRule,
    path: str,
    errors: List[ValidationError],
    strict: bool,
) -> None:
    """Validate *value* against *rule*, appending findings to *errors*."""

    # 1) type check ---------------------------------------------------------
    if not _matches_type(value, rule.data_type):
        errors.append(_error(
            rule, path, "Type mismatch",
            expected=rule.data_type.value,
            actual=utils._type_name(value),
        ))
        return

    # 2) per-type constraints -----------------------------------------------
    if rule.data_type is SchemaType.OBJECT:
        _validate_object(value, rule, path, errors, allow_unknown_keys=not strict and rule.allow_unknown_keys)
    elif rule.data_type is SchemaType.LIST:
        _validate_list(value, rule, path, errors)
    elif rule.data_type is SchemaType.STRING:
        _validate_string(value, rule, path, errors)
    elif rule.data_type in (SchemaType.INTEGER, SchemaType.FLOAT):
        _validate_number(value, rule, path, errors)
    # boolean / null / any: the type check is the whole story


def _validate_object(
    value: Mapping[Any, Any],
    rule: SchemaRule,
    path: str,
    errors: List[ValidationError],
    allow_unknown_keys: bool,
) -> None:
    keys = rule.keys
    if keys is None:
        return  # free-form mapping

    present = {str(k) for k in value}
    for name, child in keys.items():
        if child.required and name not in present:
            errors.append(ValidationError(
                path=f"{path}.{name}",
                message="Required key missing",
                expected="Key to be present",
                actual="Key is absent",
                description=child.description,
            ))

    for key, child_value in value.items():
        name = str(key)
        child_path = f"{path}.{name}"
        child = keys.get(name)
        if child is not None:
            # a restriction, once in force, applies to the whole subtree
            validate_node(child_value, child, child_path, errors, not allow_unknown_keys)
        elif not allow_unknown_keys:
            errors.append(ValidationError(
                path=child_path,
                message="Unknown key",
                expected="Key defined in schema",
                actual="Undefined key",
            ))


def _validate_list(value: list, rule: SchemaRule, path: str, errors: List[ValidationError]) -> None:
    count = len(value)
    if rule.min_length is not None and count < rule.min_length:
        errors.append(_error(
            rule, path, "List too short",
            expected=f"At least {rule.min_length} items",
            actual=f"{count} items",
        ))
    if rule.max_length is not None and count > rule.max_length:
        errors.append(_error(
            rule, path, "List too long",
            expected=f"At most {rule.max_length} items",
            actual=f"{count} items",
        ))

    if rule.items is not None:
        for idx, item in enumerate(value):
            validate_node(item, rule.items, f"{path}[{idx}]", errors, False)


def _validate_string(value: str, rule: SchemaRule, path: str, errors: List[ValidationError]) -> None:
    length = len(value)
    if rule.min_length is not None and length < rule.min_length:
        errors.append(_error(
            rule, path, "String too short",
            expected=f"At least {rule.min_length} characters",
            actual=f"{length} characters",
        ))
    if rule.max_length is not None and length > rule.max_length:
        errors.append(_error(
            rule, path, "String too long",
            expected=f"At most {rule.max_length} characters",
            actual=f"{length} characters",
        ))

    if rule.pattern is not None:
        # compiled once by check_rule; rules assembled by hand fall back to re's cache
        regex = rule.regex if rule.regex is not None else re.compile(rule.pattern)
        if regex.search(value) is None:
            errors.append(_error(
                rule, path, "String doesn't match pattern",
                expected=f"Pattern: {rule.pattern}",
                actual=value,
            ))

    if rule.enum_values is not None and value not in [v for v in rule.enum_values if isinstance(v, str)]:
        errors.append(_error(
            rule, path, "Value not in allowed set",
            expected=_one_of(rule.enum_values),
            actual=value,
        ))


def _validate_number(value: Any, rule: SchemaRule, path: str, errors: List[ValidationError]) -> None:
    if not utils._is_finite(value):
        errors.append(_error(
            rule, path, "Invalid numeric value",
            expected="A finite number",
            actual=utils._format_number(value),
        ))
        return

    if rule.min is not None and value < rule.min:
        errors.append(_error(
            rule, path, "Value too small",
            expected=f"At least {utils._format_number(rule.min)}",
            actual=utils._format_number(value),
        ))
    if rule.max is not None and value > rule.max:
        errors.append(_error(
            rule, path, "Value too large",
            expected=f"At most {utils._format_number(rule.max)}",
            actual=utils._format_number(value),
        ))

    if rule.enum_values is not None:
        bad = [v for v in rule.enum_values if not utils._is_number(v)]
        if bad:
            errors.append(_error(
                rule, path, "Invalid enum value type",
                expected=f"Numeric enum values for type '{rule.data_type}'",
                actual=", ".join(utils._format_value(v) for v in bad),
            ))
        elif not any(_numbers_equal(value, v) for v in rule.enum_values):
            errors.append(_error(
                rule, path, "Value not in allowed set",
                expected=_one_of(rule.enum_values),
                actual=utils._format_number(value),
            ))


def _numbers_equal(a: Any, b: Any) -> bool:
    if utils._is_integer(a) and utils._is_integer(b):
        return a == b
    try:
        return math.isclose(a, b, rel_tol=ENUM_REL_TOL, abs_tol=ENUM_REL_TOL)
    except OverflowError:
        # an int too large for a float can only equal itself
        return a == b


def _one_of(values: Iterable[Any]) -> str:
    return "One of: " + ", ".join(utils._format_value(v) for v in values)
