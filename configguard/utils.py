"""
utils.py – shared, low-level helpers for the configguard package.

This module consolidates common helpers for:
- Type naming (runtime value tree → schema type vocabulary)
- Numeric checks (bool-aware integer test, finiteness)
- Display helpers (numbers and values as they appear in error reports)
"""

from __future__ import annotations

import json
import math
from typing import Any, Mapping

# --------------------------------------------------------------------------- #
# Type Checking Helpers                                                       #
# --------------------------------------------------------------------------- #

def _is_integer(value: Any) -> bool:
    """True for ``int`` values; ``bool`` is an ``int`` subclass and excluded."""
    return isinstance(value, int) and not isinstance(value, bool)


def _is_float(value: Any) -> bool:
    return isinstance(value, float)


def _is_number(value: Any) -> bool:
    """True for integers and floats, never for booleans."""
    return _is_integer(value) or _is_float(value)


def _is_finite(value: Any) -> bool:
    """Integers are always finite; floats must not be NaN or ±inf."""
    return _is_integer(value) or math.isfinite(value)


def _type_name(value: Any) -> str:
    """Return the schema type name describing the runtime *value*."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if _is_integer(value):
        return "integer"
    if _is_float(value):
        return "float"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, list):
        return "list"
    return "unknown"


# --------------------------------------------------------------------------- #
# Display Helpers                                                             #
# --------------------------------------------------------------------------- #

def _format_number(value: Any) -> str:
    """Render a number the way reports show it (``120``, ``1.5``, ``NaN``)."""
    if _is_integer(value):
        return str(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _format_value(value: Any) -> str:
    """Render any value-tree node compactly (strings are quoted)."""
    if _is_number(value):
        return _format_number(value)
    try:
        return json.dumps(value, ensure_ascii=False, default=str)
    except ValueError:  # circular structures
        return repr(value)
