"""
configguard – schema-driven validation for YAML and JSON configuration files.
"""
__version__ = "0.1.0"

from .errors import ConfigGuardError, PatternError, SchemaError, ValidationFailed
from .schema import Schema, SchemaRule, SchemaType
from .document import Document, DocumentFormat
from .validator import ValidationError, ValidationResult, validate
from .guard import ConfigGuard
from .report import format_result

__all__ = [
    "ConfigGuard",
    "ConfigGuardError",
    "Document",
    "DocumentFormat",
    "PatternError",
    "Schema",
    "SchemaError",
    "SchemaRule",
    "SchemaType",
    "ValidationError",
    "ValidationFailed",
    "ValidationResult",
    "format_result",
    "validate",
]
