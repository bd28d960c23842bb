"""JSON Schema helpers for checking JSON read from disk or emitted by npm.

Wraps jsonschema Draft7 validation and reports the first error with the
JSON path that failed.
"""

from __future__ import annotations

from typing import Any, Dict

from jsonschema import Draft7Validator


class SchemaError(ValueError):
    """Raised when data fails to validate against a provided schema."""


def check_schema(schema: Dict[str, Any], data: Any, label: str) -> None:
    """Validate ``data`` strictly and raise on the first error.

    Args:
        schema: Draft-07 JSON Schema dict.
        data: Parsed JSON to validate.
        label: What is being validated, used in the message.
    """
    validator = Draft7Validator(schema)
    errs = sorted(validator.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    if errs:
        first = errs[0]
        path = "/".join([str(p) for p in first.path])
        raise SchemaError(f"Invalid {label} at '{path}': {first.message}")
