"""Validation gates shared by the npm command wrappers.

Each wrapper passes untrusted values through these before any command line
is assembled; a rejection is logged for audit and re-raised unchanged.
"""

from __future__ import annotations

import logging
from typing import Optional

from common.logging_utils import extra_context
from validation import ValidationError, ValidationResult, validate_package_spec, validate_path

logger = logging.getLogger(__name__)


def require_valid_spec(
    package_spec: str,
    component: str,
    *,
    allow_file_packages: bool = False,
    base_dir: Optional[str] = None,
) -> ValidationResult:
    """Validate a package spec in throwing mode, logging the rejection."""
    try:
        return validate_package_spec(
            package_spec,
            allow_file_packages=allow_file_packages,
            throw_if_invalid=True,
            base_dir=base_dir,
        )
    except ValidationError as exc:
        logger.warning(
            "Rejected package spec %r: %s",
            package_spec,
            exc,
            extra=extra_context(event="validation_failed", component=component, rule=exc.kind),
        )
        raise


def require_valid_path(path: str, component: str, base_path: Optional[str] = None) -> str:
    """Validate a filesystem path, logging the rejection."""
    try:
        return validate_path(path, base_path)
    except ValidationError as exc:
        logger.warning(
            "Rejected path %r: %s",
            path,
            exc,
            extra=extra_context(event="validation_failed", component=component, rule=exc.kind),
        )
        raise
