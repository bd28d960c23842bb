"""Filesystem path validation for paths used directly as shell arguments."""

from __future__ import annotations

import logging
import os
import re
from typing import Optional

from common.logging_utils import extra_context

from .errors import MalformedInputError, PathTraversalError, ShellInjectionError

logger = logging.getLogger(__name__)

# Broader than the package-spec class: globs and tilde expansion are rejected too.
PATH_SHELL_CHARS = re.compile(r"[;&|`$(){}\[\]<>!*?~\n\r]")


def validate_path(path, base_path: Optional[str] = None) -> str:
    """Validate a filesystem path for shell safety and optional containment.

    Args:
        path: The path to check.
        base_path: When given, the path (joined onto it) must resolve inside it.

    Returns:
        The trimmed path, otherwise unmodified.

    Raises:
        ValidationError: If the path is malformed, contains shell
            metacharacters, or escapes ``base_path``.
    """
    if not isinstance(path, str) or not path:
        raise MalformedInputError("Path must be a non-empty string")

    trimmed = path.strip()
    if not trimmed:
        raise MalformedInputError("Path cannot be empty or whitespace")

    if PATH_SHELL_CHARS.search(trimmed):
        raise ShellInjectionError("Path contains shell metacharacters")

    if base_path:
        resolved_base = os.path.realpath(base_path)
        resolved_target = os.path.realpath(os.path.join(resolved_base, trimmed))
        if not is_within(resolved_target, resolved_base):
            logger.warning(
                "Rejected path outside base: %s",
                trimmed,
                extra=extra_context(
                    event="validation_failed",
                    component="paths",
                    rule=PathTraversalError.kind,
                ),
            )
            raise PathTraversalError("Path traversal detected")

    return trimmed


def is_within(target: str, base: str) -> bool:
    """True if canonical ``target`` is ``base`` or lies beneath it."""
    if target == base:
        return True
    prefix = base if base.endswith(os.sep) else base + os.sep
    return target.startswith(prefix)
