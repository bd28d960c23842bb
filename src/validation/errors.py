"""Error taxonomy for input validation.

Every error here is a client/input fault: never transient, never retryable.
``status_code`` and ``expose`` carry HTTP 400 semantics for callers that
surface them over an API.
"""

from __future__ import annotations


class ValidationError(ValueError):
    """Raised when an untrusted value fails a validation rule."""

    status_code = 400
    expose = True
    kind = "validation"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MalformedInputError(ValidationError):
    """Wrong type, empty, or whitespace-only input."""

    kind = "malformed_input"


class PathTraversalError(ValidationError):
    """``..``, backslash, or a resolved path escaping its base."""

    kind = "path_traversal"


class ShellInjectionError(ValidationError):
    """A disallowed shell metacharacter is present."""

    kind = "shell_injection"


class ReservedNameError(ValidationError):
    """Collides with a filesystem or registry special name."""

    kind = "reserved_name"


class FormatViolationError(ValidationError):
    """Fails the npm package name grammar or length limit."""

    kind = "format_violation"


class FileSpecError(ValidationError):
    """A ``file:`` spec is disallowed, missing, of the wrong type, or lacks a manifest."""

    kind = "file_spec"
