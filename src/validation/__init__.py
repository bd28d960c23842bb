"""Input validation and command-construction safety layer.

Validate untrusted specs and paths first, then escape the trusted values
right before they are joined into a shell command line.
"""

from .errors import (  # noqa: F401
    FileSpecError,
    FormatViolationError,
    MalformedInputError,
    PathTraversalError,
    ReservedNameError,
    ShellInjectionError,
    ValidationError,
)
from .package_spec import (  # noqa: F401
    FilePackageKind,
    FilePackageSpec,
    ValidationResult,
    resolve_file_package,
    validate_package_spec,
)
from .paths import validate_path  # noqa: F401
from .shell import (  # noqa: F401
    escape_posix_arg,
    escape_shell_arg,
    escape_windows_arg,
    join_shell_args,
)

__all__ = [
    "ValidationError",
    "MalformedInputError",
    "PathTraversalError",
    "ShellInjectionError",
    "ReservedNameError",
    "FormatViolationError",
    "FileSpecError",
    "FilePackageKind",
    "FilePackageSpec",
    "ValidationResult",
    "resolve_file_package",
    "validate_package_spec",
    "validate_path",
    "escape_shell_arg",
    "escape_posix_arg",
    "escape_windows_arg",
    "join_shell_args",
]
