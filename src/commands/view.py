"""npm view wrapper."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from constants import Constants
from shell_exec import CommandError, run
from validation import escape_shell_arg

from .guards import require_valid_spec

logger = logging.getLogger(__name__)


class PackageNotFoundError(LookupError):
    """Raised when the registry has no such package or version."""


def _error_code(stdout: str) -> Optional[str]:
    """Pull ``error.code`` out of npm's JSON error document, if any."""
    try:
        data = json.loads(stdout)
    except ValueError:
        return None
    if isinstance(data, dict) and isinstance(data.get("error"), dict):
        return data["error"].get("code")
    return None


def view(
    package_name: str,
    version: Optional[str] = None,
    *,
    throw_on_not_found: bool = False,
) -> Optional[Any]:
    """Fetch registry metadata with ``npm view --json``.

    Args:
        package_name: Package to look up.
        version: A version, range or dist-tag. Latest when omitted.
        throw_on_not_found: Raise instead of returning None when the
            package or version does not exist.

    Returns:
        The parsed JSON document, or None when nothing matched.

    Raises:
        ValueError: If ``package_name`` is missing.
        ValidationError: If the name or version is unsafe.
        PackageNotFoundError: When nothing matched and
            ``throw_on_not_found`` is set.
        CommandError: If npm fails for another reason or its output
            cannot be parsed.
    """
    if not package_name:
        raise ValueError("Must provide 'package_name'.")

    package_spec = f"{package_name}@{version}" if version else package_name
    package_spec = require_valid_spec(package_spec, "view").clean_spec

    cmd = f"{Constants.NPM_BIN} view --json {escape_shell_arg(package_spec)}"
    result = run(cmd, silent=True, no_throw=True)

    if result.code != 0:
        code = _error_code(result.stdout) or _error_code(result.stderr)
        if code not in (None, "E404"):
            raise CommandError(f"npm view failed for '{package_spec}'; {result.summary}", result)
        if throw_on_not_found:
            raise PackageNotFoundError(f"Package '{package_spec}' not found in registry.")
        logger.debug("Package %s not found in registry", package_spec)
        return None

    # npm exits 0 with no output when the package exists but the version does not
    if not result.stdout.strip():
        if throw_on_not_found:
            raise PackageNotFoundError(f"No match found for version {version} of '{package_name}'.")
        return None

    try:
        return json.loads(result.stdout)
    except json.JSONDecodeError as exc:
        raise CommandError(f"Could not parse npm view output for '{package_spec}': {exc}", result) from exc
