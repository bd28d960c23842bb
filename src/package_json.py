"""package.json discovery and reading.

Walks up from a directory to the package root and loads its manifest,
checking the fields npmkit relies on against a Draft-07 JSON Schema.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, Optional

from common.schema import SchemaError, check_schema
from constants import Constants

logger = logging.getLogger(__name__)

_DEPENDENCY_MAP = {
    "type": "object",
    "additionalProperties": {"type": "string"},
}

PACKAGE_JSON_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "version": {"type": "string"},
        "dependencies": _DEPENDENCY_MAP,
        "devDependencies": _DEPENDENCY_MAP,
    },
}


class PackageJSONError(ValueError):
    """Raised when package.json cannot be found, parsed, or fails the schema."""


def find_package_root(start_dir: Optional[str] = None) -> str:
    """Return the nearest directory at or above ``start_dir`` holding package.json.

    Raises:
        PackageJSONError: If no ancestor contains package.json.
    """
    current = os.path.abspath(start_dir or os.getcwd())
    while True:
        if os.path.isfile(os.path.join(current, Constants.PACKAGE_JSON_FILE)):
            return current
        parent = os.path.dirname(current)
        if parent == current:
            raise PackageJSONError(f"No {Constants.PACKAGE_JSON_FILE} found at or above {start_dir}")
        current = parent


def get_package_json(pkg_dir: Optional[str] = None) -> Dict[str, Any]:
    """Load package.json for the package containing ``pkg_dir``.

    ``pkg_dir`` need only be inside the package, not its root. Defaults to
    the current working directory.
    """
    root = find_package_root(pkg_dir)
    package_path = os.path.join(root, Constants.PACKAGE_JSON_FILE)
    try:
        with open(package_path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise PackageJSONError(f"Could not read {package_path}: {exc}") from exc

    try:
        check_schema(PACKAGE_JSON_SCHEMA, data, Constants.PACKAGE_JSON_FILE)
    except SchemaError as exc:
        raise PackageJSONError(str(exc)) from exc
    logger.debug("Loaded %s", package_path)
    return data


def get_package_org_and_basename(
    pkg_dir: Optional[str] = None,
    pkg_json: Optional[Dict[str, Any]] = None,
) -> Dict[str, Optional[str]]:
    """Return ``{"org": ..., "basename": ...}`` for a package.

    Raises:
        ValueError: If both ``pkg_dir`` and ``pkg_json`` are given.
        PackageJSONError: If the manifest has no name.
    """
    if pkg_dir is not None:
        if pkg_json is not None:
            raise ValueError("get_package_org_and_basename: cannot specify both 'pkg_json' and 'pkg_dir'.")
        pkg_json = get_package_json(pkg_dir)
    elif pkg_json is None:
        pkg_json = get_package_json()

    name = pkg_json.get("name")
    if not name:
        raise PackageJSONError("package.json has no 'name'")

    if name.startswith("@"):
        org, _, basename = name[1:].partition("/")
        return {"org": org, "basename": basename}
    return {"org": None, "basename": name}
