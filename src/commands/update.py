"""npm outdated / update wrapper."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import semantic_version

from constants import Constants
from common.schema import check_schema
from package_json import get_package_json
from shell_exec import CommandError, run
from validation import escape_shell_arg

from .guards import require_valid_path, require_valid_spec

logger = logging.getLogger(__name__)

OUTDATED_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "additionalProperties": {
        "type": "object",
        "properties": {
            "current": {"type": "string"},
            "wanted": {"type": "string"},
            "latest": {"type": "string"},
        },
        "required": ["wanted", "latest"],
    },
}


@dataclass
class UpdateResult:
    """Outcome of an update run."""

    updated: bool
    actions: List[str] = field(default_factory=list)
    result: Optional[Any] = None  # JSON emitted by 'npm --json install'


def _is_newer(latest: str, current: Optional[str]) -> bool:
    """True if ``latest`` is a higher semver than ``current``, prereleases included."""
    if not current:
        return False
    try:
        return semantic_version.Version(latest) > semantic_version.Version(current)
    except ValueError:
        logger.debug("Cannot compare versions %r and %r", latest, current)
        return False


def update(
    *,
    project_path: Optional[str] = None,
    global_install: bool = False,
    packages: Optional[List[str]] = None,
    dry_run: bool = False,
) -> UpdateResult:
    """Update project dependencies or global installs to their wanted versions.

    Exactly one of ``project_path`` and ``global_install`` must be given.
    Newer versions outside the declared range are reported in the actions
    but not installed.

    Raises:
        ValueError: On contradictory or missing arguments.
        ValidationError: If a package name or the project path is unsafe.
        CommandError: If npm fails or its output cannot be understood.
    """
    if project_path is None and not global_install:
        raise ValueError("Must either set 'global_install' or provide 'project_path'.")
    if project_path is not None and global_install:
        raise ValueError("Cannot set 'global_install' and specify 'project_path'; do one or the other.")

    packages = packages or []
    for spec in packages:
        require_valid_spec(spec, "update")

    cwd = None
    package_name = None
    if project_path is not None:
        cwd = require_valid_path(project_path, "update")
        package_name = get_package_json(cwd).get("name")
    target = f"'{package_name}'" if package_name else "global packages"

    global_bit = ["--global"] if global_install else []

    # 'npm outdated' exits 1 when anything is outdated
    outdated_cmd = " ".join(
        [Constants.NPM_BIN, *global_bit, "--json", "outdated"]
        + [escape_shell_arg(spec.strip()) for spec in packages]
    )
    outdated = run(outdated_cmd, cwd=cwd, silent=True, no_throw=True)
    if outdated.code not in (0, 1):
        raise CommandError(f"There was an error gathering update data; {outdated.summary}", outdated)
    if outdated.stderr.strip():
        logger.warning("npm outdated reported: %s", outdated.stderr.strip())

    try:
        outdated_data = json.loads(outdated.stdout) if outdated.stdout.strip() else {}
    except json.JSONDecodeError as exc:
        raise CommandError(f"Could not parse update data '{outdated.stdout}': {exc}", outdated) from exc
    check_schema(OUTDATED_SCHEMA, outdated_data, "npm outdated report")

    actions: List[str] = []
    if not outdated_data:
        actions.append(f"No updates found for {target}.")
        return UpdateResult(updated=False, actions=actions)

    targets = []
    for pkg_name, info in outdated_data.items():
        current, wanted, latest = info.get("current"), info["wanted"], info["latest"]
        if current != wanted:
            spec = f"{pkg_name}@{wanted}"
            require_valid_spec(spec, "update")
            targets.append(escape_shell_arg(spec))
            note = " (latest)" if wanted == latest else ""
            actions.append(f"{'DRY RUN: ' if dry_run else ''}Updated {pkg_name}@{current} to {wanted}{note}")
        else:
            actions.append(f"{pkg_name}@{current} is the latest in-range version.")
        if _is_newer(latest, current):
            actions.append(
                f"Update available for {pkg_name}@{current} to {latest}, but was not automatically installed."
            )

    if not targets:
        return UpdateResult(updated=False, actions=actions)

    update_parts = [Constants.NPM_BIN, "install", *global_bit, "--json"]
    if dry_run:
        update_parts.append("--dry-run")
    update_cmd = " ".join(update_parts + targets)

    update_result = run(update_cmd, cwd=cwd, silent=True, no_throw=True)
    if update_result.code != 0:
        where = f"{target} at {project_path}" if package_name else target
        raise CommandError(f"There was an error updating {where}; {update_result.summary}", update_result)

    try:
        parsed = json.loads(update_result.stdout) if update_result.stdout.strip() else None
    except json.JSONDecodeError as exc:
        raise CommandError(f"Could not parse update output: {exc}", update_result) from exc

    return UpdateResult(updated=True, actions=actions, result=parsed)
