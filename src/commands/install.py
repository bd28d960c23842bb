"""npm install wrapper."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from constants import Constants
from shell_exec import run
from spec_parser import parse_package_spec
from validation import escape_shell_arg

from .guards import require_valid_path, require_valid_spec

logger = logging.getLogger(__name__)


@dataclass
class InstallResult:
    """Which specs were installed, and from where."""

    installed_packages: List[str] = field(default_factory=list)
    local_packages: List[str] = field(default_factory=list)
    production_packages: List[str] = field(default_factory=list)


def find_local_package(dev_paths: Iterable[str], package_spec: str) -> Optional[str]:
    """Look for a local checkout of ``package_spec`` under any of ``dev_paths``.

    A candidate matches when its package.json ``name`` equals the spec's name.

    Returns:
        The package directory, or None if there is no local copy.
    """
    parsed = parse_package_spec(package_spec)
    if parsed.org is None:
        pkg_path = os.path.join(parsed.basename, Constants.PACKAGE_JSON_FILE)
    else:
        pkg_path = os.path.join(parsed.org, parsed.basename, Constants.PACKAGE_JSON_FILE)

    for dev_path in dev_paths:
        # dev trees are laid out either as 'org/name' or '@org/name'
        for test_path in (
            os.path.join(dev_path, Constants.PACKAGE_JSON_FILE),
            os.path.join(dev_path, pkg_path),
            os.path.join(dev_path, "@" + pkg_path),
        ):
            if not os.path.isfile(test_path):
                continue
            try:
                with open(test_path, "r", encoding="utf-8") as fh:
                    test_name = json.load(fh).get("name")
            except (OSError, ValueError, AttributeError) as exc:
                logger.debug("Skipping unreadable %s: %s", test_path, exc)
                continue
            if test_name == parsed.name:
                return os.path.dirname(test_path)
    return None


def install(
    packages: List[str],
    *,
    project_path: Optional[str] = None,
    global_install: bool = False,
    save_dev: bool = False,
    save_prod: bool = False,
    dev_paths: Optional[List[str]] = None,
    verbose: bool = False,
    allow_file_packages: bool = False,
) -> InstallResult:
    """Install packages with ``npm install``.

    Args:
        packages: Specs to install; at least one is required.
        project_path: Project to install into. Required unless global.
        global_install: Install globally.
        save_dev: Save as a development dependency.
        save_prod: Save as a production dependency.
        dev_paths: Directories searched for local checkouts, which are
            installed in place of the registry package.
        verbose: Echo npm output.
        allow_file_packages: Accept ``file:`` specs.

    Returns:
        InstallResult listing installed, local, and registry packages.

    Raises:
        ValueError: On contradictory or missing arguments.
        ValidationError: If any spec or path is unsafe.
        CommandError: If npm fails.
    """
    if not packages:
        raise ValueError("No 'packages' specified; specify at least one package.")
    if save_dev and save_prod:
        raise ValueError("Both 'save_dev' and 'save_prod' were specified.")
    if project_path is None and not global_install:
        raise ValueError("Must specify 'project_path' for non-global installs.")

    cwd = require_valid_path(project_path, "install") if project_path is not None else None
    # npm runs in cwd, so relative file: specs are checked against it too
    checked = [
        require_valid_spec(spec, "install", allow_file_packages=allow_file_packages, base_dir=cwd)
        for spec in packages
    ]
    checked_dev_paths = [require_valid_path(p, "install") for p in (dev_paths or [])]

    result = InstallResult()
    install_args = []
    for spec, spec_check in zip(packages, checked):
        result.installed_packages.append(spec)
        if spec_check.is_file_package:
            result.production_packages.append(spec)
            install_args.append(Constants.FILE_PROTOCOL_PREFIX + spec_check.resolved_path)
            continue
        local_path = None
        if checked_dev_paths:
            local_path = find_local_package(checked_dev_paths, spec_check.clean_spec)
        if local_path is not None:
            logger.info("Using local package for %s: %s", spec, local_path)
            result.local_packages.append(spec)
            install_args.append(local_path)
        else:
            result.production_packages.append(spec)
            install_args.append(spec_check.clean_spec)

    parts = [Constants.NPM_BIN, "install"]
    if global_install:
        parts.append("--global")
    if save_dev:
        parts.append("--save-dev")
    elif save_prod:
        parts.append("--save-prod")
    parts.extend(escape_shell_arg(arg) for arg in install_args)

    run(" ".join(parts), cwd=cwd, silent=not verbose)
    return result
