"""Package spec parsing utilities.

These helpers split a spec into its parts; they do not decide whether the
spec is safe. Run untrusted input through validation.validate_package_spec
first.
"""

from dataclasses import dataclass
from typing import Optional, Tuple

from package_json import get_package_json


@dataclass
class ParsedSpec:
    """Name parts of a package spec."""
    name: str  # '@org/basename' for scoped packages
    basename: str
    org: Optional[str] = None
    version: Optional[str] = None  # any dist-tag or range, not only semver


def get_package_name_and_version(package_spec: str) -> Tuple[str, Optional[str]]:
    """Return (name, version or None).

    Scoped specs split on the last '@' so the scope marker is kept.
    """
    if package_spec.startswith("@"):
        i = package_spec.rfind("@")
        if i > 0:
            return package_spec[:i], package_spec[i + 1:]
        return package_spec, None
    name, sep, version = package_spec.partition("@")
    return name, (version if sep else None)


def parse_package_spec(package_spec: str) -> ParsedSpec:
    """Split a spec into name, org, basename and version.

    The version can be semver or any tag, so it is not validated here.
    """
    if package_spec.startswith("@"):
        org, _, remainder = package_spec[1:].partition("/")
        basename, sep, version = remainder.partition("@")
        return ParsedSpec(
            name=f"@{org}/{basename}",
            basename=basename,
            org=org,
            version=version if sep else None,
        )
    basename, sep, version = package_spec.partition("@")
    return ParsedSpec(name=basename, basename=basename, version=version if sep else None)


def get_package_org_basename_and_version(
    package_spec: Optional[str] = None,
    *,
    pkg_dir: Optional[str] = None,
    pkg_json: Optional[dict] = None,
) -> ParsedSpec:
    """Describe a package from exactly one of a spec, a directory, or parsed package.json.

    Raises:
        ValueError: Unless exactly one source is given.
    """
    sources = [s for s in (package_spec, pkg_dir, pkg_json) if s is not None]
    if len(sources) != 1:
        raise ValueError(
            "get_package_org_basename_and_version accepts exactly one of "
            "'package_spec', 'pkg_dir', or 'pkg_json'."
        )

    if package_spec is not None:
        return parse_package_spec(package_spec)

    if pkg_dir is not None:
        pkg_json = get_package_json(pkg_dir)
    parsed = parse_package_spec(pkg_json["name"])
    parsed.version = pkg_json.get("version")
    return parsed
