"""Installed node / npm versions."""

from dataclasses import dataclass

from constants import Constants
from shell_exec import run


@dataclass
class VersionInfo:
    """Versions reported by the local toolchain, without a leading 'v'."""
    node_version: str
    npm_version: str


def _strip_v(text: str) -> str:
    text = text.strip()
    return text[1:] if text.startswith("v") else text


def get_version() -> VersionInfo:
    """Return the node and npm versions installed on this machine."""
    node_res = run(f"{Constants.NODE_BIN} --version", silent=True)
    npm_res = run(f"{Constants.NPM_BIN} --version", silent=True)
    return VersionInfo(node_version=_strip_v(node_res.stdout), npm_version=_strip_v(npm_res.stdout))
