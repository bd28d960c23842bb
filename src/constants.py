"""Constants used in the project."""

import logging
import os

logger = logging.getLogger(__name__)


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    NPM_BIN = "npm"
    NODE_BIN = "node"
    EXEC_TIMEOUT_SEC = 300  # Timeout in seconds for external npm/node commands

    PACKAGE_JSON_FILE = "package.json"
    FILE_PROTOCOL_PREFIX = "file:"
    TARBALL_SUFFIXES = (".tgz", ".tar.gz")
    MAX_PACKAGE_NAME_LENGTH = 214  # npm registry limit
    RESERVED_PACKAGE_NAMES = ("node_modules", "favicon.ico", "package.json", ".", "..")

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_CONFIG = "NPMKIT_CONFIG"
    ENV_LOG_LEVEL = "NPMKIT_LOG_LEVEL"
    ENV_NPM_BIN = "NPMKIT_NPM_BIN"
    ENV_NODE_BIN = "NPMKIT_NODE_BIN"
    ENV_EXEC_TIMEOUT = "NPMKIT_EXEC_TIMEOUT"


# Keys accepted from the YAML config file, mapped onto Constants attributes.
_CONFIG_KEYS = {
    "npm_bin": ("NPM_BIN", str),
    "node_bin": ("NODE_BIN", str),
    "exec_timeout": ("EXEC_TIMEOUT_SEC", int),
    "log_format": ("LOG_FORMAT", str),
}


def _apply_config(cfg):
    """Copy recognised keys from a parsed config mapping onto Constants."""
    if not isinstance(cfg, dict):
        logger.warning("Ignoring config: expected a mapping, got %s", type(cfg).__name__)
        return
    section = cfg.get("npmkit", cfg)
    if not isinstance(section, dict):
        return
    for key, (attr, cast) in _CONFIG_KEYS.items():
        if key not in section:
            continue
        try:
            setattr(Constants, attr, cast(section[key]))
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid config value for %s: %r", key, section[key])


def _apply_env_overrides():
    """Environment variables win over the config file."""
    npm_bin = os.environ.get(Constants.ENV_NPM_BIN)
    if npm_bin and npm_bin.strip():
        Constants.NPM_BIN = npm_bin.strip()
    node_bin = os.environ.get(Constants.ENV_NODE_BIN)
    if node_bin and node_bin.strip():
        Constants.NODE_BIN = node_bin.strip()
    timeout = os.environ.get(Constants.ENV_EXEC_TIMEOUT)
    if timeout:
        try:
            Constants.EXEC_TIMEOUT_SEC = int(timeout)
        except ValueError:
            logger.warning("Ignoring invalid %s: %r", Constants.ENV_EXEC_TIMEOUT, timeout)


def _load_yaml_config(path=None):
    """Load the optional YAML config file and apply overrides to Constants.

    Args:
        path (str, optional): Config file path. Defaults to $NPMKIT_CONFIG.

    Returns:
        dict: The parsed config, or an empty dict when none was loaded.
    """
    import yaml  # pylint: disable=import-outside-toplevel

    config_path = path or os.environ.get(Constants.ENV_CONFIG)
    cfg = {}
    if config_path:
        if not os.path.isfile(config_path):
            logger.warning("Config file not found: %s", config_path)
        else:
            try:
                with open(config_path, "r", encoding="utf-8") as fh:
                    cfg = yaml.safe_load(fh) or {}
            except (OSError, yaml.YAMLError) as exc:
                logger.error("Failed to load config %s: %s", config_path, exc)
                cfg = {}
            _apply_config(cfg)
    _apply_env_overrides()
    return cfg


_load_yaml_config()
