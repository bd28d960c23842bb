"""Tests for YAML config and environment overrides applied to Constants."""

import logging

import pytest

import constants as constants_module
from constants import Constants


@pytest.fixture(autouse=True)
def clean_constants(monkeypatch):
    """Snapshot tunables and clear NPMKIT_* variables for each test."""
    for var in (
        Constants.ENV_CONFIG,
        Constants.ENV_NPM_BIN,
        Constants.ENV_NODE_BIN,
        Constants.ENV_EXEC_TIMEOUT,
    ):
        monkeypatch.delenv(var, raising=False)
    for attr in ("NPM_BIN", "NODE_BIN", "EXEC_TIMEOUT_SEC", "LOG_FORMAT"):
        monkeypatch.setattr(Constants, attr, getattr(Constants, attr))


class TestYamlConfig:
    """Values read from the config file."""

    def test_top_level_keys(self, tmp_path):
        cfg_file = tmp_path / "npmkit.yml"
        cfg_file.write_text("npm_bin: /usr/local/bin/npm\nexec_timeout: 42\n")
        cfg = constants_module._load_yaml_config(str(cfg_file))
        assert cfg == {"npm_bin": "/usr/local/bin/npm", "exec_timeout": 42}
        assert Constants.NPM_BIN == "/usr/local/bin/npm"
        assert Constants.EXEC_TIMEOUT_SEC == 42

    def test_npmkit_section(self, tmp_path):
        cfg_file = tmp_path / "config.yaml"
        cfg_file.write_text("npmkit:\n  node_bin: nodejs\n  log_format: '%(message)s'\nother: 1\n")
        constants_module._load_yaml_config(str(cfg_file))
        assert Constants.NODE_BIN == "nodejs"
        assert Constants.LOG_FORMAT == "%(message)s"

    def test_env_variable_names_the_file(self, tmp_path, monkeypatch):
        cfg_file = tmp_path / "c.yml"
        cfg_file.write_text("npm_bin: pnpm\n")
        monkeypatch.setenv(Constants.ENV_CONFIG, str(cfg_file))
        constants_module._load_yaml_config()
        assert Constants.NPM_BIN == "pnpm"

    def test_invalid_value_is_ignored(self, tmp_path, caplog):
        cfg_file = tmp_path / "c.yml"
        cfg_file.write_text("exec_timeout: soon\n")
        before = Constants.EXEC_TIMEOUT_SEC
        with caplog.at_level(logging.WARNING, logger="constants"):
            constants_module._load_yaml_config(str(cfg_file))
        assert Constants.EXEC_TIMEOUT_SEC == before
        assert "exec_timeout" in caplog.text

    def test_missing_file_warns(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="constants"):
            cfg = constants_module._load_yaml_config(str(tmp_path / "absent.yml"))
        assert cfg == {}
        assert "Config file not found" in caplog.text

    def test_malformed_yaml_is_logged(self, tmp_path, caplog):
        cfg_file = tmp_path / "bad.yml"
        cfg_file.write_text("npm_bin: [unterminated\n")
        with caplog.at_level(logging.ERROR, logger="constants"):
            cfg = constants_module._load_yaml_config(str(cfg_file))
        assert cfg == {}
        assert "Failed to load config" in caplog.text

    def test_non_mapping_is_ignored(self, tmp_path):
        cfg_file = tmp_path / "list.yml"
        cfg_file.write_text("- npm_bin\n")
        before = Constants.NPM_BIN
        constants_module._load_yaml_config(str(cfg_file))
        assert Constants.NPM_BIN == before


class TestEnvOverrides:
    def test_env_beats_file(self, tmp_path, monkeypatch):
        cfg_file = tmp_path / "c.yml"
        cfg_file.write_text("npm_bin: from-file\nexec_timeout: 10\n")
        monkeypatch.setenv(Constants.ENV_NPM_BIN, "  from-env  ")
        monkeypatch.setenv(Constants.ENV_EXEC_TIMEOUT, "99")
        constants_module._load_yaml_config(str(cfg_file))
        assert Constants.NPM_BIN == "from-env"
        assert Constants.EXEC_TIMEOUT_SEC == 99

    def test_bad_timeout_env(self, monkeypatch):
        monkeypatch.setenv(Constants.ENV_EXEC_TIMEOUT, "never")
        before = Constants.EXEC_TIMEOUT_SEC
        constants_module._load_yaml_config()
        assert Constants.EXEC_TIMEOUT_SEC == before

    def test_blank_binary_env_is_ignored(self, monkeypatch):
        monkeypatch.setenv(Constants.ENV_NODE_BIN, "   ")
        before = Constants.NODE_BIN
        constants_module._load_yaml_config()
        assert Constants.NODE_BIN == before
