"""Tests for the npm update wrapper."""

import json
import shlex

import pytest

import commands.update as update_module
from commands.update import UpdateResult, update
from constants import Constants
from common.schema import SchemaError
from package_json import PackageJSONError
from shell_exec import CommandError, ExecResult
from validation import ShellInjectionError
from validation import shell as shell_module


class _FakeNpm:
    """Answers 'outdated' and 'install' commands with canned output."""

    def __init__(self, outdated, outdated_code=1, install_stdout="{}", install_code=0):
        self.outdated = outdated
        self.outdated_code = outdated_code
        self.install_stdout = install_stdout
        self.install_code = install_code
        self.calls = []

    def __call__(self, command_line, **kwargs):
        self.calls.append((command_line, kwargs))
        if " outdated" in command_line:
            stdout = self.outdated if isinstance(self.outdated, str) else json.dumps(self.outdated)
            return ExecResult(command_line, stdout, "", self.outdated_code)
        return ExecResult(command_line, self.install_stdout, "", self.install_code)


@pytest.fixture
def project(tmp_path, monkeypatch):
    (tmp_path / "package.json").write_text(json.dumps({"name": "my-app", "version": "1.0.0"}))
    monkeypatch.setattr(shell_module, "_is_windows", lambda: False)
    monkeypatch.setattr(Constants, "NPM_BIN", "npm")
    return tmp_path


def _install(monkeypatch, fake):
    monkeypatch.setattr(update_module, "run", fake)
    return fake


class TestUpdateArguments:
    """global / project_path exclusivity."""

    def test_requires_target(self):
        with pytest.raises(ValueError, match="Must either set 'global_install'"):
            update()

    def test_rejects_both(self, project):
        with pytest.raises(ValueError, match="do one or the other"):
            update(project_path=str(project), global_install=True)

    def test_rejects_unsafe_package(self, project, monkeypatch):
        fake = _install(monkeypatch, _FakeNpm({}))
        with pytest.raises(ShellInjectionError):
            update(project_path=str(project), packages=["lodash;id"])
        assert fake.calls == []

    def test_missing_package_json(self, tmp_path, monkeypatch):
        _install(monkeypatch, _FakeNpm({}))
        monkeypatch.setattr("package_json.find_package_root", _raise_missing)
        with pytest.raises(PackageJSONError):
            update(project_path=str(tmp_path))


def _raise_missing(start_dir=None):
    raise PackageJSONError("No package.json found")


class TestUpdateFlow:
    """outdated -> install sequence."""

    def test_no_updates(self, project, monkeypatch):
        fake = _install(monkeypatch, _FakeNpm({}, outdated_code=0))
        result = update(project_path=str(project))
        assert result == UpdateResult(updated=False, actions=["No updates found for 'my-app'."])
        assert len(fake.calls) == 1
        assert fake.calls[0][1]["cwd"] == str(project)

    def test_global_no_updates(self, project, monkeypatch):
        fake = _install(monkeypatch, _FakeNpm("", outdated_code=0))
        result = update(global_install=True)
        assert result.actions == ["No updates found for global packages."]
        assert shlex.split(fake.calls[0][0]) == ["npm", "--global", "--json", "outdated"]
        assert fake.calls[0][1]["cwd"] is None

    def test_updates_wanted_versions(self, project, monkeypatch):
        outdated = {
            "lodash": {"current": "4.17.0", "wanted": "4.17.21", "latest": "4.17.21"},
            "chalk": {"current": "4.1.0", "wanted": "4.1.2", "latest": "5.3.0"},
        }
        fake = _install(monkeypatch, _FakeNpm(outdated, install_stdout='{"added": 0}'))
        result = update(project_path=str(project))

        assert result.updated is True
        assert result.result == {"added": 0}
        assert "Updated lodash@4.17.0 to 4.17.21 (latest)" in result.actions
        assert "Updated chalk@4.1.0 to 4.1.2" in result.actions
        assert any("Update available for chalk@4.1.0 to 5.3.0" in a for a in result.actions)

        install_cmd = fake.calls[1][0]
        assert shlex.split(install_cmd) == ["npm", "install", "--json", "lodash@4.17.21", "chalk@4.1.2"]

    def test_in_range_but_newer_major(self, project, monkeypatch):
        outdated = {"react": {"current": "17.0.2", "wanted": "17.0.2", "latest": "18.2.0"}}
        fake = _install(monkeypatch, _FakeNpm(outdated))
        result = update(project_path=str(project))
        assert result.updated is False
        assert result.actions == [
            "react@17.0.2 is the latest in-range version.",
            "Update available for react@17.0.2 to 18.2.0, but was not automatically installed.",
        ]
        assert len(fake.calls) == 1

    def test_prerelease_counts_as_newer(self, project, monkeypatch):
        outdated = {"vite": {"current": "5.0.0", "wanted": "5.0.0", "latest": "5.1.0-beta.1"}}
        _install(monkeypatch, _FakeNpm(outdated))
        result = update(project_path=str(project))
        assert any("to 5.1.0-beta.1" in a for a in result.actions)

    def test_dry_run(self, project, monkeypatch):
        outdated = {"lodash": {"current": "4.17.0", "wanted": "4.17.21", "latest": "4.17.21"}}
        fake = _install(monkeypatch, _FakeNpm(outdated))
        result = update(project_path=str(project), dry_run=True, packages=["lodash"])
        assert result.actions[0].startswith("DRY RUN: ")
        assert shlex.split(fake.calls[0][0]) == ["npm", "--json", "outdated", "lodash"]
        assert "--dry-run" in shlex.split(fake.calls[1][0])

    def test_global_update_passes_flag(self, project, monkeypatch):
        outdated = {"npm": {"current": "10.0.0", "wanted": "10.2.0", "latest": "10.2.0"}}
        fake = _install(monkeypatch, _FakeNpm(outdated))
        update(global_install=True)
        assert "--global" in shlex.split(fake.calls[1][0])


class TestUpdateErrors:
    """Failure reporting."""

    def test_outdated_failure(self, project, monkeypatch):
        _install(monkeypatch, _FakeNpm("", outdated_code=254))
        with pytest.raises(CommandError, match="error gathering update data"):
            update(project_path=str(project))

    def test_unparsable_outdated(self, project, monkeypatch):
        _install(monkeypatch, _FakeNpm("not json"))
        with pytest.raises(CommandError, match="Could not parse update data"):
            update(project_path=str(project))

    def test_outdated_schema_mismatch(self, project, monkeypatch):
        _install(monkeypatch, _FakeNpm({"lodash": {"current": "1.0.0"}}))
        with pytest.raises(SchemaError, match="npm outdated report"):
            update(project_path=str(project))

    def test_unsafe_name_from_npm_output(self, project, monkeypatch):
        outdated = {"evil$(id)": {"current": "1.0.0", "wanted": "1.0.1", "latest": "1.0.1"}}
        fake = _install(monkeypatch, _FakeNpm(outdated))
        with pytest.raises(ShellInjectionError):
            update(project_path=str(project))
        assert len(fake.calls) == 1

    def test_install_failure(self, project, monkeypatch):
        outdated = {"lodash": {"current": "4.17.0", "wanted": "4.17.21", "latest": "4.17.21"}}
        _install(monkeypatch, _FakeNpm(outdated, install_code=1))
        with pytest.raises(CommandError, match="error updating 'my-app'"):
            update(project_path=str(project))
