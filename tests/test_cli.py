"""Tests for the command-line interface."""

import json
from pathlib import Path

import pytest
from git import Repo
from typer.testing import CliRunner

from branchnamelint.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("GITHUB_REF", raising=False)
    monkeypatch.setattr("branchnamelint.cli.find_config_file", lambda: None)


@pytest.fixture
def json_config(tmp_path: Path) -> Path:
    path = tmp_path / "sample-configuration.json"
    path.write_text(json.dumps({"prefixes": ["feature", "hotfix"], "disallowed": ["main"]}))
    return path


@pytest.fixture
def python_config(tmp_path: Path) -> Path:
    path = tmp_path / "sample-configuration.py"
    path.write_text("config = {'prefixes': ['feature', 'hotfix', 'ci', 'build']}\n")
    return path


def test_valid_branch_exits_zero():
    result = runner.invoke(app, ["--branch", "feature/valid-branch"])
    assert result.exit_code == 0
    assert result.output == ""


def test_invalid_branch_exits_one():
    result = runner.invoke(app, ["--branch", "invalid-branch"])
    assert result.exit_code == 1
    assert 'Branch name lint fail! Branch "invalid-branch" must contain a separator "/".' in result.output


def test_suggestion_is_printed():
    result = runner.invoke(app, ["--branch", "feat/login"])
    assert result.exit_code == 1
    assert 'Instead of "feat/login" try "feature/login".' in result.output


def test_config_file_argument(json_config: Path):
    assert runner.invoke(app, [str(json_config), "--branch", "main"]).exit_code == 1
    assert runner.invoke(app, [str(json_config), "--branch", "release/1.0"]).exit_code == 1
    assert runner.invoke(app, [str(json_config), "--branch", "hotfix/1.0"]).exit_code == 0


def test_python_config_extends_prefixes(json_config: Path, python_config: Path):
    assert runner.invoke(app, [str(json_config), "-b", "ci/build-test"]).exit_code == 1
    assert runner.invoke(app, [str(python_config), "-b", "ci/build-test"]).exit_code == 0


def test_missing_config_file(tmp_path: Path):
    result = runner.invoke(app, [str(tmp_path / "nope.json"), "--branch", "feature/x"])
    assert result.exit_code == 1
    assert "Configuration file not found" in result.output


def test_invalid_regex_reported(tmp_path: Path):
    path = tmp_path / "bad-regex.json"
    path.write_text(json.dumps({"regex": "["}))
    result = runner.invoke(app, [str(path), "--branch", "feature/x"])
    assert result.exit_code == 1
    assert "Invalid regex" in result.output


def test_branch_from_environment(monkeypatch):
    monkeypatch.setenv("GITHUB_REF", "refs/heads/feature/from-ci")
    result = runner.invoke(app, ["--verbose"])
    assert result.exit_code == 0
    assert "feature/from-ci (from environment variable)" in result.output


def test_verbose_output():
    result = runner.invoke(app, ["--branch", "hotfix/x", "-v"])
    assert result.exit_code == 0
    assert "Config: built-in defaults" in result.output
    assert "✔ Branch name valid: hotfix/x" in result.output


def test_branch_from_git(git_repo: Repo, json_config: Path):
    git_repo.create_head("invalid-branch").checkout()
    assert runner.invoke(app, [str(json_config)]).exit_code == 1

    git_repo.create_head("feature/valid-branch").checkout()
    assert runner.invoke(app, [str(json_config)]).exit_code == 0


def test_outside_repository(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path.parent))
    result = runner.invoke(app, [])
    assert result.exit_code == 1
    assert "Could not determine the current branch" in result.output


@pytest.mark.parametrize("value", ["feature", 5])
def test_invalid_config_value_reported(tmp_path: Path, value):
    path = tmp_path / "typo.json"
    path.write_text(json.dumps({"prefixes": value}))
    result = runner.invoke(app, [str(path), "--branch", "feature/x"])
    assert result.exit_code == 1
    assert "✘ Invalid value for 'prefixes'" in result.output
    assert not isinstance(result.exception, TypeError)


def test_discovery_survives_non_object_package_json(tmp_path: Path, monkeypatch):
    monkeypatch.undo()
    monkeypatch.delenv("GITHUB_REF", raising=False)
    monkeypatch.chdir(tmp_path)
    (tmp_path / "package.json").write_text("[]")
    result = runner.invoke(app, ["--branch", "feature/x"])
    assert result.exit_code == 0
