"""Tests for the CLI interface."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from pathgate import __version__
from pathgate.cli import main

PATHS = "code: src/**\ndocs: docs/**\ntests: test/**\n"


@pytest.fixture
def runner():
    return CliRunner()


class TestCLIMatch:
    def test_files_as_arguments(self, runner: CliRunner):
        result = runner.invoke(main, ["match", "--paths", PATHS, "src/a.ts", "docs/readme.md"])
        assert result.exit_code == 0
        assert "Matches:" in result.output
        assert "code: true" in result.output
        assert "docs: true" in result.output
        assert "tests: false" in result.output

    def test_files_from_stdin(self, runner: CliRunner):
        result = runner.invoke(main, ["match", "--paths", PATHS], input="test/x.py\n\n")
        assert result.exit_code == 0
        assert "tests: true" in result.output
        assert "code: false" in result.output

    def test_paths_from_env(self, runner: CliRunner):
        result = runner.invoke(main, ["match", "src/a.ts"], env={"INPUT_PATHS": "code: src/**"})
        assert result.exit_code == 0
        assert "code: true" in result.output

    def test_paths_file(self, runner: CliRunner, tmp_path: Path):
        rules = tmp_path / "paths.yml"
        rules.write_text("web: ['*.css', 'web/**']\n")
        result = runner.invoke(main, ["match", "--paths-file", str(rules), "theme/site.css"])
        assert result.exit_code == 0
        assert "web: true" in result.output

    def test_json(self, runner: CliRunner):
        result = runner.invoke(main, ["match", "--paths", PATHS, "--format", "json", "src/a.ts"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["matches"] == {"code": True, "docs": False, "tests": False}
        assert data["matched_files"]["code"] == ["src/a.ts"]

    def test_bad_root(self, runner: CliRunner):
        result = runner.invoke(main, ["match", "--paths", "- a\n- b", "src/a.ts"])
        assert result.exit_code == 1
        assert "root element is not an object" in result.output

    def test_missing_paths(self, runner: CliRunner):
        result = runner.invoke(main, ["match", "src/a.ts"])
        assert result.exit_code == 1
        assert "paths" in result.output

    def test_glob_flags(self, runner: CliRunner):
        result = runner.invoke(
            main, ["match", "--paths", "ci: '*.yml'", "--dot", ".travis.yml"]
        )
        assert "ci: true" in result.output
        result = runner.invoke(
            main, ["match", "--paths", "md: '*.md'", "--no-match-base", "docs/a.md"]
        )
        assert "md: false" in result.output


class TestCLICheck:
    def _args(self, *extra: str) -> list[str]:
        return ["check", "--paths", PATHS, "--event-name", "workflow_dispatch", *extra]

    def test_missing_refs(self, runner: CliRunner):
        result = runner.invoke(main, self._args("--source", "local"))
        assert result.exit_code == 1
        assert "::error::Base or head refs are missing" in result.output

    def test_bad_rules(self, runner: CliRunner):
        result = runner.invoke(
            main, ["check", "--paths", "42", "--base-ref", "a", "--head-ref", "b"]
        )
        assert result.exit_code == 1
        assert "::error::Invalid path YAML format" in result.output

    def test_hosted_needs_token(self, runner: CliRunner):
        result = runner.invoke(
            main,
            self._args("--base-ref", "a", "--head-ref", "b", "--repository", "octo/widgets"),
        )
        assert result.exit_code == 1
        assert "GITHUB_TOKEN" in result.output

    def test_local_source(self, runner: CliRunner, git_repo, tmp_path: Path):
        root, base, head = git_repo
        out = tmp_path / "github_output"
        result = runner.invoke(
            main,
            self._args(
                "--source", "local", "--repo-path", str(root),
                "--base-ref", base, "--head-ref", head,
            ),
            env={"GITHUB_OUTPUT": str(out)},
        )
        assert result.exit_code == 0, result.output
        assert "Matches:" in result.stdout
        assert "code: true" in result.stdout
        assert "tests: false" in result.stdout
        assert out.read_text() == "code=true\ndocs=true\ntests=false\n"

    def test_pull_request_event(self, runner: CliRunner, git_repo, tmp_path: Path):
        root, base, head = git_repo
        event = tmp_path / "event.json"
        event.write_text(json.dumps({
            "pull_request": {"base": {"sha": base}, "head": {"sha": head}},
        }))
        result = runner.invoke(
            main,
            [
                "check", "--paths", PATHS, "--source", "local", "--repo-path", str(root),
                "--format", "json", "--no-set-outputs",
            ],
            env={"GITHUB_EVENT_NAME": "pull_request", "GITHUB_EVENT_PATH": str(event)},
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["base"] == base
        assert data["head"] == head
        assert data["matches"] == {"code": True, "docs": True, "tests": False}

    def test_json_without_output_file(self, runner: CliRunner, git_repo):
        root, base, head = git_repo
        result = runner.invoke(
            main,
            self._args(
                "--source", "local", "--repo-path", str(root),
                "--base-ref", base, "--head-ref", head, "--format", "json",
            ),
            env={"GITHUB_ACTIONS": "true"},
        )
        assert result.exit_code == 0, result.output
        assert "::set-output" not in result.stdout
        data = json.loads(result.stdout)
        assert data["matches"] == {"code": True, "docs": True, "tests": False}
        assert "GITHUB_OUTPUT is not set" in result.stderr

    def test_logs_refs(self, runner: CliRunner, git_repo):
        root, base, head = git_repo
        result = runner.invoke(
            main,
            self._args(
                "--source", "local", "--repo-path", str(root),
                "--base-ref", base, "--head-ref", head, "--no-set-outputs",
            ),
        )
        assert result.exit_code == 0, result.output
        assert f"Base ref: {base}" in result.stderr
        assert f"Head ref: {head}" in result.stderr


def test_version(runner: CliRunner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_verbose_lists_matched_files(runner: CliRunner):
    result = runner.invoke(main, ["-v", "match", "--paths", PATHS, "src/a.ts"])
    assert result.exit_code == 0
    assert "Matched Files" in result.output
    assert "src/a.ts" in result.output
