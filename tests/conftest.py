"""Shared test fixtures for pathgate."""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
from pathlib import Path

import pytest

from pathgate.config import EventContext

BASE_SHA = "1111111111111111111111111111111111111111"
HEAD_SHA = "2222222222222222222222222222222222222222"


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep a CI runner's own event and inputs out of the tests."""
    for name in list(os.environ):
        if name.startswith(("GITHUB_", "INPUT_")):
            monkeypatch.delenv(name, raising=False)
    yield
    logger = logging.getLogger("pathgate")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def pr_payload() -> dict:
    return {
        "action": "synchronize",
        "number": 7,
        "pull_request": {
            "number": 7,
            "base": {"ref": "main", "sha": BASE_SHA},
            "head": {"ref": "feature", "sha": HEAD_SHA},
        },
    }


@pytest.fixture
def push_payload() -> dict:
    return {"ref": "refs/heads/main", "before": BASE_SHA, "after": HEAD_SHA}


@pytest.fixture
def pr_context(pr_payload: dict) -> EventContext:
    return EventContext(event_name="pull_request", payload=pr_payload, repository="octo/widgets")


@pytest.fixture
def push_context(push_payload: dict) -> EventContext:
    return EventContext(event_name="push", payload=push_payload, repository="octo/widgets")


@pytest.fixture
def event_file(tmp_path: Path, pr_payload: dict) -> Path:
    path = tmp_path / "event.json"
    path.write_text(json.dumps(pr_payload))
    return path


# -------------------------------------------------------------------------
# Fake PyGithub objects
# -------------------------------------------------------------------------

class FakeFile:
    def __init__(self, filename: str) -> None:
        self.filename = filename


class FakeComparison:
    def __init__(self, files) -> None:
        self.files = files


class FakeRepo:
    def __init__(self, files, error: Exception | None = None) -> None:
        self._files = files
        self._error = error
        self.calls: list[tuple[str, str]] = []

    def compare(self, base: str, head: str) -> FakeComparison:
        self.calls.append((base, head))
        if self._error is not None:
            raise self._error
        return FakeComparison(self._files)


class FakeGithub:
    def __init__(self, repo: FakeRepo) -> None:
        self.repo = repo
        self.requested: list[str] = []

    def get_repo(self, full_name: str) -> FakeRepo:
        self.requested.append(full_name)
        return self.repo


@pytest.fixture
def fake_github():
    """Build a fake client returning the given filenames."""
    def _make(filenames=None, error: Exception | None = None) -> FakeGithub:
        files = None if filenames is None else [FakeFile(f) for f in filenames]
        return FakeGithub(FakeRepo(files, error))
    return _make


# -------------------------------------------------------------------------
# A real git repository with two commits
# -------------------------------------------------------------------------

def _git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        ["git", "-c", "user.name=Test", "-c", "user.email=test@example.com",
         "-c", "commit.gpgsign=false", *args],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


@pytest.fixture
def git_repo(tmp_path: Path) -> tuple[Path, str, str]:
    """A repository whose second commit modifies, adds, deletes and renames.

    Returns (path, base_sha, head_sha).
    """
    if shutil.which("git") is None:
        pytest.skip("git is not installed")

    root = tmp_path / "repo"
    root.mkdir()
    _git(root, "init", "--quiet")

    (root / "src").mkdir()
    (root / "docs").mkdir()
    (root / "README.md").write_text("# widgets\n")
    (root / "src" / "app.py").write_text("print('v1')\n")
    (root / "docs" / "guide.md").write_text("guide\n")
    _git(root, "add", "-A")
    _git(root, "commit", "--quiet", "-m", "base")
    base = _git(root, "rev-parse", "HEAD")

    (root / "src" / "app.py").write_text("print('v2')\n")
    (root / "tests").mkdir()
    (root / "tests" / "test_app.py").write_text("def test_app():\n    pass\n")
    (root / "docs" / "guide.md").unlink()
    _git(root, "mv", "README.md", "README.rst")
    _git(root, "add", "-A")
    _git(root, "commit", "--quiet", "-m", "head")
    head = _git(root, "rev-parse", "HEAD")

    return root, base, head
