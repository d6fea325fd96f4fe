"""Change-set providers: list the files touched between two revisions.

Two strategies satisfy the same ``ChangeSetProvider`` protocol:

  - ``HostedChangeSet`` asks the GitHub "compare two commits" API.
  - ``LocalChangeSet`` runs ``git diff`` in a local working copy.

``create_provider`` picks one from the run configuration.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

from github import Auth, Github, GithubException
from requests.exceptions import RequestException

from pathgate.config import ChangeSource, EventContext, RunConfig
from pathgate.exceptions import ConfigError, TransportError
from pathgate.github.diff_parser import parse_name_status
from pathgate.github.exec import ExecResult, run_command

logger = logging.getLogger("pathgate.changes")


class ChangeSetProvider(Protocol):
    """Anything that can list the files changed between base and head."""

    def changed_files(self, base: str, head: str) -> list[str]:
        ...


def normalize_path(path: str) -> str:
    """Repository-rooted, forward-slash form of a changed path."""
    path = path.replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    return path


class HostedChangeSet:
    """Changed files from the GitHub compare API."""

    def __init__(
        self,
        repository: str,
        token: str | None = None,
        client: Github | None = None,
    ) -> None:
        owner, _, name = repository.partition("/")
        if not owner or not name:
            raise ConfigError(
                f"Repository must be given as 'owner/repo', got '{repository}'"
            )
        if client is None:
            if not token:
                raise ConfigError("GITHUB_TOKEN is required for the hosted change source")
            # Failures surface immediately; the caller decides whether to rerun.
            client = Github(auth=Auth.Token(token), retry=None)
        self.client = client
        self.repository = repository

    def changed_files(self, base: str, head: str) -> list[str]:
        logger.info("Comparing %s...%s in %s", base, head, self.repository)
        try:
            repo = self.client.get_repo(self.repository)
            comparison = repo.compare(base, head)
            files = comparison.files
            if files is None:
                raise TransportError(
                    f"Compare response for {base}...{head} has no file list"
                )
            names: list[str] = []
            for record in files:
                filename = getattr(record, "filename", None)
                if not isinstance(filename, str) or not filename:
                    raise TransportError(
                        f"Compare response for {base}...{head} has a file without a name"
                    )
                names.append(normalize_path(filename))
        except GithubException as e:
            raise TransportError(f"GitHub compare {base}...{head} failed: {e}") from e
        except RequestException as e:
            raise TransportError(f"GitHub compare {base}...{head} failed: {e}") from e

        logger.info("%d changed file(s)", len(names))
        return names


class LocalChangeSet:
    """Changed files from ``git diff`` in a local working copy.

    Both revisions are checked out first so they are present locally. This
    moves HEAD of the working copy, so two runs must never share one.
    """

    def __init__(
        self,
        repo_path: Path | str = ".",
        timeout: float | None = None,
        git: str = "git",
    ) -> None:
        self.repo_path = Path(repo_path)
        self.timeout = timeout
        self.git = git

    def _git(self, *args: str) -> ExecResult:
        result = run_command([self.git, *args], cwd=self.repo_path, timeout=self.timeout)
        if not result.ok:
            raise TransportError(
                f"git {args[0]} failed with exit code {result.code}: "
                f"{result.stderr.strip()}"
            )
        return result

    def changed_files(self, base: str, head: str) -> list[str]:
        for ref in (base, head):
            if ref.startswith("-"):
                raise ConfigError(f"Invalid ref '{ref}': refs must not start with '-'")
        for ref in (base, head):
            logger.info("Checking out %s", ref)
            self._git("checkout", "--quiet", ref)

        result = self._git(
            "diff", "--no-renames", "--name-status", "-z", f"{base}..{head}"
        )
        names = [normalize_path(p) for p in parse_name_status(result.stdout)]
        logger.info("%d changed file(s)", len(names))
        return names


def create_provider(config: RunConfig, context: EventContext) -> ChangeSetProvider:
    """Create a change-set provider from configuration.

    Raises:
        ConfigError: If the hosted source lacks a token or repository.
    """
    if config.source is ChangeSource.LOCAL:
        return LocalChangeSet(repo_path=config.repo_path, timeout=config.timeout)
    if config.source is ChangeSource.HOSTED:
        if not context.repository:
            raise ConfigError("GITHUB_REPOSITORY is required for the hosted change source")
        return HostedChangeSet(repository=context.repository, token=config.token)
    raise ConfigError(f"Unknown change source: '{config.source}'")
