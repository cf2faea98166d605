"""
Git access for the publish pipeline.

VersionControlBackend is the capability the pipeline stages depend on;
GitBackend implements it by shelling out to the ``git`` executable in the
working directory. Network commands (ls-remote, pull, push) accept extra
environment variables so credentials can be scoped to that single call.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol

from pubsync.core.git.models import RepositoryState

logger = logging.getLogger(__name__)


class GitError(Exception):
    """Exception raised when a git operation fails."""

    def __init__(
        self,
        message: str,
        command: list[str] | None = None,
        stderr: str = "",
        returncode: int | None = None,
    ):
        super().__init__(message)
        self.command = command
        self.stderr = stderr
        self.returncode = returncode


class VersionControlBackend(Protocol):
    """Operations the pipeline needs from the local repository."""

    def is_repository(self) -> bool: ...

    def init(self) -> None: ...

    def has_commits(self) -> bool: ...

    def current_branch(self) -> str | None: ...

    def point_head_at(self, branch: str) -> None: ...

    def rename_branch(self, old: str, new: str) -> None: ...

    def create_branch_at_head(self, branch: str) -> None: ...

    def remote_url(self, name: str) -> str | None: ...

    def add_remote(self, name: str, url: str) -> None: ...

    def remote_branch_exists(
        self, url: str, branch: str, env: Mapping[str, str] | None = None
    ) -> bool: ...

    def pull_rebase(
        self, remote: str, branch: str, env: Mapping[str, str] | None = None
    ) -> None: ...

    def stage_all(self) -> None: ...

    def unstage(self, path: str) -> bool: ...

    def is_tracked(self, path: str) -> bool: ...

    def remove_from_index(self, path: str) -> bool: ...

    def staged_paths(self) -> list[str]: ...

    def has_staged_changes(self) -> bool: ...

    def has_upstream(self) -> bool: ...

    def commit(self, message: str, *, amend: bool = False) -> str: ...

    def push(self, remote: str, branch: str, env: Mapping[str, str] | None = None) -> None: ...


class GitBackend:
    """
    VersionControlBackend backed by the git CLI.

    Example:
        >>> git = GitBackend(Path("."))
        >>> if not git.is_repository():
        ...     git.init()
        >>> git.current_branch()
        'main'
    """

    def __init__(self, repo_dir: Path) -> None:
        self.repo_dir = repo_dir

    def _run_git(
        self,
        args: list[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
    ) -> subprocess.CompletedProcess[str]:
        """
        Run a git command in the repository.

        Args:
            args: Git command arguments (without "git" prefix).
            check: Whether to raise on non-zero exit code.
            env: Extra environment variables for this call only.

        Returns:
            The completed process (stdout/stderr captured as text).

        Raises:
            GitError: If the command fails and check=True, or git is missing.
        """
        cmd = ["git"] + args
        logger.debug("Running git command: %s", " ".join(cmd))

        run_env = None
        if env:
            run_env = {**os.environ, **env}

        try:
            result = subprocess.run(
                cmd,
                cwd=self.repo_dir,
                capture_output=True,
                text=True,
                env=run_env,
            )
        except FileNotFoundError as e:
            raise GitError("git not found in PATH", command=cmd) from e

        if check and result.returncode != 0:
            raise GitError(
                f"Git command failed: {' '.join(cmd)}",
                command=cmd,
                stderr=(result.stderr or "").strip(),
                returncode=result.returncode,
            )
        return result

    def _succeeds(self, args: list[str]) -> bool:
        return self._run_git(args, check=False).returncode == 0

    def is_repository(self) -> bool:
        """True if the working directory itself holds a repository."""
        return (self.repo_dir / ".git").exists()

    def init(self) -> None:
        self._run_git(["init", "-q"])
        logger.info("Initialized git repository in %s", self.repo_dir)

    def has_commits(self) -> bool:
        return self._succeeds(["rev-parse", "--verify", "-q", "HEAD"])

    def current_branch(self) -> str | None:
        result = self._run_git(["branch", "--show-current"], check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip() or None

    def point_head_at(self, branch: str) -> None:
        self._run_git(["symbolic-ref", "HEAD", f"refs/heads/{branch}"])

    def rename_branch(self, old: str, new: str) -> None:
        self._run_git(["branch", "-M", old, new])

    def create_branch_at_head(self, branch: str) -> None:
        self._run_git(["checkout", "-q", "-B", branch])

    def remote_url(self, name: str) -> str | None:
        """Configured URL of a remote, as written (insteadOf rules not applied)."""
        result = self._run_git(["config", "--get", f"remote.{name}.url"], check=False)
        if result.returncode != 0:
            return None
        return result.stdout.strip()

    def add_remote(self, name: str, url: str) -> None:
        self._run_git(["remote", "add", name, url])

    def remote_branch_exists(
        self, url: str, branch: str, env: Mapping[str, str] | None = None
    ) -> bool:
        """
        Ask the remote whether it has the branch.

        ``ls-remote --exit-code`` exits 2 when the ref is absent; any other
        failure (network, authentication) is raised.
        """
        result = self._run_git(
            ["ls-remote", "--exit-code", "--heads", url, branch],
            check=False,
            env=env,
        )
        if result.returncode == 0:
            return True
        if result.returncode == 2:
            return False
        raise GitError(
            f"Could not query remote branch '{branch}'",
            command=["git", "ls-remote", "--exit-code", "--heads", url, branch],
            stderr=(result.stderr or "").strip(),
            returncode=result.returncode,
        )

    def pull_rebase(
        self, remote: str, branch: str, env: Mapping[str, str] | None = None
    ) -> None:
        self._run_git(["pull", "--rebase", "--autostash", remote, branch], env=env)

    def stage_all(self) -> None:
        self._run_git(["add", "--all"])

    def unstage(self, path: str) -> bool:
        """Remove a path from the staging area; False if nothing was unstaged."""
        if self._succeeds(["restore", "--staged", "--", path]):
            return True
        if self._succeeds(["reset", "-q", "HEAD", "--", path]):
            return True
        # No HEAD to restore from yet: drop the new index entry instead
        return self._succeeds(["rm", "--cached", "-r", "-q", "--ignore-unmatch", "--", path])

    def is_tracked(self, path: str) -> bool:
        return self._succeeds(["ls-files", "--error-unmatch", "--", path])

    def remove_from_index(self, path: str) -> bool:
        """Stop tracking a path, keeping the working-tree file."""
        return self._succeeds(["rm", "--cached", "-r", "-q", "--", path])

    def staged_paths(self) -> list[str]:
        result = self._run_git(["diff", "--staged", "--name-only"], check=False)
        return [line for line in result.stdout.splitlines() if line]

    def has_staged_changes(self) -> bool:
        result = self._run_git(["diff", "--staged", "--quiet"], check=False)
        if result.returncode not in (0, 1):
            raise GitError(
                "Could not inspect staged changes",
                command=["git", "diff", "--staged", "--quiet"],
                stderr=(result.stderr or "").strip(),
                returncode=result.returncode,
            )
        return result.returncode == 1

    def has_upstream(self) -> bool:
        return self._succeeds(["rev-parse", "--abbrev-ref", "--symbolic-full-name", "@{u}"])

    def commit(self, message: str, *, amend: bool = False) -> str:
        """Create (or amend) a commit from the index and return its SHA."""
        args = ["commit", "-q", "-m", message]
        if amend:
            args.insert(1, "--amend")
        self._run_git(args)
        return self._run_git(["rev-parse", "HEAD"]).stdout.strip()

    def push(self, remote: str, branch: str, env: Mapping[str, str] | None = None) -> None:
        self._run_git(["push", "-u", remote, branch], env=env)

    def tracked_files(self, ref: str = "HEAD") -> list[str]:
        """Paths in the tree of a commit."""
        result = self._run_git(["ls-tree", "-r", "--name-only", ref], check=False)
        return [line for line in result.stdout.splitlines() if line]


def read_repository_state(vcs: VersionControlBackend) -> RepositoryState:
    """Take a fresh RepositoryState snapshot from any backend."""
    has_commits = vcs.has_commits()
    return RepositoryState(
        has_commits=has_commits,
        current_branch=vcs.current_branch(),
        has_upstream=has_commits and vcs.has_upstream(),
        staged_changes=vcs.has_staged_changes(),
    )
