"""
Tests for the git CLI backend.

Tests cover:
- Command execution and GitError
- Repository and branch inspection
- Remote queries against a local bare repository
- Index manipulation
"""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import run_git
from pubsync.core.git import GitBackend, GitError, read_repository_state


class TestGitCommandExecution:
    """Tests for the _run_git helper method."""

    def test_run_git_success(self, git_repo: Path) -> None:
        git = GitBackend(git_repo)

        result = git._run_git(["rev-parse", "--git-dir"])

        assert result.stdout.strip() == ".git"

    def test_run_git_failure_raises(self, git_repo: Path) -> None:
        git = GitBackend(git_repo)

        with pytest.raises(GitError) as exc_info:
            git._run_git(["checkout", "no-such-branch"])

        assert exc_info.value.returncode != 0
        assert exc_info.value.stderr
        assert exc_info.value.command == ["git", "checkout", "no-such-branch"]

    def test_run_git_no_check(self, git_repo: Path) -> None:
        git = GitBackend(git_repo)

        result = git._run_git(["checkout", "no-such-branch"], check=False)

        assert result.returncode != 0

    def test_extra_env_reaches_git(self, git_repo: Path) -> None:
        git = GitBackend(git_repo)

        result = git._run_git(
            ["var", "GIT_AUTHOR_IDENT"], env={"GIT_AUTHOR_NAME": "Scoped Name"}
        )

        assert "Scoped Name" in result.stdout


class TestRepositoryInspection:
    """Tests for repository and branch state."""

    def test_is_repository(self, tmp_path: Path, git_repo: Path) -> None:
        assert GitBackend(git_repo).is_repository() is True
        assert GitBackend(tmp_path).is_repository() is False

    def test_init(self, tmp_path: Path) -> None:
        git = GitBackend(tmp_path)

        git.init()

        assert git.is_repository()
        assert git.has_commits() is False

    def test_has_commits(self, git_repo_with_commit: Path) -> None:
        assert GitBackend(git_repo_with_commit).has_commits() is True

    def test_current_branch_unborn(self, git_repo: Path) -> None:
        """An unborn branch still has a name."""
        run_git(git_repo, "symbolic-ref", "HEAD", "refs/heads/trunk")

        assert GitBackend(git_repo).current_branch() == "trunk"

    def test_current_branch_detached(self, git_repo_with_commit: Path) -> None:
        run_git(git_repo_with_commit, "checkout", "-q", "--detach")

        assert GitBackend(git_repo_with_commit).current_branch() is None

    def test_rename_branch(self, git_repo_with_commit: Path) -> None:
        git = GitBackend(git_repo_with_commit)
        current = git.current_branch()
        assert current is not None

        git.rename_branch(current, "renamed")

        assert git.current_branch() == "renamed"

    def test_repository_state(self, git_repo_with_commit: Path) -> None:
        git = GitBackend(git_repo_with_commit)

        state = read_repository_state(git)

        assert state.has_commits is True
        assert state.current_branch == git.current_branch()
        assert state.has_upstream is False
        assert state.staged_changes is False


class TestRemotes:
    """Tests for remote configuration and queries."""

    def test_remote_url_missing(self, git_repo: Path) -> None:
        assert GitBackend(git_repo).remote_url("origin") is None

    def test_add_remote(self, git_repo: Path) -> None:
        git = GitBackend(git_repo)

        git.add_remote("origin", "https://github.com/octo/tool.git")

        assert git.remote_url("origin") == "https://github.com/octo/tool.git"

    def test_remote_url_is_not_rewritten(self, git_repo: Path, hosted_urls: Path) -> None:
        """insteadOf rules apply to the network, not to the configured value."""
        git = GitBackend(git_repo)
        git.add_remote("origin", "https://github.com/octo/tool.git")

        assert git.remote_url("origin") == "https://github.com/octo/tool.git"

    def test_remote_branch_exists_false_on_empty_remote(
        self, git_repo: Path, bare_remote: Path
    ) -> None:
        assert GitBackend(git_repo).remote_branch_exists(str(bare_remote), "main") is False

    def test_remote_branch_exists_true_after_push(
        self, git_repo_with_commit: Path, bare_remote: Path
    ) -> None:
        git = GitBackend(git_repo_with_commit)
        run_git(git_repo_with_commit, "checkout", "-q", "-B", "main")
        git.add_remote("origin", str(bare_remote))
        git.push("origin", "main")

        assert git.remote_branch_exists(str(bare_remote), "main") is True
        assert git.has_upstream() is True

    def test_remote_branch_exists_raises_on_unreachable_remote(
        self, git_repo: Path, tmp_path: Path
    ) -> None:
        git = GitBackend(git_repo)

        with pytest.raises(GitError):
            git.remote_branch_exists(str(tmp_path / "does-not-exist.git"), "main")


class TestIndex:
    """Tests for staging and unstaging."""

    def test_stage_all_and_staged_paths(self, git_repo: Path) -> None:
        git = GitBackend(git_repo)
        (git_repo / "a.txt").write_text("a\n")
        (git_repo / "b.txt").write_text("b\n")

        git.stage_all()

        assert sorted(git.staged_paths()) == ["a.txt", "b.txt"]
        assert git.has_staged_changes() is True

    def test_unstage_before_first_commit(self, git_repo: Path) -> None:
        git = GitBackend(git_repo)
        (git_repo / "secret.txt").write_text("x\n")
        git.stage_all()

        git.unstage("secret.txt")

        assert "secret.txt" not in git.staged_paths()

    def test_unstage_untracked_path_is_harmless(self, git_repo_with_commit: Path) -> None:
        git = GitBackend(git_repo_with_commit)

        git.unstage("never-existed.txt")

        assert git.staged_paths() == []

    def test_remove_from_index_keeps_file(self, git_repo_with_commit: Path) -> None:
        git = GitBackend(git_repo_with_commit)

        assert git.is_tracked("README.md") is True
        assert git.remove_from_index("README.md") is True

        assert git.is_tracked("README.md") is False
        assert (git_repo_with_commit / "README.md").exists()

    def test_commit_and_amend(self, git_repo: Path) -> None:
        git = GitBackend(git_repo)
        (git_repo / "a.txt").write_text("a\n")
        git.stage_all()
        first = git.commit("push")

        (git_repo / "b.txt").write_text("b\n")
        git.stage_all()
        amended = git.commit("push", amend=True)

        assert amended != first
        assert run_git(git_repo, "rev-list", "--count", "HEAD") == "1"
        assert sorted(git.tracked_files()) == ["a.txt", "b.txt"]
