"""
Pytest configuration and shared fixtures.

Provides temporary git repositories, a bare repository standing in for the
hosted remote, and in-memory fakes for the hosting API and the submission
client.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

import pytest
from pydantic import SecretStr

from pubsync.core.config.models import PublishConfig
from pubsync.core.credentials.store import Credentials
from pubsync.core.remote.models import RepoCreationStatus
from pubsync.core.submission.models import (
    SubmissionOutcome,
    SubmissionRequest,
    SubmissionStatus,
)

OWNER = "octo"
HOSTED_PREFIX = f"https://github.com/{OWNER}/"


def run_git(repo: Path, *args: str) -> str:
    """Run git in a repository and return stdout."""
    result = subprocess.run(
        ["git", *args],
        cwd=repo,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


# ==============================================================================
# Environment
# ==============================================================================


@pytest.fixture(autouse=True)
def git_identity(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Deterministic git identity, isolated from the developer's config."""
    monkeypatch.setenv("GIT_AUTHOR_NAME", "Test User")
    monkeypatch.setenv("GIT_AUTHOR_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_COMMITTER_NAME", "Test User")
    monkeypatch.setenv("GIT_COMMITTER_EMAIL", "test@example.com")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(tmp_path / "gitconfig"))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in ("GITHUB_TOKEN", "GITHUB_USER", "AMO_API_KEY", "AMO_API_SECRET"):
        monkeypatch.delenv(var, raising=False)


# ==============================================================================
# Repository Fixtures
# ==============================================================================


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Create a temporary git repository named like the hosted one."""
    repo = tmp_path / "work" / "tool"
    repo.mkdir(parents=True)
    run_git(repo, "init", "-q")
    return repo


@pytest.fixture
def git_repo_with_commit(git_repo: Path) -> Path:
    """A repository with one commit on whatever the default branch is."""
    (git_repo / "README.md").write_text("# Tool\n")
    run_git(git_repo, "add", "README.md")
    run_git(git_repo, "commit", "-q", "-m", "Initial commit")
    return git_repo


@pytest.fixture
def hosted_dir(tmp_path: Path) -> Path:
    """Directory holding bare repositories that play the hosting service."""
    path = tmp_path / "hosted"
    path.mkdir()
    return path


@pytest.fixture
def bare_remote(hosted_dir: Path) -> Path:
    """Empty bare repository for ``octo/tool``."""
    bare = hosted_dir / "tool.git"
    subprocess.run(["git", "init", "-q", "--bare", str(bare)], check=True)
    return bare


@pytest.fixture
def hosted_urls(monkeypatch: pytest.MonkeyPatch, hosted_dir: Path) -> Path:
    """
    Route the canonical HTTPS URLs to the local bare repositories.

    The configured remote keeps its canonical URL; git rewrites it when
    talking to the network.
    """
    monkeypatch.setenv("GIT_CONFIG_COUNT", "1")
    monkeypatch.setenv("GIT_CONFIG_KEY_0", f"url.{hosted_dir}/.insteadOf")
    monkeypatch.setenv("GIT_CONFIG_VALUE_0", HOSTED_PREFIX)
    return hosted_dir


# ==============================================================================
# Config Fixtures
# ==============================================================================


@pytest.fixture
def make_config(git_repo: Path):
    """Factory for PublishConfig rooted at git_repo."""

    def _make(**overrides: object) -> PublishConfig:
        values: dict[str, object] = {"repo_dir": git_repo, "owner": OWNER}
        values.update(overrides)
        return PublishConfig(**values)

    return _make


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(
        scm_token=SecretStr("ghp_test_token"),
        submission_key=SecretStr("user:12345:67"),
        submission_secret=SecretStr("amo-secret"),
    )


# ==============================================================================
# Fakes
# ==============================================================================


class FakeHost:
    """RemoteHost that records calls and returns a fixed status."""

    def __init__(self, status: RepoCreationStatus = RepoCreationStatus.CREATED) -> None:
        self.status = status
        self.created: list[str] = []

    def create_repository(self, name: str, *, private: bool = False) -> RepoCreationStatus:
        self.created.append(name)
        return self.status


class FakeSubmissionClient:
    """SubmissionClient that records requests and returns a fixed status."""

    def __init__(self, status: SubmissionStatus = SubmissionStatus.ACCEPTED) -> None:
        self.status = status
        self.requests: list[SubmissionRequest] = []

    def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
        self.requests.append(request)
        exit_code = 0 if self.status == SubmissionStatus.ACCEPTED else 1
        return SubmissionOutcome(
            channel=request.channel,
            status=self.status,
            exit_code=exit_code,
            detail="" if exit_code == 0 else "validation failed",
        )


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def fake_submission() -> FakeSubmissionClient:
    return FakeSubmissionClient()
