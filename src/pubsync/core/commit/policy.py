"""
Commit policy.

At most one commit per run, always with the same message. Until the branch
has an upstream we keep amending a single rolling commit instead of piling up
one generated commit per run.

    staged empty | had commits | upstream | action
    -------------+-------------+----------+-------
    yes          | -           | -        | SKIP
    no           | no          | -        | NEW
    no           | yes         | yes      | NEW
    no           | yes         | no       | AMEND
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel, Field

from pubsync.core.git.backend import VersionControlBackend, read_repository_state

logger = logging.getLogger(__name__)


class CommitDecision(str, Enum):
    """What CommitPolicy does with the staged changes."""

    SKIP = "skip"
    NEW = "new"
    AMEND = "amend"


class CommitResult(BaseModel):
    """Outcome of applying the commit policy."""

    action: CommitDecision
    commit_sha: str | None = Field(default=None, description="HEAD after committing")


def decide(*, staged_changes: bool, had_commits: bool, has_upstream: bool) -> CommitDecision:
    """Pure decision table; see module docstring."""
    if not staged_changes:
        return CommitDecision.SKIP
    if not had_commits:
        return CommitDecision.NEW
    if has_upstream:
        return CommitDecision.NEW
    return CommitDecision.AMEND


class CommitPolicy:
    """
    Applies the decision table to the repository.

    Example:
        >>> policy = CommitPolicy(git, message="push")
        >>> policy.apply(had_commits=True).action
        <CommitDecision.AMEND: 'amend'>
    """

    def __init__(self, vcs: VersionControlBackend, message: str = "push") -> None:
        self.vcs = vcs
        self.message = message

    def apply(self, *, had_commits: bool) -> CommitResult:
        """
        Commit, amend or skip based on the current index.

        Args:
            had_commits: Whether the repository had commits before this run

        Returns:
            CommitResult; SKIP is a normal outcome, not an error
        """
        state = read_repository_state(self.vcs)
        logger.debug("Repository state before commit: %s", state)
        action = decide(
            staged_changes=state.staged_changes,
            had_commits=had_commits,
            has_upstream=state.has_upstream,
        )

        if action == CommitDecision.SKIP:
            logger.info("No new changes to commit")
            return CommitResult(action=action)

        sha = self.vcs.commit(self.message, amend=action == CommitDecision.AMEND)
        verb = "Amended" if action == CommitDecision.AMEND else "Created"
        logger.info("%s commit %s (%s)", verb, sha[:8], self.message)
        return CommitResult(action=action, commit_sha=sha)
