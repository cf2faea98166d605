"""
Data models describing the local repository.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class RepositoryState(BaseModel):
    """
    Snapshot of the local repository.

    Always derived fresh from git; never persisted between runs.
    """

    model_config = ConfigDict(frozen=True)

    has_commits: bool = Field(description="HEAD resolves to a commit")
    current_branch: str | None = Field(
        default=None,
        description="Checked-out branch (named even before the first commit), None when detached",
    )
    has_upstream: bool = Field(
        default=False,
        description="Current branch has a remote-tracking upstream",
    )
    staged_changes: bool = Field(
        default=False,
        description="Index differs from HEAD",
    )
