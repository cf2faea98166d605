"""
Local repository access.

Example:
    >>> from pubsync.core.git import GitBackend
    >>> git = GitBackend(Path("."))
    >>> read_repository_state(git)
    RepositoryState(has_commits=True, current_branch='main', ...)
"""

from pubsync.core.git.backend import (
    GitBackend,
    GitError,
    VersionControlBackend,
    read_repository_state,
)
from pubsync.core.git.models import RepositoryState

__all__ = [
    "GitBackend",
    "GitError",
    "RepositoryState",
    "VersionControlBackend",
    "read_repository_state",
]
