"""
Branch normalization.

Guarantees the repository sits on the canonical branch before anything
else looks at it.
"""

from __future__ import annotations

import logging

from pubsync.core.git.backend import VersionControlBackend

logger = logging.getLogger(__name__)

CANONICAL_BRANCH = "main"


class BranchNormalizer:
    """
    Renames or points HEAD so the current branch is the canonical one.

    Example:
        >>> BranchNormalizer(GitBackend(Path("."))).normalize()
        'main'
    """

    def __init__(self, vcs: VersionControlBackend, canonical: str = CANONICAL_BRANCH) -> None:
        self.vcs = vcs
        self.canonical = canonical

    def normalize(self) -> str:
        """
        Make the canonical branch current.

        - No commits yet: point the symbolic HEAD at the canonical branch.
        - Detached HEAD with history: create the branch at HEAD.
        - Other branch: rename it, keeping its history.
        - Already canonical: nothing to do.

        Returns:
            The canonical branch name
        """
        current = self.vcs.current_branch()

        if current == self.canonical:
            logger.debug("Already on '%s'", self.canonical)
        elif not self.vcs.has_commits():
            logger.info("Empty repository; HEAD now points at '%s'", self.canonical)
            self.vcs.point_head_at(self.canonical)
        elif current is None:
            logger.info("Detached HEAD; creating '%s' at HEAD", self.canonical)
            self.vcs.create_branch_at_head(self.canonical)
        else:
            logger.info("Renaming branch '%s' to '%s'", current, self.canonical)
            self.vcs.rename_branch(current, self.canonical)

        return self.canonical
