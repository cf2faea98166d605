"""
History reconciliation.

Brings local history up to date with the remote branch before anything is
committed. When the remote branch exists we rebase local work onto it
(auto-stashing uncommitted changes); when it does not, this is a first
publish and nothing is pulled. A rebase that cannot complete is fatal: the
repository is left as git left it so the operator can resolve it by hand.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from contextlib import AbstractContextManager

from pubsync.core.errors import (
    AuthenticationFailure,
    ReconciliationConflict,
    TransportFailure,
)
from pubsync.core.git.backend import GitError, VersionControlBackend
from pubsync.core.push.credentials import is_auth_failure
from pubsync.core.reconcile.models import TRANSITIONS, ReconcileResult, ReconcileState

logger = logging.getLogger(__name__)

NetworkEnv = Callable[[], AbstractContextManager[Mapping[str, str] | None]]


class HistoryReconciler:
    """
    Explicit state machine over CHECK_REMOTE_BRANCH / SYNC.

    Each transition is a method, so the skip-pull path and the conflict path
    can be driven independently.

    Example:
        >>> reconciler = HistoryReconciler(git, "origin", url, "main", executor.network_env)
        >>> reconciler.run().state
        <ReconcileState.FIRST_PUBLISH: 'first_publish'>
    """

    def __init__(
        self,
        vcs: VersionControlBackend,
        remote_name: str,
        remote_url: str,
        branch: str,
        network_env: NetworkEnv,
    ) -> None:
        self.vcs = vcs
        self.remote_name = remote_name
        self.remote_url = remote_url
        self.branch = branch
        self.network_env = network_env
        self.state = ReconcileState.CHECK_REMOTE_BRANCH
        self.history: list[ReconcileState] = [self.state]

    def _transition(self, new_state: ReconcileState) -> None:
        if new_state not in TRANSITIONS[self.state]:
            raise RuntimeError(f"Invalid reconcile transition {self.state} -> {new_state}")
        self.state = new_state
        self.history.append(new_state)

    def check_remote_branch(self) -> ReconcileState:
        """
        CHECK_REMOTE_BRANCH: ask the remote whether the branch exists.

        Returns:
            FIRST_PUBLISH or SYNC

        Raises:
            AuthenticationFailure: If the remote rejected our credentials
            TransportFailure: If the remote could not be queried
        """
        try:
            with self.network_env() as env:
                exists = self.vcs.remote_branch_exists(self.remote_url, self.branch, env=env)
        except GitError as e:
            self._transition(ReconcileState.FAILED)
            if is_auth_failure(e.stderr):
                raise AuthenticationFailure(
                    f"Authentication failed while querying {self.remote_url}",
                    stage="reconcile",
                    detail=e.stderr,
                ) from e
            raise TransportFailure(
                f"Could not query branch '{self.branch}' on {self.remote_url}",
                stage="reconcile",
                detail=e.stderr,
            ) from e

        if exists:
            logger.info("Remote branch '%s' found; syncing (pull --rebase)", self.branch)
            self._transition(ReconcileState.SYNC)
        else:
            logger.info("Remote branch '%s' not found; assuming first publish", self.branch)
            self._transition(ReconcileState.FIRST_PUBLISH)
        return self.state

    def sync(self) -> ReconcileState:
        """
        SYNC: rebase local commits onto the remote tip.

        Returns:
            SYNCED

        Raises:
            ReconciliationConflict: If the rebase (or its fetch) failed
            AuthenticationFailure: If the remote rejected our credentials
        """
        try:
            with self.network_env() as env:
                self.vcs.pull_rebase(self.remote_name, self.branch, env=env)
        except GitError as e:
            self._transition(ReconcileState.FAILED)
            if is_auth_failure(e.stderr):
                raise AuthenticationFailure(
                    f"Pull from '{self.remote_name}' was rejected: authentication failed",
                    stage="reconcile",
                    detail=e.stderr,
                ) from e
            raise ReconciliationConflict(
                f"'git pull --rebase' of '{self.branch}' did not complete. "
                "Resolve the conflicts manually (git status, git rebase --continue "
                "or --abort), then run again.",
                detail=e.stderr,
            ) from e

        self._transition(ReconcileState.SYNCED)
        logger.info("Sync complete")
        return self.state

    def run(self) -> ReconcileResult:
        """Drive the machine to a terminal state."""
        if self.check_remote_branch() == ReconcileState.SYNC:
            self.sync()
        return ReconcileResult(
            state=self.state,
            branch=self.branch,
            remote_branch_existed=ReconcileState.SYNC in self.history,
            history=list(self.history),
        )
