"""
Reconciliation state machine models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class ReconcileState(str, Enum):
    """
    States of the history reconciler.

    CHECK_REMOTE_BRANCH -> FIRST_PUBLISH            (terminal, nothing pulled)
    CHECK_REMOTE_BRANCH -> SYNC -> SYNCED | FAILED  (terminal)
    """

    CHECK_REMOTE_BRANCH = "check_remote_branch"
    FIRST_PUBLISH = "first_publish"
    SYNC = "sync"
    SYNCED = "synced"
    FAILED = "failed"


# Allowed transitions; anything else is a programming error
TRANSITIONS: dict[ReconcileState, frozenset[ReconcileState]] = {
    ReconcileState.CHECK_REMOTE_BRANCH: frozenset(
        {ReconcileState.FIRST_PUBLISH, ReconcileState.SYNC, ReconcileState.FAILED}
    ),
    ReconcileState.SYNC: frozenset({ReconcileState.SYNCED, ReconcileState.FAILED}),
    ReconcileState.FIRST_PUBLISH: frozenset(),
    ReconcileState.SYNCED: frozenset(),
    ReconcileState.FAILED: frozenset(),
}


class ReconcileResult(BaseModel):
    """Outcome of a successful reconciliation."""

    state: ReconcileState = Field(description="Terminal state reached")
    branch: str = Field(description="Branch that was reconciled")
    remote_branch_existed: bool = Field(description="Remote had the branch before the run")
    history: list[ReconcileState] = Field(
        default_factory=list,
        description="States visited, in order",
    )

    @property
    def pulled(self) -> bool:
        return self.state == ReconcileState.SYNCED
