"""Idempotent commit generation."""

from pubsync.core.commit.policy import CommitDecision, CommitPolicy, CommitResult, decide

__all__ = ["CommitDecision", "CommitPolicy", "CommitResult", "decide"]
