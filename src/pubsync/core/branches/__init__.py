"""Canonical branch handling."""

from pubsync.core.branches.normalizer import CANONICAL_BRANCH, BranchNormalizer

__all__ = ["BranchNormalizer", "CANONICAL_BRANCH"]
