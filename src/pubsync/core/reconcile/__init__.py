"""Divergent-history reconciliation."""

from pubsync.core.reconcile.models import ReconcileResult, ReconcileState
from pubsync.core.reconcile.reconciler import HistoryReconciler

__all__ = ["HistoryReconciler", "ReconcileResult", "ReconcileState"]
