"""
pubsync - publish a local working tree to its hosted repository.

Reconciles the local checkout with the remote, gates publication on an
artifact-review submission, and commits/pushes under an idempotent policy.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from pubsync.core.config.models import PublishConfig
from pubsync.core.pipeline import PublishPipeline, PublishResult

__all__ = ["PublishConfig", "PublishPipeline", "PublishResult", "__version__"]
