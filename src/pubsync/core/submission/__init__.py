"""
Pre-publish artifact-review submission.

Example:
    >>> from pubsync.core.submission import SubmissionGate, WebExtClient
    >>> gate = SubmissionGate(config, credentials, WebExtClient(), sensitive)
    >>> outcome = gate.run()
"""

from pubsync.core.submission.client import SubmissionClient, WebExtClient
from pubsync.core.submission.gate import SubmissionGate
from pubsync.core.submission.models import (
    SubmissionOutcome,
    SubmissionRequest,
    SubmissionStatus,
)

__all__ = [
    "SubmissionClient",
    "SubmissionGate",
    "SubmissionOutcome",
    "SubmissionRequest",
    "SubmissionStatus",
    "WebExtClient",
]
