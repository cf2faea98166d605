"""
Remote identity, hosting API and remote configuration.
"""

from pubsync.core.remote.host import GitHubHost, RemoteHost, interpret_creation_response
from pubsync.core.remote.models import RemoteIdentity, RepoCreationStatus
from pubsync.core.remote.resolver import RemoteResolver, resolve_identity

__all__ = [
    "GitHubHost",
    "RemoteHost",
    "RemoteIdentity",
    "RemoteResolver",
    "RepoCreationStatus",
    "interpret_creation_response",
    "resolve_identity",
]
