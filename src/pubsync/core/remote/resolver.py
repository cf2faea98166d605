"""
Remote discovery and creation.

Resolves the canonical remote URL for the working directory and makes sure
the local `origin` points at it, creating the hosted repository first when
no remote is configured yet. An existing remote is never repointed.
"""

from __future__ import annotations

import logging

from pubsync.core.config.models import PublishConfig
from pubsync.core.errors import RemoteConfigConflict
from pubsync.core.git.backend import VersionControlBackend
from pubsync.core.remote.host import RemoteHost
from pubsync.core.remote.models import RemoteIdentity, RepoCreationStatus

logger = logging.getLogger(__name__)


def resolve_identity(config: PublishConfig) -> RemoteIdentity:
    """Canonical remote identity for a run."""
    return RemoteIdentity(
        protocol=config.protocol,
        host=config.host,
        owner=config.owner,
        repo_name=config.repo_name,
    )


class RemoteResolver:
    """Makes the local remote match the canonical identity."""

    def __init__(
        self,
        config: PublishConfig,
        vcs: VersionControlBackend,
        host: RemoteHost,
    ) -> None:
        self.config = config
        self.vcs = vcs
        self.host = host

    def ensure_remote(self, *, create: bool = True) -> tuple[RemoteIdentity, RepoCreationStatus]:
        """
        Verify or configure the remote.

        Args:
            create: Create the hosted repository when no local remote exists

        Returns:
            The resolved identity and what happened on the hosting side

        Raises:
            RemoteConfigConflict: If the existing remote URL differs
            AuthenticationFailure, TransportFailure, RepositoryCreationError:
                From the hosting API
        """
        identity = resolve_identity(self.config)
        remote_name = self.config.remote_name
        current_url = self.vcs.remote_url(remote_name)

        if current_url is not None:
            if current_url != identity.url:
                raise RemoteConfigConflict(
                    f"Remote '{remote_name}' is set to '{current_url}' but "
                    f"'{identity.url}' was expected. Fix the remote manually to continue.",
                    detail=current_url,
                )
            logger.info("Remote '%s' already points at %s", remote_name, identity.url)
            return identity, RepoCreationStatus.SKIPPED

        status = RepoCreationStatus.SKIPPED
        if create:
            status = self.host.create_repository(identity.repo_name, private=False)

        self.vcs.add_remote(remote_name, identity.url)
        logger.info("Added remote '%s' -> %s", remote_name, identity.url)
        return identity, status
