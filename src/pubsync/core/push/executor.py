"""
Authenticated push of the canonical branch.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager

from pubsync.core.config.models import PublishConfig
from pubsync.core.credentials.store import Credentials
from pubsync.core.errors import AuthenticationFailure, PushFailure
from pubsync.core.git.backend import GitError, VersionControlBackend
from pubsync.core.push.credentials import is_auth_failure, network_credentials

logger = logging.getLogger(__name__)


class PushExecutor:
    """
    Runs git network operations with credentials scoped to each call.

    Example:
        >>> executor = PushExecutor(config, GitBackend(config.repo_dir), credentials)
        >>> executor.push("main")
    """

    def __init__(
        self,
        config: PublishConfig,
        vcs: VersionControlBackend,
        credentials: Credentials,
    ) -> None:
        self.config = config
        self.vcs = vcs
        self.credentials = credentials

    @contextmanager
    def network_env(self) -> Iterator[Mapping[str, str] | None]:
        """Environment for a single credential-scoped git call."""
        with network_credentials(
            self.config.protocol, self.config.owner, self.credentials.scm_token
        ) as env:
            yield env

    def push(self, branch: str) -> None:
        """
        Push the branch and set its upstream.

        Raises:
            AuthenticationFailure: If the remote rejected the credentials
            PushFailure: For any other refusal, with git's output verbatim
        """
        remote = self.config.remote_name
        logger.info("Pushing '%s' to %s", branch, remote)
        try:
            with self.network_env() as env:
                self.vcs.push(remote, branch, env=env)
        except GitError as e:
            if is_auth_failure(e.stderr):
                raise AuthenticationFailure(
                    f"Push to '{remote}' was rejected: authentication failed",
                    stage="push",
                    detail=e.stderr,
                ) from e
            raise PushFailure(f"Push of '{branch}' to '{remote}' failed", detail=e.stderr) from e
        logger.info("Push complete")
