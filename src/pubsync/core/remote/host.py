"""
Hosting service REST client.

Only one call is needed: create the repository under the authenticated user.
The HTTP status is interpreted as a small state machine:

    201        -> created
    422        -> already exists (idempotent success)
    401 / 403  -> AuthenticationFailure
    0          -> TransportFailure (no response at all, shown as 000)
    other      -> RepositoryCreationError carrying the response body
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import SecretStr

from pubsync.core.errors import (
    AuthenticationFailure,
    RepositoryCreationError,
    TransportFailure,
)
from pubsync.core.remote.models import RepoCreationStatus

logger = logging.getLogger(__name__)

TRANSPORT_FAILURE_STATUS = 0


class RemoteHost(Protocol):
    """Capability for talking to the hosting service."""

    def create_repository(self, name: str, *, private: bool = False) -> RepoCreationStatus: ...


def interpret_creation_response(status_code: int, body: str, repo_name: str) -> RepoCreationStatus:
    """
    Map a repository-creation response onto its outcome.

    Args:
        status_code: HTTP status, or 0 if no response was received
        body: Raw response body (shown to the operator on failure)
        repo_name: Repository being created, for messages

    Returns:
        CREATED or ALREADY_EXISTS

    Raises:
        AuthenticationFailure: On 401/403
        TransportFailure: On status 0
        RepositoryCreationError: On any other non-success status
    """
    if status_code == 201:
        logger.info("Repository '%s' created on the hosting service", repo_name)
        return RepoCreationStatus.CREATED
    if status_code == 422:
        logger.warning("Repository '%s' already exists; reusing it", repo_name)
        return RepoCreationStatus.ALREADY_EXISTS
    if status_code in (401, 403):
        raise AuthenticationFailure(
            f"Authentication failed while creating repository '{repo_name}' "
            f"(status {status_code})",
            detail=body,
            status_code=status_code,
        )
    if status_code == TRANSPORT_FAILURE_STATUS:
        raise TransportFailure(
            "No response from the hosting API (status 000). Check your connection.",
            detail=body,
        )
    raise RepositoryCreationError(
        f"Failed to create repository '{repo_name}' (status {status_code})",
        status_code=status_code,
        detail=body,
    )


class GitHubHost:
    """
    RemoteHost for GitHub-compatible REST APIs.

    Example:
        >>> host = GitHubHost(SecretStr("ghp_..."), "https://api.github.com")
        >>> host.create_repository("my-tool")
        <RepoCreationStatus.CREATED: 'created'>
    """

    ACCEPT = "application/vnd.github+json"

    def __init__(
        self,
        token: SecretStr,
        api_base_url: str = "https://api.github.com",
        *,
        client: httpx.Client | None = None,
    ) -> None:
        self.api_base_url = api_base_url.rstrip("/")
        self._token = token
        self._client = client

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"token {self._token.get_secret_value()}",
            "Accept": self.ACCEPT,
        }

    def _post(self, path: str, payload: dict[str, object]) -> httpx.Response:
        url = f"{self.api_base_url}{path}"
        if self._client is not None:
            return self._client.post(url, json=payload, headers=self._headers())
        with httpx.Client() as client:
            return client.post(url, json=payload, headers=self._headers())

    def create_repository(self, name: str, *, private: bool = False) -> RepoCreationStatus:
        """
        Create a repository for the authenticated user.

        Raises:
            AuthenticationFailure, TransportFailure, RepositoryCreationError
        """
        logger.info("Creating repository '%s' via %s", name, self.api_base_url)
        try:
            response = self._post("/user/repos", {"name": name, "private": private})
        except httpx.TransportError as e:
            return interpret_creation_response(TRANSPORT_FAILURE_STATUS, str(e), name)

        return interpret_creation_response(response.status_code, response.text, name)
