"""
Remote repository data models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, computed_field

from pubsync.core.config.models import RemoteProtocol


class RepoCreationStatus(str, Enum):
    """What happened when we made sure the hosted repository exists."""

    CREATED = "created"
    ALREADY_EXISTS = "already_exists"
    SKIPPED = "skipped"


class RemoteIdentity(BaseModel):
    """
    Canonical identity of the hosted repository.

    The URL is derived from the other fields, so two identities with the same
    fields always produce the same URL.

    Example:
        >>> RemoteIdentity(protocol="ssh", owner="octo", repo_name="tool").url
        'git@github.com:octo/tool.git'
        >>> RemoteIdentity(protocol="https", owner="octo", repo_name="tool").url
        'https://github.com/octo/tool.git'
    """

    model_config = ConfigDict(frozen=True)

    protocol: RemoteProtocol = Field(description="Transport for the remote URL")
    owner: str = Field(min_length=1, description="User or organization")
    repo_name: str = Field(min_length=1, description="Repository name")
    host: str = Field(default="github.com", description="Hosting domain")
    ssh_user: str = Field(default="git", description="Login used in SSH URLs")

    @computed_field
    @property
    def url(self) -> str:
        """Remote URL in the form git expects for the protocol."""
        if self.protocol == RemoteProtocol.SSH:
            return f"{self.ssh_user}@{self.host}:{self.owner}/{self.repo_name}.git"
        return f"https://{self.host}/{self.owner}/{self.repo_name}.git"

    @property
    def full_name(self) -> str:
        """owner/repo"""
        return f"{self.owner}/{self.repo_name}"
