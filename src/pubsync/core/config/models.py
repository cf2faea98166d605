"""
Configuration data models for pubsync.

A single immutable PublishConfig is built once at startup from the
environment and threaded through every pipeline stage.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RemoteProtocol(str, Enum):
    """Transport used for the `origin` remote."""

    HTTPS = "https"
    SSH = "ssh"


class SubmissionChannel(str, Enum):
    """Distribution channel requested from the artifact-review service."""

    LISTED = "listed"
    UNLISTED = "unlisted"


class PublishAction(str, Enum):
    """What the operator asked this run to do."""

    PUSH = "push"
    PULL = "pull"


class SubmissionMode(str, Enum):
    """Whether the submission gate runs before publishing."""

    ENABLED = "enabled"
    DISABLED = "disabled"


class PublishConfig(BaseModel):
    """
    Run configuration.

    Enum-typed fields reject anything outside their recognised values; there
    are no silent fallbacks.
    """

    model_config = ConfigDict(frozen=True)

    repo_dir: Path = Field(description="Local working directory being published")
    owner: str = Field(min_length=1, description="Repository owner and HTTPS username")
    host: str = Field(default="github.com", min_length=1, description="Hosting domain")
    protocol: RemoteProtocol = Field(default=RemoteProtocol.HTTPS)
    action: PublishAction = Field(default=PublishAction.PUSH)
    submission: SubmissionMode = Field(default=SubmissionMode.ENABLED)
    channel: SubmissionChannel = Field(default=SubmissionChannel.LISTED)
    artifacts_dir: str = Field(default=".web-ext-artifacts", min_length=1)
    metadata_file: str = Field(default="amo-metadata.json", min_length=1)
    source_dir: str | None = Field(
        default=None,
        description="Directory handed to the submission client instead of repo_dir",
    )
    commit_message: str = Field(default="push", min_length=1)
    remote_name: str = Field(default="origin")
    branch: str = Field(default="main")
    script_path: Path | None = Field(
        default=None,
        description="Path of the running orchestrator, kept out of commits",
    )
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level '{v}'")
        return level

    @property
    def repo_name(self) -> str:
        """Repository name, taken from the working directory name."""
        return self.repo_dir.resolve().name

    @property
    def api_base_url(self) -> str:
        """REST API root for the configured host."""
        return f"https://api.{self.host}"

    @property
    def submission_enabled(self) -> bool:
        """True when this run must pass the submission gate."""
        return self.action == PublishAction.PUSH and self.submission == SubmissionMode.ENABLED
