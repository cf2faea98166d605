"""
Submission data models.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from pubsync.core.config.models import SubmissionChannel


class SubmissionStatus(str, Enum):
    """Result reported by the artifact-review client."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"
    ERROR = "error"


class SubmissionRequest(BaseModel):
    """Everything the submission client needs for one run."""

    model_config = ConfigDict(frozen=True)

    api_key: SecretStr
    api_secret: SecretStr
    channel: SubmissionChannel
    artifacts_dir: Path
    metadata_file: Path
    ignore_files: tuple[str, ...] = Field(default_factory=tuple)
    source_dir: Path | None = None
    working_dir: Path


class SubmissionOutcome(BaseModel):
    """Created once per run by the submission gate."""

    model_config = ConfigDict(frozen=True)

    channel: SubmissionChannel
    status: SubmissionStatus
    exit_code: int | None = Field(default=None, description="Client process exit status")
    detail: str = Field(default="", description="Diagnostic text for non-accepted outcomes")

    @property
    def accepted(self) -> bool:
        return self.status == SubmissionStatus.ACCEPTED
