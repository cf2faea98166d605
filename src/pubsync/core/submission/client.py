"""
Artifact-review submission client.

WebExtClient runs ``web-ext sign`` against the working tree. Its output is
streamed straight to the operator's terminal since signing can take a while;
only the exit status decides the outcome.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

from pubsync.core.submission.models import (
    SubmissionOutcome,
    SubmissionRequest,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)


class SubmissionClient(Protocol):
    """Capability for submitting the working tree for review."""

    def submit(self, request: SubmissionRequest) -> SubmissionOutcome: ...


class WebExtClient:
    """SubmissionClient backed by Mozilla's ``web-ext`` CLI."""

    def __init__(self, executable: str = "web-ext") -> None:
        self.executable = executable

    def build_command(self, request: SubmissionRequest) -> list[str]:
        """Command line for ``web-ext sign`` (secrets included, never log it)."""
        cmd = [
            self.executable,
            "sign",
            "--api-key",
            request.api_key.get_secret_value(),
            "--api-secret",
            request.api_secret.get_secret_value(),
            "--channel",
            request.channel.value,
            "--artifacts-dir",
            str(request.artifacts_dir),
            "--amo-metadata",
            str(request.metadata_file),
        ]
        for pattern in request.ignore_files:
            cmd.extend(["--ignore-files", pattern])
        if request.source_dir is not None:
            cmd.extend(["--source-dir", str(request.source_dir)])
        return cmd

    def submit(self, request: SubmissionRequest) -> SubmissionOutcome:
        cmd = self.build_command(request)
        logger.debug(
            "Running %s sign (channel=%s, %d ignore patterns)",
            self.executable,
            request.channel.value,
            len(request.ignore_files),
        )
        try:
            result = subprocess.run(cmd, cwd=request.working_dir, check=False)
        except OSError as e:
            return SubmissionOutcome(
                channel=request.channel,
                status=SubmissionStatus.ERROR,
                detail=f"Could not run {self.executable}: {e}",
            )

        if result.returncode != 0:
            return SubmissionOutcome(
                channel=request.channel,
                status=SubmissionStatus.REJECTED,
                exit_code=result.returncode,
                detail=f"{self.executable} sign exited with status {result.returncode}",
            )
        return SubmissionOutcome(
            channel=request.channel,
            status=SubmissionStatus.ACCEPTED,
            exit_code=0,
        )
