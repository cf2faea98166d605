"""
Submission gate.

Submits the current working tree for review before anything is committed or
pushed, so a rejected or failing submission never reaches the remote.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from pubsync.core.config.models import PublishConfig
from pubsync.core.credentials.store import Credentials
from pubsync.core.errors import CredentialMissing, SubmissionError, SubmissionRejected
from pubsync.core.staging.ignore import ensure_ignore_entries
from pubsync.core.submission.client import SubmissionClient
from pubsync.core.submission.models import (
    SubmissionOutcome,
    SubmissionRequest,
    SubmissionStatus,
)

logger = logging.getLogger(__name__)

WEBEXT_IGNORE = ".web-extignore"

# Never part of the submitted package, on top of the sensitive paths
EXTRA_EXCLUSIONS = (
    "install-addon-policy.sh",
    "README.md",
    "updates.json",
    "screenshots/**",
)

WEBEXT_IGNORE_BASE = (
    ".git/",
    ".github/",
    ".web-ext-ignore",
    ".webextignore",
    "install-addon-policy.sh",
    "updates.json",
    "README.md",
    "screenshots/",
)

DEFAULT_METADATA = {
    "version": {
        "custom_license": {
            "name": {"en-US": "Mozilla Public License 2.0"},
            "text": {
                "en-US": "Mozilla Public License 2.0. Full text: https://www.mozilla.org/MPL/2.0/"
            },
        }
    }
}


class SubmissionGate:
    """
    Runs the artifact-review submission and refuses anything but acceptance.

    Example:
        >>> gate = SubmissionGate(config, credentials, WebExtClient(), sensitive_paths(config))
        >>> gate.run().status
        <SubmissionStatus.ACCEPTED: 'accepted'>
    """

    def __init__(
        self,
        config: PublishConfig,
        credentials: Credentials,
        client: SubmissionClient,
        sensitive: tuple[str, ...],
    ) -> None:
        self.config = config
        self.credentials = credentials
        self.client = client
        self.sensitive = sensitive

    @property
    def artifacts_dir(self) -> Path:
        return self.config.repo_dir / self.config.artifacts_dir

    @property
    def metadata_file(self) -> Path:
        return self.config.repo_dir / self.config.metadata_file

    def exclusions(self) -> tuple[str, ...]:
        """
        Patterns passed to the client as ``--ignore-files``.

        Always contains every sensitive path.
        """
        artifacts = self.config.artifacts_dir.rstrip("/")
        patterns = [*self.sensitive, *EXTRA_EXCLUSIONS, f"{artifacts}/**"]
        return tuple(dict.fromkeys(patterns))

    def ignore_file_entries(self) -> list[str]:
        """Entries the submission tool's own ignore file must hold."""
        artifacts = self.config.artifacts_dir.rstrip("/")
        return [*WEBEXT_IGNORE_BASE, f"{artifacts}/", *self.sensitive]

    def ensure_metadata(self) -> bool:
        """Write the default metadata document if none exists. True if created."""
        if self.metadata_file.exists():
            return False
        self.metadata_file.parent.mkdir(parents=True, exist_ok=True)
        self.metadata_file.write_text(json.dumps(DEFAULT_METADATA, indent=2) + "\n")
        logger.info("Created default submission metadata at %s", self.metadata_file.name)
        return True

    def prepare(self) -> None:
        """Side configuration: ignore file, artifacts dir, metadata document."""
        ensure_ignore_entries(self.config.repo_dir / WEBEXT_IGNORE, self.ignore_file_entries())
        self.artifacts_dir.mkdir(parents=True, exist_ok=True)
        self.ensure_metadata()

    def build_request(self) -> SubmissionRequest:
        if self.credentials.submission_key is None or self.credentials.submission_secret is None:
            raise CredentialMissing(
                "Submission credentials were not resolved",
                stage="submission",
            )
        source_dir = None
        if self.config.source_dir:
            source_dir = self.config.repo_dir / self.config.source_dir
        return SubmissionRequest(
            api_key=self.credentials.submission_key,
            api_secret=self.credentials.submission_secret,
            channel=self.config.channel,
            artifacts_dir=self.artifacts_dir,
            metadata_file=self.metadata_file,
            ignore_files=self.exclusions(),
            source_dir=source_dir,
            working_dir=self.config.repo_dir,
        )

    def run(self) -> SubmissionOutcome:
        """
        Submit the working tree.

        Returns:
            The accepted outcome

        Raises:
            SubmissionRejected: If the client finished with a non-zero status
            SubmissionError: If the client could not run
        """
        self.prepare()
        request = self.build_request()

        logger.info("Submitting to the review service (channel: %s)", self.config.channel.value)
        outcome = self.client.submit(request)

        if outcome.status == SubmissionStatus.REJECTED:
            raise SubmissionRejected(
                "Submission was not accepted; nothing was committed or pushed",
                detail=outcome.detail,
                exit_code=outcome.exit_code,
            )
        if outcome.status == SubmissionStatus.ERROR:
            raise SubmissionError(
                "Submission could not be performed; nothing was committed or pushed",
                detail=outcome.detail,
            )

        logger.info("Submission complete; follow its review status on the developer hub")
        return outcome
