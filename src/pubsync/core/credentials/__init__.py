"""Secret resolution for the publish pipeline."""

from pubsync.core.credentials.store import (
    SCM_TOKEN,
    SUBMISSION_KEY,
    SUBMISSION_SECRET,
    CredentialStore,
    Credentials,
    credential_file_names,
    read_first_line,
)

__all__ = [
    "CredentialStore",
    "Credentials",
    "SCM_TOKEN",
    "SUBMISSION_KEY",
    "SUBMISSION_SECRET",
    "credential_file_names",
    "read_first_line",
]
