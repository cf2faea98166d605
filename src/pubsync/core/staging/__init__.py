"""Staging with sensitive paths excluded."""

from pubsync.core.staging.guard import (
    SensitiveFileGuard,
    gitignore_entries,
    script_relative_path,
    sensitive_paths,
)
from pubsync.core.staging.ignore import ensure_ignore_entries

__all__ = [
    "SensitiveFileGuard",
    "ensure_ignore_entries",
    "gitignore_entries",
    "script_relative_path",
    "sensitive_paths",
]
