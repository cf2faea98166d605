"""
Sensitive-path exclusion.

Staging starts from "add everything", so anything on the sensitive list has
to be pulled back out of the index afterwards: unstaged, then untracked if an
earlier commit already carried it. Both steps tolerate there being nothing to
do, which makes the whole sequence idempotent.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pubsync.core.config.env import PROJECT_ENV_FILES
from pubsync.core.config.models import PublishConfig
from pubsync.core.credentials.store import credential_file_names
from pubsync.core.git.backend import VersionControlBackend
from pubsync.core.staging.ignore import ensure_ignore_entries

logger = logging.getLogger(__name__)

GITIGNORE = ".gitignore"


def script_relative_path(script_path: Path | None, repo_dir: Path) -> str | None:
    """
    Path of the running orchestrator relative to the repository.

    Returns:
        POSIX relative path, or None when the script lives outside the repo
    """
    if script_path is None:
        return None
    try:
        rel = script_path.resolve().relative_to(repo_dir.resolve())
    except ValueError:
        return None
    return rel.as_posix()


def sensitive_paths(config: PublishConfig) -> tuple[str, ...]:
    """
    Paths that must never be committed.

    The orchestrator's own script (when inside the repository), every file a
    secret may be stored in, and the dotenv files the CLI reads.
    """
    paths: list[str] = []
    script_rel = script_relative_path(config.script_path, config.repo_dir)
    if script_rel:
        paths.append(script_rel)
    paths.extend(credential_file_names())
    paths.extend(PROJECT_ENV_FILES)
    return tuple(dict.fromkeys(paths))


def gitignore_entries(config: PublishConfig) -> list[str]:
    """Patterns the version-control ignore file must contain."""
    entries: list[str] = []
    script_rel = script_relative_path(config.script_path, config.repo_dir)
    if script_rel:
        entries.append(script_rel)
    entries.extend(credential_file_names())
    entries.extend(PROJECT_ENV_FILES)
    entries.append(f"{config.artifacts_dir.rstrip('/')}/")
    return entries


class SensitiveFileGuard:
    """
    Stages the working tree with sensitive paths excluded.

    Example:
        >>> guard = SensitiveFileGuard(git, sensitive_paths(config))
        >>> guard.stage()
    """

    def __init__(
        self,
        vcs: VersionControlBackend,
        paths: tuple[str, ...],
        *,
        repo_dir: Path | None = None,
        ignore_entries: list[str] | None = None,
    ) -> None:
        self.vcs = vcs
        self.paths = paths
        self.repo_dir = repo_dir
        self.ignore_entries = ignore_entries or []

    def ensure_gitignore(self) -> list[str]:
        """Append missing sensitive patterns to .gitignore."""
        if self.repo_dir is None or not self.ignore_entries:
            return []
        return ensure_ignore_entries(self.repo_dir / GITIGNORE, self.ignore_entries)

    def protect(self, path: str) -> None:
        """Unstage a path and drop it from the index if it is tracked."""
        if not path:
            return
        if self.vcs.unstage(path):
            logger.debug("Unstaged %s", path)
        if self.vcs.is_tracked(path) and self.vcs.remove_from_index(path):
            logger.info("Removed %s from the index", path)

    def stage(self) -> list[str]:
        """
        Stage everything except the sensitive paths.

        Returns:
            Paths left staged afterwards
        """
        self.ensure_gitignore()
        self.vcs.stage_all()
        for path in self.paths:
            self.protect(path)
        return self.vcs.staged_paths()
