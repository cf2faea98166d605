"""
Secret resolution.

Each secret is looked up once at startup: first in the environment, then in
a plain-text file named after it (``NAME`` or ``NAME.txt``) in the working
directory. Downstream stages only ever receive the resolved values.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, SecretStr

from pubsync.core.errors import CredentialMissing

logger = logging.getLogger(__name__)

SCM_TOKEN = "GITHUB_TOKEN"
SUBMISSION_KEY = "AMO_API_KEY"
SUBMISSION_SECRET = "AMO_API_SECRET"

SUBMISSION_KEY_URL = "https://addons.mozilla.org/developers/addon/api/key"

_BOM = "\ufeff"


def secret_file_names(name: str) -> tuple[str, str]:
    """File names a secret may be stored under, in lookup order."""
    return (name, f"{name}.txt")


def credential_file_names() -> list[str]:
    """Every file name that may hold a secret."""
    names: list[str] = []
    for secret in (SCM_TOKEN, SUBMISSION_KEY, SUBMISSION_SECRET):
        names.extend(secret_file_names(secret))
    return names


def read_first_line(path: Path) -> str | None:
    """
    Read the first meaningful line of a secret file.

    Blank lines and ``#`` comment lines (the placeholder's instructions) are
    skipped; a leading BOM is removed.

    Args:
        path: File to read

    Returns:
        The stripped line, or None if the file is unreadable or has none
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Could not read secret file %s: %s", path, e)
        return None

    for line in text.lstrip(_BOM).splitlines():
        line = line.strip().lstrip(_BOM)
        if line and not line.startswith("#"):
            return line
    return None


class Credentials(BaseModel):
    """Secrets for one run. SecretStr keeps them out of reprs and logs."""

    model_config = ConfigDict(frozen=True)

    scm_token: SecretStr
    submission_key: SecretStr | None = None
    submission_secret: SecretStr | None = None


class CredentialStore:
    """
    Resolves named secrets from the environment or local files.

    Example:
        >>> store = CredentialStore(os.environ, Path.cwd())
        >>> token = store.resolve("GITHUB_TOKEN")
    """

    def __init__(self, environ: Mapping[str, str], base_dir: Path) -> None:
        self.environ = environ
        self.base_dir = base_dir

    def lookup(self, name: str) -> SecretStr | None:
        """Return the secret, or None if neither source has a value."""
        value = self.environ.get(name, "").strip()
        if value:
            logger.debug("Secret %s taken from environment", name)
            return SecretStr(value)

        for file_name in secret_file_names(name):
            path = self.base_dir / file_name
            if not path.is_file():
                continue
            line = read_first_line(path)
            if line:
                logger.debug("Secret %s taken from %s", name, file_name)
                return SecretStr(line)
        return None

    def resolve(self, name: str) -> SecretStr:
        """
        Resolve a required secret.

        Raises:
            CredentialMissing: If the secret is not available
        """
        secret = self.lookup(name)
        if secret is None:
            files = " or ".join(secret_file_names(name))
            raise CredentialMissing(
                f"Set {name} in the environment or put it on the first line of {files}",
                secret=name,
            )
        return secret

    def create_placeholder(self, name: str, label: str) -> Path | None:
        """
        Create ``NAME.txt`` with instructions for the operator.

        An existing file is never touched.

        Returns:
            Path of the created file, or None if it already existed
        """
        path = self.base_dir / f"{name}.txt"
        if path.exists():
            return None
        path.write_text(
            "\n"
            f"# Paste your {label} on the first line of this file.\n"
            f"# Generate new credentials at {SUBMISSION_KEY_URL}\n",
            encoding="utf-8",
        )
        logger.warning("Created placeholder %s; paste your %s into it", path, label)
        return path

    def resolve_all(self, *, need_submission: bool) -> Credentials:
        """
        Resolve every secret the run needs.

        Submission secrets are only required when the submission gate runs.
        Missing submission secrets get placeholder files before the error is
        raised, so the operator knows where to put them.

        Raises:
            CredentialMissing: Naming every missing secret
        """
        scm_token = self.resolve(SCM_TOKEN)
        if not need_submission:
            return Credentials(scm_token=scm_token)

        labels: Sequence[tuple[str, str]] = (
            (SUBMISSION_KEY, "AMO API key"),
            (SUBMISSION_SECRET, "AMO API secret"),
        )
        found: dict[str, SecretStr] = {}
        missing: list[str] = []
        for name, label in labels:
            secret = self.lookup(name)
            if secret is None:
                self.create_placeholder(name, label)
                missing.append(name)
            else:
                found[name] = secret

        if missing:
            raise CredentialMissing(
                f"Missing submission credentials: {', '.join(missing)}. "
                f"Generate them at {SUBMISSION_KEY_URL} and set them in the environment "
                "or on the first line of the matching .txt file.",
                secrets=missing,
            )

        return Credentials(
            scm_token=scm_token,
            submission_key=found[SUBMISSION_KEY],
            submission_secret=found[SUBMISSION_SECRET],
        )
