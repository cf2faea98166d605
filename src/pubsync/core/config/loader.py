"""
Configuration loading.

Maps environment variables onto PublishConfig fields. Empty values count as
unset (matching shell ``${VAR:-default}`` semantics); anything else is passed
to Pydantic, and a validation failure becomes InvalidConfiguration.

Supported env vars:
    GITHUB_USER              - owner of the hosted repository (required)
    GITHUB_HOST              - hosting domain
    GITHUB_REMOTE_PROTOCOL   - https | ssh
    AMO_CHANNEL              - listed | unlisted
    AMO_ARTIFACTS_DIR        - submission artifacts directory
    AMO_METADATA_FILE        - submission metadata document
    AMO_SOURCE_DIR           - optional source directory for the submission
    PUBSYNC_ACTION           - push | pull
    PUBSYNC_SUBMISSION       - enabled | disabled
    PUBSYNC_COMMIT_MESSAGE   - message used for generated commits
    PUBSYNC_LOG_LEVEL        - logging level name
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pubsync.core.errors import InvalidConfiguration

from .models import PublishConfig

ENV_FIELDS: dict[str, str] = {
    "GITHUB_USER": "owner",
    "GITHUB_HOST": "host",
    "GITHUB_REMOTE_PROTOCOL": "protocol",
    "AMO_CHANNEL": "channel",
    "AMO_ARTIFACTS_DIR": "artifacts_dir",
    "AMO_METADATA_FILE": "metadata_file",
    "AMO_SOURCE_DIR": "source_dir",
    "PUBSYNC_ACTION": "action",
    "PUBSYNC_SUBMISSION": "submission",
    "PUBSYNC_COMMIT_MESSAGE": "commit_message",
    "PUBSYNC_LOG_LEVEL": "log_level",
}

# Fields whose values are case-insensitive enum members
_LOWERCASED = {"protocol", "channel", "action", "submission"}


def config_from_env(environ: Mapping[str, str]) -> dict[str, Any]:
    """
    Collect PublishConfig keyword arguments from an environment mapping.

    Args:
        environ: Environment variables

    Returns:
        Dict of field name to raw value, only for variables that are set
    """
    values: dict[str, Any] = {}
    for var, field in ENV_FIELDS.items():
        raw = environ.get(var, "").strip()
        if not raw:
            continue
        values[field] = raw.lower() if field in _LOWERCASED else raw
    return values


def load_config(
    environ: Mapping[str, str],
    repo_dir: Path,
    *,
    script_path: Path | None = None,
) -> PublishConfig:
    """
    Build the run configuration.

    Args:
        environ: Environment variables (already layered with dotenv files)
        repo_dir: Working directory being published
        script_path: Path of the running orchestrator, if known

    Returns:
        Validated, frozen PublishConfig

    Raises:
        InvalidConfiguration: If a variable is missing or not recognised
    """
    values = config_from_env(environ)
    if "owner" not in values:
        raise InvalidConfiguration(
            "GITHUB_USER is not set; it names the owner of the hosted repository"
        )

    try:
        return PublishConfig(repo_dir=repo_dir, script_path=script_path, **values)
    except ValidationError as e:
        problems = []
        field_to_var = {field: var for var, field in ENV_FIELDS.items()}
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "?"
            problems.append(f"{field_to_var.get(field, field)}: {err['msg']}")
        raise InvalidConfiguration(
            "Invalid configuration: " + "; ".join(problems),
            detail=str(e),
        ) from e
