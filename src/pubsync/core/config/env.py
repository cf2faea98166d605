"""Environment layering for pubsync.

Values are looked up in, from highest to lowest precedence:
  process environment > project .env.local > project .env > user .env

Unlike a plain ``load_dotenv`` we never write into ``os.environ``: the merged
view is returned as a new mapping and handed to the config loader, so secrets
read from dotenv files stay scoped to the run.
"""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from pathlib import Path

from dotenv import dotenv_values

PROJECT_ENV_FILES = (".env", ".env.local")


def user_env_path() -> Path:
    """Location of the per-user dotenv file (XDG aware)."""
    xdg_home = Path(os.environ.get("XDG_CONFIG_HOME", str(Path.home() / ".config")))
    return xdg_home / "pubsync" / ".env"


def _read_env(path: Path) -> dict[str, str]:
    if not path.is_file():
        return {}
    return {str(k): str(v) for k, v in dotenv_values(path).items() if k and v is not None}


def read_layered_env(
    project_dir: Path,
    *,
    environ: Mapping[str, str] | None = None,
    user_env_paths: Iterable[Path] | None = None,
) -> dict[str, str]:
    """Merge dotenv files under the process environment.

    Args:
        project_dir: directory holding the project's .env files
        environ: process environment (defaults to ``os.environ``)
        user_env_paths: explicit user env files (defaults to XDG location)

    Returns:
        New dict; later layers never override keys from ``environ``.
    """
    if environ is None:
        environ = os.environ
    if user_env_paths is None:
        user_env_paths = [user_env_path()]

    merged: dict[str, str] = {}
    for p in user_env_paths:
        merged.update(_read_env(Path(p)))
    for name in PROJECT_ENV_FILES:
        merged.update(_read_env(project_dir / name))

    merged.update(environ)
    return merged
