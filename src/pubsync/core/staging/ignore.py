"""
Ignore-file maintenance.

Both the version-control ignore file and the submission tool's ignore file
are plain newline-terminated pattern lists. We only ever append the entries
that are missing.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_ignore_entries(path: Path, entries: Iterable[str]) -> list[str]:
    """
    Make sure every entry appears as a line of the ignore file.

    Creates the file when absent. Existing lines are compared exactly; a
    newline is inserted before appending when the file does not end with one.

    Args:
        path: Ignore file to update
        entries: Patterns that must be present

    Returns:
        The entries that were appended, in order
    """
    wanted: list[str] = []
    for entry in entries:
        if entry and entry not in wanted:
            wanted.append(entry)

    if not path.exists():
        path.write_text("".join(f"{entry}\n" for entry in wanted), encoding="utf-8")
        logger.info("Created %s with %d entries", path.name, len(wanted))
        return wanted

    content = path.read_text(encoding="utf-8")
    present = set(content.splitlines())
    missing = [entry for entry in wanted if entry not in present]
    if not missing:
        return []

    prefix = "\n" if content and not content.endswith("\n") else ""
    with path.open("a", encoding="utf-8") as f:
        f.write(prefix + "".join(f"{entry}\n" for entry in missing))
    logger.info("Added %d entries to %s", len(missing), path.name)
    return missing
