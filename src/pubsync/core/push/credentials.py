"""
Credential-prompt responder for git network calls.

For HTTPS remotes git asks GIT_ASKPASS for a username and a password. We
write a tiny executable responder for the duration of one network call and
delete it afterwards, whatever happens. The responder itself holds no secret:
the username and token reach it through the environment of that single git
process only.
"""

from __future__ import annotations

import logging
import os
import stat
import tempfile
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from pathlib import Path

from pydantic import SecretStr

from pubsync.core.config.models import RemoteProtocol

logger = logging.getLogger(__name__)

USERNAME_VAR = "PUBSYNC_ASKPASS_USERNAME"
TOKEN_VAR = "PUBSYNC_ASKPASS_TOKEN"

RESPONDER_SCRIPT = f"""#!/bin/sh
case "$1" in
  *Username*|*username*) printf '%s\\n' "${USERNAME_VAR}" ;;
  *) printf '%s\\n' "${TOKEN_VAR}" ;;
esac
"""

# Substrings git and ssh print when credentials are rejected
AUTH_FAILURE_MARKERS = (
    "authentication failed",
    "could not read username",
    "could not read password",
    "invalid username or password",
    "permission denied (publickey",
    "terminal prompts disabled",
    "the requested url returned error: 401",
    "the requested url returned error: 403",
)


def is_auth_failure(stderr: str) -> bool:
    """True if git's error output says the credentials were rejected."""
    lowered = stderr.lower()
    return any(marker in lowered for marker in AUTH_FAILURE_MARKERS)


@contextmanager
def credential_prompt_responder(username: str, token: SecretStr) -> Iterator[dict[str, str]]:
    """
    Materialize a single-use GIT_ASKPASS responder.

    Yields:
        Environment variables to pass to exactly one git invocation

    The responder file is removed on every exit path.
    """
    fd, raw_path = tempfile.mkstemp(prefix="pubsync-askpass-", suffix=".sh")
    path = Path(raw_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(RESPONDER_SCRIPT)
        path.chmod(stat.S_IRWXU)
        logger.debug("Credential responder at %s", path)
        yield {
            "GIT_ASKPASS": str(path),
            "GIT_TERMINAL_PROMPT": "0",
            USERNAME_VAR: username,
            TOKEN_VAR: token.get_secret_value(),
        }
    finally:
        path.unlink(missing_ok=True)
        logger.debug("Credential responder removed")


@contextmanager
def network_credentials(
    protocol: RemoteProtocol, username: str, token: SecretStr
) -> Iterator[Mapping[str, str] | None]:
    """
    Credentials for one network call over the given protocol.

    SSH relies on the transport's own keys, so nothing is injected.
    """
    if protocol != RemoteProtocol.HTTPS:
        yield None
        return
    with credential_prompt_responder(username, token) as env:
        yield env
