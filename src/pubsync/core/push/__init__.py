"""Credential-scoped git network operations."""

from pubsync.core.push.credentials import (
    credential_prompt_responder,
    is_auth_failure,
    network_credentials,
)
from pubsync.core.push.executor import PushExecutor

__all__ = [
    "PushExecutor",
    "credential_prompt_responder",
    "is_auth_failure",
    "network_credentials",
]
