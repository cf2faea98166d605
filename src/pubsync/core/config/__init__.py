"""
Configuration models and loading.

Builds one immutable PublishConfig from the layered environment:
process env > project .env files > user .env.
"""

from .env import read_layered_env
from .loader import load_config
from .models import (
    PublishAction,
    PublishConfig,
    RemoteProtocol,
    SubmissionChannel,
    SubmissionMode,
)

__all__ = [
    # Models
    "PublishAction",
    "PublishConfig",
    "RemoteProtocol",
    "SubmissionChannel",
    "SubmissionMode",
    # Loader functions
    "load_config",
    "read_layered_env",
]
