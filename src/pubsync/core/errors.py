"""
Exceptions raised by the publish pipeline.

Every error is fatal to the run. Each carries the name of the stage that
failed and, where available, the raw detail (response body, git stderr) so the
CLI can show the operator exactly what the remote side said.

Exception Hierarchy:
    PublishError (base)
    ├── DependencyMissing
    ├── CredentialMissing
    ├── InvalidConfiguration
    ├── RemoteConfigConflict
    ├── AuthenticationFailure
    ├── TransportFailure
    ├── RepositoryCreationError
    ├── ReconciliationConflict
    ├── SubmissionRejected
    ├── SubmissionError
    └── PushFailure

Example:
    >>> try:
    ...     raise RemoteConfigConflict("origin points elsewhere", detail="git@x:y/z.git")
    ... except PublishError as e:
    ...     print(f"[{e.stage}] {e}")
"""


class PublishError(Exception):
    """
    Base exception for all pipeline failures.

    Attributes:
        message: Human-readable error message
        stage: Pipeline stage that failed
        detail: Raw diagnostic output (response body, stderr), if any
        context: Additional context as keyword arguments
    """

    stage = "publish"

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        detail: str = "",
        **context: object,
    ) -> None:
        super().__init__(message)
        self.message = message
        if stage is not None:
            self.stage = stage
        self.detail = detail
        self.context = context

    def __str__(self) -> str:
        return self.message


class DependencyMissing(PublishError):
    """A required executable is not on PATH."""

    stage = "dependencies"


class CredentialMissing(PublishError):
    """A secret could not be resolved from the environment or a local file."""

    stage = "credentials"


class InvalidConfiguration(PublishError):
    """A configuration value is missing or outside its recognised set."""

    stage = "configuration"


class RemoteConfigConflict(PublishError):
    """The existing `origin` remote does not match the canonical URL."""

    stage = "remote"


class AuthenticationFailure(PublishError):
    """The hosting API or a git network call rejected our credentials."""

    stage = "remote"


class TransportFailure(PublishError):
    """No response was received from the hosting API."""

    stage = "remote"


class RepositoryCreationError(PublishError):
    """The hosting API answered repository creation with an unexpected status."""

    stage = "remote"

    def __init__(self, message: str, *, status_code: int, detail: str = "") -> None:
        super().__init__(message, detail=detail, status_code=status_code)
        self.status_code = status_code


class ReconciliationConflict(PublishError):
    """Rebasing onto the remote branch did not complete."""

    stage = "reconcile"


class SubmissionRejected(PublishError):
    """The artifact-review client finished with a non-zero status."""

    stage = "submission"


class SubmissionError(PublishError):
    """The artifact-review client could not be run at all."""

    stage = "submission"


class PushFailure(PublishError):
    """`git push` was refused by the remote."""

    stage = "push"
