"""
Error reporting and exit codes for the pubsync CLI.

Diagnostics always go to stderr so stdout stays clean for the run summary.
"""

from enum import IntEnum

from rich.console import Console
from rich.markup import escape

from pubsync.core.errors import (
    CredentialMissing,
    DependencyMissing,
    InvalidConfiguration,
    PublishError,
    RemoteConfigConflict,
)

err_console = Console(stderr=True)


class ExitCode(IntEnum):
    """Standard exit codes for pubsync."""

    SUCCESS = 0
    """Run completed successfully."""

    GENERAL_ERROR = 1
    """A stage failed (network, review, git)."""

    USER_ERROR = 2
    """Configuration the operator has to fix (env vars, secrets, remote)."""

    SIGINT = 130
    """Terminated by SIGINT (Ctrl+C) - Unix standard."""


_USER_ERRORS = (CredentialMissing, DependencyMissing, InvalidConfiguration, RemoteConfigConflict)


def exit_code_for(error: PublishError) -> ExitCode:
    """Exit code for a pipeline error."""
    if isinstance(error, _USER_ERRORS):
        return ExitCode.USER_ERROR
    return ExitCode.GENERAL_ERROR


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional raw detail (response body, git output)
        solution: Optional action to fix it
    """
    err_console.print(f"[red]Error:[/red] {escape(problem)}", highlight=False)

    if reason:
        err_console.print(reason, markup=False, highlight=False)

    if solution:
        err_console.print(f"[cyan]→ Try:[/cyan] {escape(solution)}", highlight=False)


_SOLUTIONS: dict[type[PublishError], str] = {
    CredentialMissing: "export the variable or paste the value into the named .txt file",
    InvalidConfiguration: "check the GITHUB_* / AMO_* / PUBSYNC_* environment variables",
    RemoteConfigConflict: "git remote set-url origin <url>  # or remove the remote",
    DependencyMissing: "install the missing tool and make sure it is on PATH",
}


def print_publish_error(error: PublishError) -> None:
    """Report a pipeline failure, naming the stage that failed."""
    solution = next(
        (hint for cls, hint in _SOLUTIONS.items() if isinstance(error, cls)),
        None,
    )
    print_error(
        f"[{error.stage}] {error.message}",
        reason=error.detail or None,
        solution=solution,
    )
