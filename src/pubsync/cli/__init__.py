"""
pubsync CLI - main application entry point.

A single command with no flags: everything is driven by environment
variables (and the project's .env files), so the same invocation can be
rerun until local and remote state converge.
"""

import logging
import sys
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from pubsync import __version__
from pubsync.cli.errors import ExitCode, exit_code_for, print_error, print_publish_error
from pubsync.core.config import load_config, read_layered_env
from pubsync.core.errors import PublishError
from pubsync.core.pipeline import PublishPipeline, PublishResult

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="pubsync",
    help="Publish the current directory to its hosted repository",
    no_args_is_help=False,
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)

console = Console()


def configure_logging(level: str = "INFO") -> None:
    """Send log records to stderr at the given level."""
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(message)s",
        stream=sys.stderr,
        force=True,
    )


def _script_path() -> Path | None:
    argv0 = Path(sys.argv[0]) if sys.argv and sys.argv[0] else None
    if argv0 is None or not argv0.exists():
        return None
    return argv0.resolve()


def _print_result(result: PublishResult) -> None:
    if result.pushed:
        console.print(f"[green]✓[/green] Push complete: {result.remote_url}")
    else:
        console.print(f"[green]✓[/green] Pull complete: {result.remote_url}")
    console.print(f"[dim]{escape(result.summary())}[/dim]", highlight=False)


@app.command()
def publish() -> None:
    """
    Reconcile, submit for review, commit and push the current directory.

    Environment:
        GITHUB_TOKEN, GITHUB_USER     credentials and repository owner
        GITHUB_REMOTE_PROTOCOL        https (default) or ssh
        AMO_API_KEY, AMO_API_SECRET   review-service credentials
        AMO_CHANNEL                   listed (default) or unlisted
        PUBSYNC_ACTION                push (default) or pull
        PUBSYNC_SUBMISSION            enabled (default) or disabled

    Examples:
        pubsync                              # publish the current directory
        PUBSYNC_ACTION=pull pubsync          # only sync with the remote
        PUBSYNC_SUBMISSION=disabled pubsync  # push without a review submission
    """
    configure_logging()
    repo_dir = Path.cwd()
    environ = read_layered_env(repo_dir)

    try:
        config = load_config(environ, repo_dir, script_path=_script_path())
        configure_logging(config.log_level)
        logger.debug("pubsync %s publishing %s", __version__, repo_dir)

        result = PublishPipeline.from_environment(config, environ).run()
    except PublishError as e:
        print_publish_error(e)
        raise typer.Exit(exit_code_for(e))
    except KeyboardInterrupt:
        print_error("Interrupted")
        raise typer.Exit(ExitCode.SIGINT)

    _print_result(result)


def cli_main() -> None:
    """Console-script entry point."""
    app()


__all__ = ["app", "cli_main"]
