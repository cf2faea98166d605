"""
Publish pipeline.

Runs the stages strictly in order; each one is a precondition for the next
and any failure stops the run with a PublishError:

    credentials -> branch -> remote -> reconcile -> submission -> stage+commit -> push

A pull run stops after reconciliation.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager

from pydantic import BaseModel, Field

from pubsync.core.branches.normalizer import BranchNormalizer
from pubsync.core.commit.policy import CommitPolicy, CommitResult
from pubsync.core.config.models import PublishAction, PublishConfig
from pubsync.core.credentials.store import CredentialStore, Credentials
from pubsync.core.errors import DependencyMissing, PublishError
from pubsync.core.git.backend import GitBackend, GitError, VersionControlBackend
from pubsync.core.push.executor import PushExecutor
from pubsync.core.reconcile.models import ReconcileState
from pubsync.core.reconcile.reconciler import HistoryReconciler
from pubsync.core.remote.host import GitHubHost, RemoteHost
from pubsync.core.remote.models import RepoCreationStatus
from pubsync.core.remote.resolver import RemoteResolver
from pubsync.core.staging.guard import SensitiveFileGuard, gitignore_entries, sensitive_paths
from pubsync.core.submission.client import SubmissionClient, WebExtClient
from pubsync.core.submission.gate import SubmissionGate
from pubsync.core.submission.models import SubmissionOutcome

logger = logging.getLogger(__name__)


class PublishResult(BaseModel):
    """What a run did, stage by stage."""

    action: PublishAction
    branch: str
    remote_url: str
    repo_creation: RepoCreationStatus = RepoCreationStatus.SKIPPED
    reconcile_state: ReconcileState
    submission: SubmissionOutcome | None = None
    commit: CommitResult | None = None
    pushed: bool = False
    staged_paths: list[str] = Field(default_factory=list)

    def summary(self) -> str:
        """Generate a human-readable summary of the run."""
        parts = [f"{self.action.value} of '{self.branch}' to {self.remote_url}"]
        if self.repo_creation == RepoCreationStatus.CREATED:
            parts.append("repository created")
        parts.append(f"reconcile: {self.reconcile_state.value}")
        if self.submission is not None:
            parts.append(f"submission: {self.submission.status.value}")
        if self.commit is not None:
            if self.commit.commit_sha:
                parts.append(f"commit {self.commit.action.value} {self.commit.commit_sha[:8]}")
            else:
                parts.append("no new commit")
        if self.pushed:
            parts.append("pushed")
        return ", ".join(parts)


def check_dependencies(
    config: PublishConfig,
    which: Callable[[str], str | None] = shutil.which,
) -> None:
    """
    Make sure the executables this run will call are on PATH.

    Raises:
        DependencyMissing: Naming every missing executable
    """
    required = ["git"]
    if config.submission_enabled:
        required.append("web-ext")
    missing = [name for name in required if which(name) is None]
    if missing:
        raise DependencyMissing(f"Required executable(s) not found in PATH: {', '.join(missing)}")


@contextmanager
def stage_errors(stage: str) -> Iterator[None]:
    """Re-raise a raw GitError as a PublishError tagged with the failing stage."""
    try:
        yield
    except GitError as e:
        raise PublishError(str(e), stage=stage, detail=e.stderr, command=e.command) from e


class PublishPipeline:
    """
    Orchestrates one publish (or pull) run.

    All collaborators are injected, so tests can swap in fakes for git, the
    hosting API and the submission client.

    Example:
        >>> pipeline = PublishPipeline.from_environment(config, environ)
        >>> result = pipeline.run()
        >>> print(result.summary())
    """

    def __init__(
        self,
        config: PublishConfig,
        credentials: Credentials,
        vcs: VersionControlBackend,
        host: RemoteHost,
        submission_client: SubmissionClient,
    ) -> None:
        self.config = config
        self.credentials = credentials
        self.vcs = vcs
        self.host = host
        self.submission_client = submission_client

    @classmethod
    def from_environment(
        cls,
        config: PublishConfig,
        environ: Mapping[str, str],
        *,
        which: Callable[[str], str | None] = shutil.which,
    ) -> PublishPipeline:
        """
        Build a pipeline with the production collaborators.

        Resolves every secret up front so later stages never look them up.

        Raises:
            DependencyMissing, CredentialMissing
        """
        check_dependencies(config, which)
        store = CredentialStore(environ, config.repo_dir)
        credentials = store.resolve_all(need_submission=config.submission_enabled)
        return cls(
            config=config,
            credentials=credentials,
            vcs=GitBackend(config.repo_dir),
            host=GitHubHost(credentials.scm_token, config.api_base_url),
            submission_client=WebExtClient(),
        )

    def run(self) -> PublishResult:
        """
        Execute the stages in order.

        Returns:
            PublishResult describing every stage

        Raises:
            PublishError: From whichever stage failed; later stages never run
        """
        config = self.config

        with stage_errors("branch"):
            if not self.vcs.is_repository():
                self.vcs.init()

            # Snapshot before reconciliation; a pull must not turn this run's
            # first commit into an amend of the remote's history.
            had_commits = self.vcs.has_commits()

            branch = BranchNormalizer(self.vcs, config.branch).normalize()

        resolver = RemoteResolver(config, self.vcs, self.host)
        with stage_errors("remote"):
            identity, creation = resolver.ensure_remote(
                create=config.action == PublishAction.PUSH
            )

        executor = PushExecutor(config, self.vcs, self.credentials)
        reconciler = HistoryReconciler(
            self.vcs,
            config.remote_name,
            identity.url,
            branch,
            executor.network_env,
        )
        with stage_errors("reconcile"):
            reconciled = reconciler.run()

        result = PublishResult(
            action=config.action,
            branch=branch,
            remote_url=identity.url,
            repo_creation=creation,
            reconcile_state=reconciled.state,
        )

        if config.action == PublishAction.PULL:
            logger.info("Pull complete from %s", identity.url)
            return result

        sensitive = sensitive_paths(config)

        if config.submission_enabled:
            gate = SubmissionGate(config, self.credentials, self.submission_client, sensitive)
            with stage_errors("submission"):
                result.submission = gate.run()
        else:
            logger.info("Submission gate disabled; skipping")

        guard = SensitiveFileGuard(
            self.vcs,
            sensitive,
            repo_dir=config.repo_dir,
            ignore_entries=gitignore_entries(config),
        )
        with stage_errors("stage"):
            result.staged_paths = guard.stage()

        with stage_errors("commit"):
            result.commit = CommitPolicy(self.vcs, config.commit_message).apply(
                had_commits=had_commits
            )

        with stage_errors("push"):
            executor.push(branch)
        result.pushed = True
        logger.info("Published %s", identity.url)
        return result
