"""
Tests for configuration loading and environment layering.
"""

import os
from pathlib import Path

import pytest

from pubsync.core.config import (
    PublishAction,
    PublishConfig,
    RemoteProtocol,
    SubmissionChannel,
    SubmissionMode,
    load_config,
    read_layered_env,
)
from pubsync.core.config.loader import config_from_env
from pubsync.core.errors import InvalidConfiguration


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, tmp_path: Path) -> None:
        """Only GITHUB_USER is required; everything else has a default."""
        config = load_config({"GITHUB_USER": "octo"}, tmp_path)

        assert config.owner == "octo"
        assert config.protocol == RemoteProtocol.HTTPS
        assert config.action == PublishAction.PUSH
        assert config.submission == SubmissionMode.ENABLED
        assert config.channel == SubmissionChannel.LISTED
        assert config.artifacts_dir == ".web-ext-artifacts"
        assert config.metadata_file == "amo-metadata.json"
        assert config.commit_message == "push"
        assert config.branch == "main"
        assert config.remote_name == "origin"

    def test_missing_owner_raises(self, tmp_path: Path) -> None:
        with pytest.raises(InvalidConfiguration, match="GITHUB_USER"):
            load_config({}, tmp_path)

    def test_empty_values_count_as_unset(self, tmp_path: Path) -> None:
        """Empty strings fall back to the defaults."""
        config = load_config(
            {"GITHUB_USER": "octo", "GITHUB_REMOTE_PROTOCOL": "", "AMO_CHANNEL": "  "},
            tmp_path,
        )

        assert config.protocol == RemoteProtocol.HTTPS
        assert config.channel == SubmissionChannel.LISTED

    def test_enum_values_are_case_insensitive(self, tmp_path: Path) -> None:
        config = load_config(
            {
                "GITHUB_USER": "octo",
                "GITHUB_REMOTE_PROTOCOL": "SSH",
                "AMO_CHANNEL": "Unlisted",
                "PUBSYNC_ACTION": "PULL",
            },
            tmp_path,
        )

        assert config.protocol == RemoteProtocol.SSH
        assert config.channel == SubmissionChannel.UNLISTED
        assert config.action == PublishAction.PULL

    @pytest.mark.parametrize(
        ("var", "value"),
        [
            ("GITHUB_REMOTE_PROTOCOL", "ftp"),
            ("AMO_CHANNEL", "beta"),
            ("PUBSYNC_ACTION", "sync"),
            ("PUBSYNC_SUBMISSION", "maybe"),
            ("PUBSYNC_LOG_LEVEL", "chatty"),
        ],
    )
    def test_unrecognised_values_are_rejected(self, tmp_path: Path, var: str, value: str) -> None:
        """No silent fallback for values outside the recognised set."""
        with pytest.raises(InvalidConfiguration) as exc_info:
            load_config({"GITHUB_USER": "octo", var: value}, tmp_path)

        assert var in exc_info.value.message
        assert exc_info.value.stage == "configuration"

    def test_script_path_is_kept(self, tmp_path: Path) -> None:
        script = tmp_path / "publish.sh"
        config = load_config({"GITHUB_USER": "octo"}, tmp_path, script_path=script)

        assert config.script_path == script

    def test_config_from_env_only_returns_set_variables(self) -> None:
        values = config_from_env({"GITHUB_USER": "octo", "AMO_SOURCE_DIR": "", "UNRELATED": "x"})

        assert values == {"owner": "octo"}


class TestPublishConfig:
    """Tests for derived PublishConfig properties."""

    def test_repo_name_is_directory_name(self, tmp_path: Path) -> None:
        repo = tmp_path / "my-addon"
        repo.mkdir()
        config = PublishConfig(repo_dir=repo, owner="octo")

        assert config.repo_name == "my-addon"

    def test_api_base_url_follows_host(self, tmp_path: Path) -> None:
        config = PublishConfig(repo_dir=tmp_path, owner="octo", host="ghe.example.com")

        assert config.api_base_url == "https://api.ghe.example.com"

    def test_submission_enabled_only_for_push(self, tmp_path: Path) -> None:
        push = PublishConfig(repo_dir=tmp_path, owner="octo")
        pull = PublishConfig(repo_dir=tmp_path, owner="octo", action=PublishAction.PULL)
        disabled = PublishConfig(
            repo_dir=tmp_path, owner="octo", submission=SubmissionMode.DISABLED
        )

        assert push.submission_enabled is True
        assert pull.submission_enabled is False
        assert disabled.submission_enabled is False

    def test_config_is_frozen(self, tmp_path: Path) -> None:
        config = PublishConfig(repo_dir=tmp_path, owner="octo")

        with pytest.raises(ValueError):
            config.owner = "someone-else"  # type: ignore[misc]


class TestReadLayeredEnv:
    """Tests for dotenv layering."""

    def test_process_environment_wins(self, tmp_path: Path) -> None:
        (tmp_path / ".env").write_text("GITHUB_USER=from-file\n")

        env = read_layered_env(tmp_path, environ={"GITHUB_USER": "from-env"}, user_env_paths=[])

        assert env["GITHUB_USER"] == "from-env"

    def test_local_overrides_project_overrides_user(self, tmp_path: Path) -> None:
        user_env = tmp_path / "user.env"
        user_env.write_text("A=user\nB=user\nC=user\n")
        (tmp_path / ".env").write_text("B=project\nC=project\n")
        (tmp_path / ".env.local").write_text("C=local\n")

        env = read_layered_env(tmp_path, environ={}, user_env_paths=[user_env])

        assert env == {"A": "user", "B": "project", "C": "local"}

    def test_missing_files_are_ignored(self, tmp_path: Path) -> None:
        env = read_layered_env(
            tmp_path, environ={"X": "1"}, user_env_paths=[tmp_path / "nope.env"]
        )

        assert env == {"X": "1"}

    def test_does_not_touch_os_environ(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("PUBSYNC_LAYER_PROBE", raising=False)
        (tmp_path / ".env").write_text("PUBSYNC_LAYER_PROBE=1\n")

        env = read_layered_env(tmp_path, user_env_paths=[])

        assert env["PUBSYNC_LAYER_PROBE"] == "1"
        assert "PUBSYNC_LAYER_PROBE" not in os.environ
