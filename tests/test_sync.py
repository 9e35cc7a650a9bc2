"""
Tests for remote mirroring -- the git backend and the sync gateway.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from passtree.errors import SyncWarning
from passtree.models import StoreConfig
from passtree.sync.backends import GitBackend
from passtree.sync.gateway import (
    ADDED,
    ADDED_DOC,
    REMOVED,
    SyncGateway,
    commit_message,
)

REMOTE = "git@example.org:alice/secrets.git"


class TestGitBackend:
    """Each step maps to one git command run in the working copy."""

    @patch("passtree.sync.backends._run")
    def test_pull_runs_in_workdir(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="", stderr="")

        GitBackend().pull(tmp_path)

        mock_run.assert_called_once_with(["git", "pull"], cwd=tmp_path)

    @patch("passtree.sync.backends._run")
    def test_commit_passes_message(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="", stderr="")

        GitBackend().commit(tmp_path, "added: email/gmail")

        mock_run.assert_called_once_with(
            ["git", "commit", "-m", "added: email/gmail"], cwd=tmp_path
        )

    @patch("passtree.sync.backends._run")
    def test_add_all_and_push(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="", stderr="")

        backend = GitBackend()
        backend.add_all(tmp_path)
        backend.push(tmp_path)

        cmds = [call.args[0] for call in mock_run.call_args_list]
        assert cmds == [["git", "add", "-A"], ["git", "push"]]

    @patch("passtree.sync.backends._run")
    def test_clone_target(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess([], 0, stdout="", stderr="")

        GitBackend().clone(REMOTE, tmp_path / "store")

        mock_run.assert_called_once_with(
            ["git", "clone", REMOTE, str(tmp_path / "store")], cwd=None
        )

    @patch("passtree.sync.backends._run")
    def test_failure_raises_sync_warning(self, mock_run: MagicMock, tmp_path: Path) -> None:
        mock_run.return_value = subprocess.CompletedProcess(
            [], 1, stdout="", stderr="fatal: could not read from remote repository"
        )

        with pytest.raises(SyncWarning, match="could not read"):
            GitBackend().push(tmp_path)

    @patch("passtree.sync.backends._run", side_effect=FileNotFoundError("git"))
    def test_missing_git_raises_sync_warning(self, mock_run: MagicMock, tmp_path: Path) -> None:
        with pytest.raises(SyncWarning):
            GitBackend().pull(tmp_path)


class TestCommitMessage:
    def test_verbs(self):
        assert commit_message(ADDED, "a/b") == "added: a/b"
        assert commit_message(REMOVED, "a/b") == "removed: a/b"
        assert commit_message(ADDED_DOC, "a/b") == "added doc: a/b"


class TestSyncGateway:
    """Best-effort policy on top of the backend."""

    def test_unlinked_is_noop(self, tmp_path: Path, vcs) -> None:
        gateway = SyncGateway(StoreConfig(root=tmp_path, identity="alice"), vcs)

        assert gateway.pull_if_linked() is False
        assert gateway.push_if_linked(ADDED, "a") is False
        assert vcs.calls == []

    def test_linked_pull(self, tmp_path: Path, vcs) -> None:
        gateway = SyncGateway(
            StoreConfig(root=tmp_path, identity="alice", remote=REMOTE), vcs
        )

        assert gateway.pull_if_linked() is True
        assert vcs.calls == [("pull", tmp_path)]

    def test_linked_push_sequence(self, tmp_path: Path, vcs) -> None:
        gateway = SyncGateway(
            StoreConfig(root=tmp_path, identity="alice", remote=REMOTE), vcs
        )

        assert gateway.push_if_linked(REMOVED, "old") is True
        assert vcs.calls == [
            ("add_all", tmp_path),
            ("commit", tmp_path, "removed: old"),
            ("push", tmp_path),
        ]

    def test_pull_failure_is_logged_not_raised(self, tmp_path: Path, vcs, caplog) -> None:
        vcs.fail_on = {"pull"}
        gateway = SyncGateway(
            StoreConfig(root=tmp_path, identity="alice", remote=REMOTE), vcs
        )

        with caplog.at_level("WARNING", logger="passtree.sync.gateway"):
            assert gateway.pull_if_linked() is False

        assert "Pull from" in caplog.text

    def test_push_failure_is_logged_not_raised(self, tmp_path: Path, vcs, caplog) -> None:
        vcs.fail_on = {"add_all"}
        gateway = SyncGateway(
            StoreConfig(root=tmp_path, identity="alice", remote=REMOTE), vcs
        )

        with caplog.at_level("WARNING", logger="passtree.sync.gateway"):
            assert gateway.push_if_linked(ADDED, "a") is False

        assert vcs.ops == ["add_all"]
        assert "added: a" in caplog.text
