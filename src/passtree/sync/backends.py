"""
Version-control backends -- how the store travels to its mirror.

The store root is a git working copy of the remote. The backend only
knows how to run the individual steps; the gateway decides when.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..errors import SyncWarning

logger = logging.getLogger("passtree.sync.backends")


class VersionControl(ABC):
    """Abstract version-control tool.

    Every method raises SyncWarning when the underlying command fails.
    """

    @abstractmethod
    def clone(self, remote: str, target: Path) -> None:
        """Clone the remote into target."""

    @abstractmethod
    def pull(self, workdir: Path) -> None:
        """Fetch and merge remote changes into the working copy."""

    @abstractmethod
    def add_all(self, workdir: Path) -> None:
        """Stage every change, including deletions."""

    @abstractmethod
    def commit(self, workdir: Path, message: str) -> None:
        """Record staged changes with a message."""

    @abstractmethod
    def push(self, workdir: Path) -> None:
        """Publish local commits to the remote."""


def _run(cmd: list[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
    """Run a command and capture its output.

    No timeout: network round trips are left to git's own defaults.
    """
    return subprocess.run(
        cmd, capture_output=True, text=True, check=False,
        cwd=str(cwd) if cwd is not None else None,
    )


class GitBackend(VersionControl):
    """VersionControl backed by the system ``git`` binary."""

    def __init__(self, git: str = "git"):
        self.git = git

    def _git(self, *args: str, cwd: Optional[Path] = None) -> None:
        cmd = [self.git, *args]
        try:
            result = _run(cmd, cwd=cwd)
        except OSError as exc:
            raise SyncWarning(f"Could not run {self.git}: {exc}") from exc

        if result.returncode != 0:
            raise SyncWarning(
                f"{' '.join(cmd)} failed: {result.stderr.strip() or result.stdout.strip()}"
            )
        logger.debug("%s ok", " ".join(cmd))

    def clone(self, remote: str, target: Path) -> None:
        self._git("clone", remote, str(target))

    def pull(self, workdir: Path) -> None:
        self._git("pull", cwd=workdir)

    def add_all(self, workdir: Path) -> None:
        self._git("add", "-A", cwd=workdir)

    def commit(self, workdir: Path, message: str) -> None:
        self._git("commit", "-m", message, cwd=workdir)

    def push(self, workdir: Path) -> None:
        self._git("push", cwd=workdir)
