"""
Sync gateway -- best-effort mirroring around every mutation.

    pull_if_linked()  ->  local mutation  ->  push_if_linked(verb, path)

Sync never unwinds a local change. A failed pull means working on
possibly stale data; a failed commit or push leaves the change local
until the next successful push picks it up with ``git add -A``.
Both are logged as warnings and reported as False.
"""

from __future__ import annotations

import logging

from ..errors import SyncWarning
from ..models import StoreConfig
from .backends import VersionControl

logger = logging.getLogger("passtree.sync.gateway")

ADDED = "added:"
REMOVED = "removed:"
ADDED_DOC = "added doc:"


def commit_message(verb: str, path: str) -> str:
    """Compose a commit message such as ``added: email/gmail``."""
    return f"{verb} {path}"


class SyncGateway:
    """Wraps a VersionControl backend with the store's sync policy."""

    def __init__(self, config: StoreConfig, vcs: VersionControl):
        self.config = config
        self.vcs = vcs

    def pull_if_linked(self) -> bool:
        """Pull remote changes before a mutation.

        Returns:
            True if the pull ran and succeeded, False if unlinked or failed.
        """
        if not self.config.linked:
            return False
        try:
            self.vcs.pull(self.config.root)
        except SyncWarning as exc:
            logger.warning("Pull from %s failed, continuing with local state: %s",
                           self.config.remote, exc)
            return False
        logger.info("Pulled from %s", self.config.remote)
        return True

    def push_if_linked(self, verb: str, path: str) -> bool:
        """Stage, commit and push after a mutation.

        Args:
            verb: One of ADDED, REMOVED, ADDED_DOC.
            path: Logical secret name that changed.

        Returns:
            True if every step succeeded, False if unlinked or any failed.
        """
        if not self.config.linked:
            return False
        message = commit_message(verb, path)
        try:
            self.vcs.add_all(self.config.root)
            self.vcs.commit(self.config.root, message)
            self.vcs.push(self.config.root)
        except SyncWarning as exc:
            logger.warning("Sync of '%s' failed, change kept locally: %s", message, exc)
            return False
        logger.info("Pushed '%s' to %s", message, self.config.remote)
        return True
