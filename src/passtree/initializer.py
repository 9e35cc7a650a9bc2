"""
Store bootstrap: identity check, optional clone, config file.

    passtree init --identity alice@example.org --remote git@host:alice/pw.git

With a remote, the store root becomes a clone of it so every later
command can pull and push in place. Without one, the root is just a
directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .config import save_config
from .crypto import Encryptor
from .errors import InitializationError, SyncWarning
from .models import StoreConfig
from .sync.backends import VersionControl

logger = logging.getLogger("passtree.initializer")


class StoreInitializer:
    """Create a store root and its configuration."""

    def __init__(self, encryptor: Encryptor, vcs: VersionControl):
        self.encryptor = encryptor
        self.vcs = vcs

    def initialize(
        self,
        root: Path,
        identity: str,
        remote: Optional[str] = None,
    ) -> StoreConfig:
        """Bootstrap a store at root.

        Args:
            root: Store root directory.
            identity: GPG key id, fingerprint or email to encrypt to.
            remote: Optional git address to clone and mirror to.

        Returns:
            StoreConfig: The configuration that was written.

        Raises:
            InitializationError: If the identity has no key, the root is
                not empty when cloning, or the clone fails.
        """
        root = root.expanduser()
        identity = identity.strip()
        remote = (remote or "").strip() or None

        if not identity:
            raise InitializationError("An identity is required")
        if not self.encryptor.has_key(identity):
            raise InitializationError(f"No key found for identity '{identity}'")

        if remote:
            if root.is_dir() and any(root.iterdir()):
                raise InitializationError(
                    f"{root} is not empty; cannot clone {remote} into it"
                )
            try:
                self.vcs.clone(remote, root)
            except SyncWarning as exc:
                raise InitializationError(f"Clone of {remote} failed: {exc}") from exc
            logger.info("Cloned %s into %s", remote, root)
        else:
            try:
                root.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise InitializationError(f"Could not create {root}: {exc}") from exc

        config = StoreConfig(root=root, identity=identity, remote=remote)
        save_config(config)
        logger.info("Store initialized at %s for %s", root, identity)
        return config
