"""
The secret store -- one encrypted file per secret, mirrored optionally.

Every mutating command is the same linear pipeline:

    validate  ->  [pull]  ->  encrypt  ->  write / remove  ->  [push]

Encryption completes before anything touches the artifact, and the
artifact is replaced atomically, so a failed command never leaves a
half-written secret behind. Sync runs on either side of the local
change and never undoes it.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import tempfile
from pathlib import Path
from typing import BinaryIO, Union

from .crypto import Encryptor
from .errors import (
    AlreadyExists,
    InvalidTarget,
    StoreCorrupted,
    StructureFailure,
    UsageError,
)
from .listing import SKIP_DIRS, SKIP_FILES, iter_secrets
from .models import StoreConfig
from .paths import PathResolver
from .sync.backends import VersionControl
from .sync.gateway import ADDED, ADDED_DOC, REMOVED, SyncGateway

logger = logging.getLogger("passtree.store")


class SecretStore:
    """Create, read, update and delete secrets under a store root.

    Holds no state between commands beyond the immutable config and
    the injected tool gateways.
    """

    def __init__(
        self,
        config: StoreConfig,
        encryptor: Encryptor,
        vcs: VersionControl,
    ):
        """Wire the store to its collaborators.

        Args:
            config: Loaded store configuration.
            encryptor: Encryption tool gateway.
            vcs: Version-control backend used for mirroring.
        """
        self.config = config
        self.resolver = PathResolver(config.root)
        self.encryptor = encryptor
        self.sync = SyncGateway(config, vcs)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _target(self, name: str) -> tuple[str, Path]:
        logical = self.resolver.normalize(name)
        if not logical:
            raise UsageError("A secret path is required")
        if self.resolver.is_root(logical):
            raise InvalidTarget(f"'{name}' resolves to the store root")
        if _reserved(logical):
            raise InvalidTarget(f"'{logical}' is reserved for the store itself")
        return logical, self.resolver.resolve(logical)

    def _writable(self, name: str) -> tuple[str, Path]:
        logical, path = self._target(name)
        if path.is_dir():
            raise InvalidTarget(f"'{logical}' is a directory, not a secret")
        return logical, path

    def check_creatable(self, name: str) -> Path:
        """Validate that a new secret may be created at name.

        The CLI calls this before prompting so the user is not asked
        for a secret that would be refused.

        Raises:
            UsageError: If the name is empty.
            InvalidTarget: If the name is a directory, the root, or one of
                the store's own files.
            AlreadyExists: If a secret is already stored there.
        """
        return self._creatable(name)[1]

    def _creatable(self, name: str) -> tuple[str, Path]:
        logical, path = self._writable(name)
        if path.exists():
            raise AlreadyExists(f"'{logical}' already exists")
        return logical, path

    def check_settable(self, name: str) -> Path:
        """Validate that name may be (over)written."""
        return self._writable(name)[1]

    def _guard_root(self) -> None:
        root = self.config.root
        if not root.parts or not root.is_dir():
            raise StoreCorrupted(
                f"Store root {str(root)!r} is not configured; refusing to delete"
            )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create(self, name: str, secret: Union[str, bytes]) -> Path:
        """Store a new secret. Refuses to overwrite an existing one."""
        logical, path = self._creatable(name)
        return self._store(logical, path, _as_bytes(secret), ADDED)

    def set(self, name: str, secret: Union[str, bytes]) -> Path:
        """Store a secret, replacing any existing artifact entirely."""
        logical, path = self._writable(name)
        return self._store(logical, path, _as_bytes(secret), ADDED)

    def add_document(self, name: str, source: Union[bytes, BinaryIO]) -> Path:
        """Store an arbitrary byte stream (a file, an image, a key) as a secret."""
        logical, path = self._writable(name)
        data = source if isinstance(source, bytes) else source.read()
        return self._store(logical, path, data, ADDED_DOC)

    def get(self, name: str) -> bytes:
        """Decrypt and return a secret. Never syncs."""
        _, path = self._target(name)
        return self.encryptor.decrypt(path)

    def delete(self, name: str) -> bool:
        """Remove a secret, or a whole folder of secrets.

        Returns:
            True if something was removed (and pushed), False if nothing
            existed at name.

        Raises:
            StoreCorrupted: If the store root is unset or missing.
        """
        self._guard_root()
        logical, path = self._target(name)

        self.sync.pull_if_linked()

        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            elif path.exists() or path.is_symlink():
                path.unlink()
            else:
                logger.warning("Nothing stored at '%s'", logical)
                return False
        except OSError as exc:
            raise StructureFailure(f"Could not remove '{logical}': {exc}") from exc

        logger.info("Removed %s", logical)
        self.sync.push_if_linked(REMOVED, logical)
        return True

    def list(self, subpath: str = "") -> list[str]:
        """Logical names of every secret, optionally under a folder."""
        root = self.config.root
        if not root.is_dir():
            return []
        subpath = self.resolver.normalize(subpath)
        if not subpath:
            return sorted(iter_secrets(root))
        base = self.resolver.resolve(subpath)
        if not base.is_dir():
            raise InvalidTarget(f"'{subpath}' is not a folder")
        return sorted(iter_secrets(root, base))

    def find(self, term: str) -> list[str]:
        """Secrets whose logical name matches term (dots are literal)."""
        try:
            pattern = self.resolver.pattern(term)
        except re.error as exc:
            raise UsageError(f"Invalid search term {term!r}: {exc}") from exc
        return [name for name in self.list() if pattern.search(name)]

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _store(self, logical: str, path: Path, plaintext: bytes, verb: str) -> Path:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StructureFailure(
                f"Could not create folders for '{logical}': {exc}"
            ) from exc

        self.sync.pull_if_linked()

        ciphertext = self.encryptor.encrypt(self.config.identity, plaintext)
        _write_atomic(path, ciphertext)
        logger.info("Stored %s", logical)

        self.sync.push_if_linked(verb, logical)
        return path


def _reserved(logical: str) -> bool:
    parts = os.path.normpath(logical).split(os.sep)
    return parts[0] in SKIP_DIRS or (len(parts) == 1 and parts[0] in SKIP_FILES)


def _as_bytes(secret: Union[str, bytes]) -> bytes:
    return secret.encode("utf-8") if isinstance(secret, str) else secret


def _write_atomic(path: Path, data: bytes) -> None:
    """Write data beside path, then move it into place."""
    try:
        fd, tmp_name = tempfile.mkstemp(
            dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp"
        )
    except OSError as exc:
        raise StructureFailure(f"Could not write {path}: {exc}") from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
    except OSError as exc:
        tmp_path.unlink(missing_ok=True)
        raise StructureFailure(f"Could not write {path}: {exc}") from exc
