"""Shared test fixtures for passtree.

The encryption and version-control tools are replaced by in-memory
fakes so tests never need gpg keys, git, or the network.
"""

from __future__ import annotations

import base64
from pathlib import Path

import pytest

from passtree.crypto import Encryptor
from passtree.errors import DecryptionFailure, EncryptionFailure, SyncWarning
from passtree.models import StoreConfig
from passtree.store import SecretStore
from passtree.sync.backends import VersionControl

REMOTE = "git@example.org:alice/secrets.git"

_HEADER = b"-----BEGIN FAKE MESSAGE-----\n"
_FOOTER = b"-----END FAKE MESSAGE-----\n"


class FakeEncryptor(Encryptor):
    """Armors plaintext with base64 and remembers the recipient."""

    def __init__(self, keys=("alice",)):
        self.keys = set(keys)
        self.fail_encrypt = False
        self.encrypted: list[tuple[str, bytes]] = []

    def encrypt(self, identity: str, plaintext: bytes) -> bytes:
        if self.fail_encrypt or identity not in self.keys:
            raise EncryptionFailure(f"cannot encrypt to {identity}")
        self.encrypted.append((identity, plaintext))
        return (
            _HEADER
            + identity.encode() + b"\n"
            + base64.b64encode(plaintext) + b"\n"
            + _FOOTER
        )

    def decrypt(self, path: Path) -> bytes:
        if not path.is_file():
            raise DecryptionFailure(f"No secret at {path}")
        lines = path.read_bytes().split(b"\n")
        if len(lines) < 4 or lines[0] + b"\n" != _HEADER:
            raise DecryptionFailure(f"{path} is not an encrypted artifact")
        if lines[1].decode() not in self.keys:
            raise DecryptionFailure("secret key not available")
        return base64.b64decode(lines[2])

    def has_key(self, identity: str) -> bool:
        return identity in self.keys


class FakeVersionControl(VersionControl):
    """Records every call; operations named in fail_on raise SyncWarning."""

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail_on: set[str] = set()

    def _record(self, op: str, *args) -> None:
        self.calls.append((op, *args))
        if op in self.fail_on:
            raise SyncWarning(f"git {op} failed")

    @property
    def ops(self) -> list[str]:
        return [call[0] for call in self.calls]

    def clone(self, remote: str, target: Path) -> None:
        self._record("clone", remote, target)
        (target / ".git").mkdir(parents=True)

    def pull(self, workdir: Path) -> None:
        self._record("pull", workdir)

    def add_all(self, workdir: Path) -> None:
        self._record("add_all", workdir)

    def commit(self, workdir: Path, message: str) -> None:
        self._record("commit", workdir, message)

    def push(self, workdir: Path) -> None:
        self._record("push", workdir)


@pytest.fixture
def store_root(tmp_path: Path) -> Path:
    """An empty store root directory."""
    root = tmp_path / "store"
    root.mkdir()
    return root


@pytest.fixture
def encryptor() -> FakeEncryptor:
    return FakeEncryptor()


@pytest.fixture
def vcs() -> FakeVersionControl:
    return FakeVersionControl()


@pytest.fixture
def config(store_root: Path) -> StoreConfig:
    """Unlinked store configuration for identity alice."""
    return StoreConfig(root=store_root, identity="alice")


@pytest.fixture
def linked_config(store_root: Path) -> StoreConfig:
    """Store configuration mirrored to a git remote."""
    (store_root / ".git").mkdir()
    return StoreConfig(root=store_root, identity="alice", remote=REMOTE)


@pytest.fixture
def store(config, encryptor, vcs) -> SecretStore:
    return SecretStore(config, encryptor, vcs)


@pytest.fixture
def linked_store(linked_config, encryptor, vcs) -> SecretStore:
    return SecretStore(linked_config, encryptor, vcs)
