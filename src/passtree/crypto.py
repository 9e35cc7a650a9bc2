"""
Encryption gateway: GPG public-key encryption to a single recipient.

Every secret is encrypted with ``gpg --armor --encrypt`` reading the
plaintext on stdin and capturing the armored ciphertext on stdout.
Decryption reads the artifact file and captures the plaintext on
stdout. gpg's stderr is kept away from the user and only ends up in
debug logs.

Requires gpg in PATH: https://gnupg.org
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from .errors import DecryptionFailure, EncryptionFailure

logger = logging.getLogger("passtree.crypto")


class Encryptor(ABC):
    """Contract the store needs from an encryption tool."""

    @abstractmethod
    def encrypt(self, identity: str, plaintext: bytes) -> bytes:
        """Encrypt bytes to a recipient and return armored ciphertext.

        Raises:
            EncryptionFailure: If the tool fails or produces nothing.
        """

    @abstractmethod
    def decrypt(self, path: Path) -> bytes:
        """Decrypt an artifact file and return the plaintext.

        Raises:
            DecryptionFailure: If the file is missing, the key is absent,
                or the artifact is corrupt.
        """

    @abstractmethod
    def has_key(self, identity: str) -> bool:
        """Check whether the identity names a usable key."""


def _run(
    cmd: list[str], input: Optional[bytes] = None
) -> subprocess.CompletedProcess:
    """Run a command with binary pipes and captured output.

    No timeout: gpg may be waiting on a pinentry passphrase prompt.
    """
    return subprocess.run(cmd, input=input, capture_output=True, check=False)


class GpgEncryptor(Encryptor):
    """Encryptor backed by the system ``gpg`` binary."""

    def __init__(self, gpg: str = "gpg"):
        self.gpg = gpg

    def encrypt(self, identity: str, plaintext: bytes) -> bytes:
        cmd = [
            self.gpg, "--batch", "--yes", "--trust-model", "always",
            "--armor", "--encrypt", "--recipient", identity,
        ]
        try:
            result = _run(cmd, input=plaintext)
        except OSError as exc:
            raise EncryptionFailure(f"Could not run {self.gpg}: {exc}") from exc

        if result.returncode != 0:
            logger.debug("gpg encrypt stderr: %s", result.stderr.decode(errors="replace"))
            raise EncryptionFailure(
                f"Encryption to {identity} failed (gpg exit {result.returncode})"
            )
        if not result.stdout:
            raise EncryptionFailure("Encryption produced no output")

        logger.debug("Encrypted %d bytes for %s", len(plaintext), identity)
        return result.stdout

    def decrypt(self, path: Path) -> bytes:
        if not path.is_file():
            raise DecryptionFailure(f"No secret at {path}")

        cmd = [self.gpg, "--quiet", "--yes", "--decrypt", str(path)]
        try:
            result = _run(cmd)
        except OSError as exc:
            raise DecryptionFailure(f"Could not run {self.gpg}: {exc}") from exc

        if result.returncode != 0:
            logger.debug("gpg decrypt stderr: %s", result.stderr.decode(errors="replace"))
            raise DecryptionFailure(
                f"Decryption of {path} failed (gpg exit {result.returncode})"
            )
        return result.stdout

    def has_key(self, identity: str) -> bool:
        try:
            result = _run([self.gpg, "--list-keys", identity])
        except OSError as exc:
            logger.error("Could not run %s: %s", self.gpg, exc)
            return False
        return result.returncode == 0
