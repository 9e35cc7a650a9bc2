"""Exception hierarchy for the secret store.

Every fatal condition derives from StoreError so the CLI can report it
with one handler and exit 1. SyncWarning is the exception raised by the
version-control backend; the sync gateway catches it and logs it, so it
never aborts a command.
"""

from __future__ import annotations


class StoreError(Exception):
    """Base class for all secret-store failures."""


class UsageError(StoreError):
    """Bad or missing command argument."""


class ConfigError(StoreError):
    """The store configuration file is malformed or incomplete."""


class AlreadyExists(StoreError):
    """A secret already exists at the requested path."""


class InvalidTarget(StoreError):
    """The path denotes a directory (or the root) where a secret is expected."""


class StructureFailure(StoreError):
    """Parent directories for a secret could not be created."""


class EncryptionFailure(StoreError):
    """The encryption tool failed or produced no output."""


class DecryptionFailure(StoreError):
    """The artifact could not be decrypted (missing, wrong key, corrupt)."""


class StoreCorrupted(StoreError):
    """A destructive operation was attempted against an unconfigured root."""


class InitializationError(StoreError):
    """The store could not be bootstrapped."""


class SyncWarning(StoreError):
    """A version-control command failed. Never fatal."""
