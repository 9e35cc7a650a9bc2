"""
Remote mirroring for the store.

Pull before every change, commit and push after it. Failures are
warnings: the local store is the source of truth.
"""

from .backends import GitBackend, VersionControl
from .gateway import SyncGateway

__all__ = ["GitBackend", "SyncGateway", "VersionControl"]
