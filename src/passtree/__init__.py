"""
passtree — a directory tree of GPG-encrypted secrets.

One file per secret, each encrypted to a single identity.
Optionally mirrored to a git remote: pull before every change,
commit and push after it.
"""

import os

__version__ = "0.1.0"

STORE_HOME = os.environ.get("PASSTREE_HOME", "~/.passtree")
