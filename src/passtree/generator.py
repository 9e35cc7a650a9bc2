"""Random secret generation for ``new --generate`` and ``set --generate``."""

from __future__ import annotations

import secrets
import string

from .errors import UsageError

ALPHABET = string.ascii_letters + string.digits + string.punctuation


def generate_secret(length: int, alphabet: str = ALPHABET) -> str:
    """Return a cryptographically random string of the given length.

    Raises:
        UsageError: If length is less than 1.
    """
    if length < 1:
        raise UsageError("Generated secret length must be at least 1")
    return "".join(secrets.choice(alphabet) for _ in range(length))
