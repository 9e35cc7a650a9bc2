"""
Logical secret names to on-disk paths.

A secret name is slash-delimited and relative to the store root:
``email/gmail`` lives at ``<root>/email/gmail``. No sandboxing is
applied. Names containing ``..`` resolve outside the root if the
caller asks for it.
"""

from __future__ import annotations

import os
import re
from pathlib import Path


class PathResolver:
    """Pure mapping between secret names and filesystem paths."""

    def __init__(self, root: Path):
        self.root = root

    @staticmethod
    def normalize(name: str) -> str:
        """Strip surrounding slashes. Nothing else is rewritten."""
        return name.strip("/")

    def resolve(self, name: str) -> Path:
        """Return ``root/name`` for a logical secret name."""
        return Path(f"{self.root}/{self.normalize(name)}")

    def is_root(self, name: str) -> bool:
        """True if the name collapses back onto the store root itself."""
        resolved = os.path.normpath(str(self.resolve(name)))
        return resolved == os.path.normpath(str(self.root))

    @staticmethod
    def escape(name: str) -> str:
        """Escape literal dots so they match only a dot.

        Dots the caller already escaped are left alone.
        """
        return re.sub(r"(?<!\\)\.", lambda _: r"\.", name)

    def pattern(self, term: str) -> re.Pattern:
        """Compile a search term with dots taken literally.

        Other regex syntax in the term is kept, so ``^mail/`` still
        anchors.
        """
        return re.compile(self.escape(self.normalize(term)))
