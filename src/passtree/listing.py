"""Walk the store and render it as a tree."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, Optional

from rich.tree import Tree

from .config import CONFIG_NAME

SKIP_DIRS = {".git"}
SKIP_FILES = {CONFIG_NAME}


def _is_partial(fname: str) -> bool:
    return fname.startswith(".") and fname.endswith(".tmp")


def iter_secrets(root: Path, base: Optional[Path] = None) -> Iterator[str]:
    """Yield logical names of every artifact below base.

    Names are relative to root, so listing a subtree still yields
    full secret paths.
    """
    start = base or root
    for dirpath, dirs, files in os.walk(start):
        dirs[:] = sorted(d for d in dirs if d not in SKIP_DIRS)
        for fname in sorted(files):
            if fname in SKIP_FILES or _is_partial(fname):
                continue
            yield (Path(dirpath) / fname).relative_to(root).as_posix()


def build_tree(names: list[str], label: str) -> Tree:
    """Nest slash-delimited names under a rich Tree labelled ``label``."""
    tree = Tree(f"[bold]{label}[/]")
    nodes: dict[str, Tree] = {}
    for name in names:
        parent = tree
        parts = name.split("/")
        for depth, part in enumerate(parts[:-1], start=1):
            key = "/".join(parts[:depth])
            if key not in nodes:
                nodes[key] = parent.add(f"[blue]{part}/[/]")
            parent = nodes[key]
        parent.add(parts[-1])
    return tree
