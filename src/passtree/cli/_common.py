"""Shared utilities for all CLI command modules.

Provides the Rich console, the tool factories (patched in tests),
store loading with the first-run wizard, and error reporting.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import NoReturn, Optional

import click
from rich.console import Console
from rich.markup import escape

from .. import STORE_HOME
from ..config import config_path, load_config
from ..crypto import Encryptor, GpgEncryptor
from ..errors import StoreError
from ..initializer import StoreInitializer
from ..models import StoreConfig
from ..store import SecretStore
from ..sync.backends import GitBackend, VersionControl

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger("passtree.cli")


def make_encryptor() -> Encryptor:
    """Encryption gateway used by every command."""
    return GpgEncryptor()


def make_vcs() -> VersionControl:
    """Version-control backend used by every command."""
    return GitBackend()


def store_root(ctx: click.Context) -> Path:
    """Store root chosen on the command line or from PASSTREE_HOME."""
    return Path(ctx.obj.get("root") or STORE_HOME).expanduser()


def fail(exc: Exception) -> NoReturn:
    """Report a fatal error and exit 1."""
    err_console.print(f"[bold red]Error:[/] {escape(str(exc))}", highlight=False)
    sys.exit(1)


def run_wizard(
    root: Path, identity: Optional[str] = None, remote: Optional[str] = None
) -> StoreConfig:
    """Prompt for whatever is missing and bootstrap the store."""
    if identity is None:
        identity = click.prompt("GPG identity to encrypt to (key id or email)")
    if remote is None:
        remote = click.prompt(
            "Git remote to mirror to (leave empty for none)",
            default="",
            show_default=False,
        )
    initializer = StoreInitializer(make_encryptor(), make_vcs())
    return initializer.initialize(root, identity, remote)


def open_store(ctx: click.Context) -> SecretStore:
    """Load the store configuration, running the wizard on first use."""
    root = store_root(ctx)
    try:
        if config_path(root).is_file():
            config = load_config(root)
        else:
            err_console.print(f"[yellow]No store found at {escape(str(root))}.[/] Creating one.")
            config = run_wizard(root)
    except StoreError as exc:
        fail(exc)
    logger.debug("Store %s (identity=%s, remote=%s)", config.root, config.identity, config.remote)
    return SecretStore(config, make_encryptor(), make_vcs())
