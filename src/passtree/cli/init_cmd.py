"""Store setup command: init."""

from __future__ import annotations

from typing import Optional

import click
from rich.markup import escape
from rich.panel import Panel

from ..config import config_path
from ..errors import InitializationError, StoreError
from ._common import console, fail, run_wizard, store_root


def register_init_commands(main: click.Group) -> None:
    """Register the init command."""

    @main.command("init")
    @click.option("--identity", "-i", default=None,
                  help="GPG key id, fingerprint or email to encrypt to.")
    @click.option("--remote", "-r", default=None,
                  help="Git address to clone and mirror to. Empty for none.")
    @click.pass_context
    def init(ctx, identity: Optional[str], remote: Optional[str]):
        """Create a new secret store.

        Prompts for anything not given as an option. With a remote,
        the store is cloned from it and every change is pushed back.

        Examples:

            passtree init -i alice@example.org -r ""

            passtree init -i 0xDEADBEEF -r git@example.org:alice/secrets.git
        """
        root = store_root(ctx)
        if config_path(root).exists():
            fail(InitializationError(f"A store already exists at {root}"))

        try:
            config = run_wizard(root, identity, remote)
        except StoreError as exc:
            fail(exc)

        console.print(Panel(
            f"[bold green]Store ready[/]\n"
            f"Root: [cyan]{escape(str(config.root))}[/]\n"
            f"Identity: {escape(config.identity)}\n"
            f"Remote: {escape(config.remote) if config.remote else '[dim]none[/]'}",
            title="passtree init",
            border_style="green",
        ))
