"""Browsing commands: ls, find."""

from __future__ import annotations

import click
from rich.markup import escape

from ..errors import StoreError
from ..listing import build_tree
from ._common import console, fail, open_store


def register_listing_commands(main: click.Group) -> None:
    """Register the ls and find commands."""

    @click.command("ls")
    @click.argument("subpath", required=False, default="")
    @click.pass_context
    def ls(ctx, subpath: str):
        """Show every secret in the store as a tree.

        Give SUBPATH to show only one folder.
        """
        store = open_store(ctx)
        try:
            names = store.list(subpath)
        except StoreError as exc:
            fail(exc)

        label = escape(subpath.strip("/")) if subpath.strip("/") else "Secret store"
        console.print(build_tree([escape(n) for n in names], label))
        if not names:
            console.print("[dim]No secrets yet.[/]")

    @click.command("find")
    @click.argument("term")
    @click.pass_context
    def find(ctx, term: str):
        """List secrets whose path matches TERM.

        Dots in TERM match only a literal dot; other regex syntax works.

        Examples:

            passtree find gmail.com

            passtree find '^work/'
        """
        store = open_store(ctx)
        try:
            matches = store.find(term)
        except StoreError as exc:
            fail(exc)

        if not matches:
            console.print(f"[yellow]No secrets match[/] {escape(term)}", highlight=False)
            return
        for name in matches:
            console.print(escape(name), highlight=False)

    main.add_command(ls)
    main.add_command(ls, name="list")
    main.add_command(find)
