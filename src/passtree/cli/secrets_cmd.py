"""Secret commands: new, get, set, del, doc."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import click
from rich.markup import escape

from ..errors import StoreError, StructureFailure
from ..generator import generate_secret
from ._common import console, fail, open_store


def _read_secret(generate: Optional[int]) -> str:
    if generate is not None:
        secret = generate_secret(generate)
        console.print(f"Generated secret: [bold]{escape(secret)}[/]", highlight=False)
        return secret
    return click.prompt("Secret", hide_input=True, confirmation_prompt=True)


def register_secret_commands(main: click.Group) -> None:
    """Register the secret create/read/update/delete commands."""

    @click.command("new")
    @click.argument("path")
    @click.option("--generate", "-g", type=int, default=None, metavar="LENGTH",
                  help="Generate a random secret of LENGTH characters.")
    @click.pass_context
    def new(ctx, path: str, generate: Optional[int]):
        """Create a new secret at PATH. Refuses to overwrite.

        Examples:

            passtree new email/gmail

            passtree new wifi/home -g 32
        """
        store = open_store(ctx)
        try:
            store.check_creatable(path)
            store.create(path, _read_secret(generate))
        except StoreError as exc:
            fail(exc)
        console.print(f"[green]Added[/] {escape(path)}", highlight=False)

    @click.command("set")
    @click.argument("path")
    @click.option("--generate", "-g", type=int, default=None, metavar="LENGTH",
                  help="Generate a random secret of LENGTH characters.")
    @click.pass_context
    def set_(ctx, path: str, generate: Optional[int]):
        """Store a secret at PATH, replacing any existing one."""
        store = open_store(ctx)
        try:
            store.check_settable(path)
            store.set(path, _read_secret(generate))
        except StoreError as exc:
            fail(exc)
        console.print(f"[green]Saved[/] {escape(path)}", highlight=False)

    @click.command("get")
    @click.argument("path")
    @click.option("--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
                  default=None, help="Write the secret to a file instead of stdout.")
    @click.pass_context
    def get(ctx, path: str, output: Optional[Path]):
        """Decrypt the secret at PATH."""
        store = open_store(ctx)
        try:
            data = store.get(path)
        except StoreError as exc:
            fail(exc)

        if output is not None:
            try:
                output.write_bytes(data)
            except OSError as exc:
                fail(StructureFailure(f"Could not write {output}: {exc}"))
            console.print(f"[green]Wrote[/] {escape(path)} to {output}", highlight=False)
            return

        stdout = sys.stdout.buffer
        stdout.write(data)
        if sys.stdout.isatty() and not data.endswith(b"\n"):
            stdout.write(b"\n")
        stdout.flush()

    @click.command("del")
    @click.argument("path")
    @click.pass_context
    def delete(ctx, path: str):
        """Delete the secret at PATH, or everything below a folder."""
        store = open_store(ctx)
        try:
            removed = store.delete(path)
        except StoreError as exc:
            fail(exc)
        if removed:
            console.print(f"[green]Removed[/] {escape(path)}", highlight=False)
        else:
            console.print(f"[yellow]Nothing stored at[/] {escape(path)}", highlight=False)

    @click.command("doc")
    @click.argument("path")
    @click.argument("source", type=click.File("rb"), default="-")
    @click.pass_context
    def doc(ctx, path: str, source):
        """Store the contents of SOURCE (default: stdin) as a secret at PATH.

        Examples:

            passtree doc keys/ssh-backup ~/.ssh/id_ed25519

            tar c notes/ | passtree doc archive/notes.tar
        """
        store = open_store(ctx)
        try:
            store.add_document(path, source)
        except StoreError as exc:
            fail(exc)
        console.print(f"[green]Added document[/] {escape(path)}", highlight=False)

    main.add_command(new)
    main.add_command(new, name="create")
    main.add_command(get)
    main.add_command(set_)
    main.add_command(delete)
    main.add_command(delete, name="remove")
    main.add_command(doc)
    main.add_command(doc, name="document")
