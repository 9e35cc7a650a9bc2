"""
passtree CLI — the secret store command line.

The main Click group is defined here and every command module
registers its commands on it.

Entry point: passtree.cli:main
"""

from __future__ import annotations

import logging

import click

from .. import __version__


class StoreGroup(click.Group):
    """Click group whose usage errors exit 1 instead of 2."""

    def parse_args(self, ctx, args):
        try:
            return super().parse_args(ctx, args)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except click.UsageError as exc:
            exc.exit_code = 1
            raise


@click.group(cls=StoreGroup)
@click.version_option(version=__version__, prog_name="passtree")
@click.option("--store", "-s", "root", default=None, type=click.Path(),
              envvar="PASSTREE_HOME", help="Store root directory.")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging.")
@click.pass_context
def main(ctx, root, verbose):
    """passtree — GPG-encrypted secrets in a directory tree.

    One file per secret, optionally mirrored to a git remote.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["root"] = root


# ---------------------------------------------------------------------------
# Register all commands from modular files
# ---------------------------------------------------------------------------

from .init_cmd import register_init_commands
from .listing_cmd import register_listing_commands
from .secrets_cmd import register_secret_commands

register_init_commands(main)
register_secret_commands(main)
register_listing_commands(main)
