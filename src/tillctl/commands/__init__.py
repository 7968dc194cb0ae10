"""Subcommand modules for tillctl.

Provides register_commands() which uses deferred imports to keep
``tillctl --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all command groups and standalone commands on the root CLI group.

    2 groups (have subcommands) + 3 standalone commands.
    """
    # --- Groups ---
    from tillctl.commands.catalog import catalog
    from tillctl.commands.history import history

    cli.add_command(catalog)
    cli.add_command(history)

    # --- Standalone commands ---
    from tillctl.commands.init_cmd import init_cmd
    from tillctl.commands.sale import quote, sell

    cli.add_command(init_cmd)
    cli.add_command(quote)
    cli.add_command(sell)
