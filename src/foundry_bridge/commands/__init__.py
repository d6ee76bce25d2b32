"""Subcommand modules for foundry-bridge.

Provides register_commands(), which uses deferred imports to keep
``foundry-bridge --help`` fast.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register all standalone commands on the root CLI group."""
    from foundry_bridge.commands.call import call
    from foundry_bridge.commands.methods import methods
    from foundry_bridge.commands.serve import serve

    cli.add_command(call)
    cli.add_command(methods)
    cli.add_command(serve)
