"""methods: list the registered operation names."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from foundry_bridge.commands._base import BridgeCommand
from foundry_bridge.output.formatters import format_methods

if TYPE_CHECKING:
    from foundry_bridge.commands._context import AppContext


@click.command(
    cls=BridgeCommand,
    examples="""\
  foundry-bridge methods
  foundry-bridge methods --family tokens
  foundry-bridge --json methods""",
)
@click.option("--family", default=None, help="Only show one handler family (e.g. folders).")
@click.pass_obj
def methods(app: AppContext, family: str | None) -> None:
    """List registered operations with their family and privilege."""
    registry = app.registry
    registered = set(registry.registered_methods())
    rows = []
    for definition in registry.catalog:
        definition_family = definition.func.__module__.rsplit(".", 1)[-1]
        if family and definition_family != family:
            continue
        for name in definition.names:
            if name in registered:
                rows.append((name, definition_family, definition.privileged))
    click.echo(format_methods(rows, json_output=app.settings.json_output))
