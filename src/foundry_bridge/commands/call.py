"""call: dispatch one operation against the configured host."""

from __future__ import annotations

import asyncio
import json
from typing import TYPE_CHECKING, Any

import click

from foundry_bridge.commands._base import BridgeCommand

if TYPE_CHECKING:
    from foundry_bridge.commands._context import AppContext


def _parse_payload(raw: str | None) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint="--data") from exc


@click.command(
    cls=BridgeCommand,
    examples="""\
  foundry-bridge call ping
  foundry-bridge call listActors --data '{"type": "character"}'
  foundry-bridge --json call listFolders --data '{"type": "Actor"}'
  foundry-bridge call foundry-mcp-bridge.getWorldInfo""",
)
@click.argument("method")
@click.option("--data", "raw_data", default=None, help="JSON payload for the operation.")
@click.pass_obj
def call(app: AppContext, method: str, raw_data: str | None) -> None:
    """Dispatch METHOD as the host's current user and print the response."""
    payload = _parse_payload(raw_data)
    registry = app.registry
    user = registry.data_access.current_user()
    response = asyncio.run(registry.dispatch(method, payload, user=user))
    app.emit(response, method)
