"""Root CLI group for foundry-bridge with global flags and command registration."""

from __future__ import annotations

import click

from foundry_bridge import __version__
from foundry_bridge.commands import register_commands
from foundry_bridge.commands._base import BridgeGroup
from foundry_bridge.commands._context import AppContext
from foundry_bridge.config.settings import BridgeSettings


@click.group(
    cls=BridgeGroup,
    invoke_without_command=True,
    examples="""\
  foundry-bridge methods
  foundry-bridge call ping
  foundry-bridge -c ./foundry-bridge.toml serve --transport sse""",
)
@click.version_option(version=__version__, prog_name="foundry-bridge")
@click.option("--json", "json_output", is_flag=True, help="Structured JSON output.")
@click.option("-v", "--verbose", is_flag=True, help="Debug logging to stderr.")
@click.option("--log-json", is_flag=True, help="Structured JSON log output to stderr.")
@click.option("-c", "--config", "config_path", default=None, help="Override config file path.")
@click.pass_context
def cli(
    ctx: click.Context,
    json_output: bool,
    verbose: bool,
    log_json: bool,
    config_path: str | None,
) -> None:
    """foundry-bridge: expose a Foundry VTT world as callable operations."""
    ctx.ensure_object(dict)
    settings = BridgeSettings.from_cli(
        config_path=config_path,
        json_output=json_output,
        verbose=verbose,
        log_json=log_json,
    )
    ctx.obj = AppContext(settings)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


register_commands(cli)
