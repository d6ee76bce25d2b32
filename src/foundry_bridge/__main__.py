"""Allow ``python -m foundry_bridge``."""

from foundry_bridge.cli import cli

cli()
