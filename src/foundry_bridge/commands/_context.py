"""AppContext: shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``. Provides a lazily built registry and centralized
response emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

import click

from foundry_bridge.output.formatters import format_response

if TYPE_CHECKING:
    from foundry_bridge.config.settings import BridgeSettings
    from foundry_bridge.queries.registry import QueryRegistry


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The registry (and with it the host facade) is built on first use so
    ``--help`` and ``--version`` never import or construct a facade.
    """

    def __init__(self, settings: BridgeSettings) -> None:
        self.settings = settings
        self._registry: QueryRegistry | None = None

        from foundry_bridge.config.logging import configure_logging

        configure_logging(verbose=settings.verbose, log_json=settings.log_json)

    @property
    def registry(self) -> QueryRegistry:
        """The registered query registry (created lazily on first access)."""
        if self._registry is None:
            from foundry_bridge.queries.errors import FacadeLoadError
            from foundry_bridge.queries.registry import QueryRegistry

            try:
                registry = QueryRegistry.from_settings(self.settings)
            except FacadeLoadError as exc:
                raise click.ClickException(str(exc)) from exc
            registry.register()
            self._registry = registry
        return self._registry

    def emit(self, response: Mapping[str, Any], method: str) -> None:
        """Format and output a response envelope with correct exit semantics.

        * Success: writes to stdout, returns normally.
        * Failure: writes to stderr, exits with code 1.
        """
        output = format_response(response, method, json_output=self.settings.json_output)
        if response.get("success"):
            click.echo(output)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
