"""The fixed operation catalog, in registration order."""

from __future__ import annotations

from foundry_bridge.queries.handlers import (
    actors,
    adventure,
    compendium,
    documents,
    files,
    folders,
    journals,
    maps,
    scenes,
    system,
    tokens,
)
from foundry_bridge.queries.handlers.base import QueryDefinition

QUERY_CATALOG: tuple[QueryDefinition, ...] = (
    *system.QUERIES,
    *actors.QUERIES,
    *compendium.QUERIES,
    *scenes.QUERIES,
    *journals.QUERIES,
    *maps.QUERIES,
    *tokens.QUERIES,
    *documents.QUERIES,
    *files.QUERIES,
    *folders.QUERIES,
    *adventure.QUERIES,
)


def catalog_names(catalog: tuple[QueryDefinition, ...] = QUERY_CATALOG) -> list[str]:
    """Every bare name (primary names and aliases) the catalog registers."""
    return [name for definition in catalog for name in definition.names]
