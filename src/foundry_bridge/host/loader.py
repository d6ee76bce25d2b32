"""Resolve the configured host facade and map-generation backend.

Both settings are ``"package.module:attr.path"`` references to a factory
that receives the :class:`BridgeSettings` and returns the collaborator.
"""

from __future__ import annotations

import importlib
import logging
from typing import TYPE_CHECKING, Any

from foundry_bridge.host.facade import DataAccess, MapGenerator
from foundry_bridge.queries.errors import FacadeLoadError

if TYPE_CHECKING:
    from foundry_bridge.config.settings import BridgeSettings

logger = logging.getLogger(__name__)


def resolve_reference(reference: str) -> Any:
    """Import ``"module:attr.path"`` and return the attribute.

    Examples:
        >>> resolve_reference("os.path:join").__name__
        'join'
    """
    module_name, sep, attr_path = reference.partition(":")
    if not sep or not module_name or not attr_path:
        msg = f"Invalid factory reference {reference!r}: expected 'module:attribute'"
        raise FacadeLoadError(msg)
    try:
        target: Any = importlib.import_module(module_name)
    except ImportError as exc:
        raise FacadeLoadError(f"Cannot import {module_name!r}: {exc}") from exc
    for part in attr_path.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise FacadeLoadError(f"{reference!r} has no attribute {part!r}") from exc
    return target


def _build(reference: str, settings: BridgeSettings) -> Any:
    factory = resolve_reference(reference)
    if not callable(factory):
        raise FacadeLoadError(f"{reference!r} is not callable")
    return factory(settings)


def load_facade(settings: BridgeSettings) -> DataAccess:
    """Instantiate the ``[host] facade`` for *settings*."""
    facade = _build(settings.host.facade, settings)
    if not isinstance(facade, DataAccess):
        raise FacadeLoadError(f"{settings.host.facade!r} did not return a DataAccess facade")
    logger.debug("Loaded host facade %s", type(facade).__name__)
    return facade


def load_map_generator(settings: BridgeSettings) -> MapGenerator | None:
    """Instantiate the ``[host] map_generator``, or ``None`` when unset."""
    reference = settings.host.map_generator
    if not reference:
        return None
    generator = _build(reference, settings)
    if not isinstance(generator, MapGenerator):
        raise FacadeLoadError(f"{reference!r} did not return a MapGenerator")
    return generator
