"""Locate and read ``foundry-bridge.toml``.

Lookup order: the ``FOUNDRY_BRIDGE_CONFIG`` env var, then the nearest
``foundry-bridge.toml`` in the start directory or any of its parents.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILENAME = "foundry-bridge.toml"
CONFIG_ENV_VAR = "FOUNDRY_BRIDGE_CONFIG"


def find_config(start: Path | None = None) -> Path | None:
    """Return the config file that applies to *start* (default: cwd), if any.

    A set but dangling ``FOUNDRY_BRIDGE_CONFIG`` disables discovery rather
    than falling back to the walk-up.
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        path = Path(override)
        return path if path.is_file() else None

    here = (start or Path.cwd()).resolve()
    for directory in (here, *here.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def read_toml(path: Path) -> dict[str, Any]:
    """Parse *path*; ``tomllib.TOMLDecodeError`` propagates to the caller."""
    with path.open("rb") as fh:
        return tomllib.load(fh)
