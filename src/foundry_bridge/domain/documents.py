"""Host document vocabulary shared by handlers and facades."""

from __future__ import annotations

import re
import secrets
import string
from enum import StrEnum

FOUNDRY_ID_RE = re.compile(r"^[a-zA-Z0-9]{16}$")

_ID_ALPHABET = string.ascii_letters + string.digits


class DocumentType(StrEnum):
    """World documents that can be created from raw JSON."""

    ACTOR = "Actor"
    ITEM = "Item"


class FolderType(StrEnum):
    """Document types a folder may contain."""

    ACTOR = "Actor"
    ITEM = "Item"
    SCENE = "Scene"
    JOURNAL_ENTRY = "JournalEntry"
    ROLL_TABLE = "RollTable"
    COMPENDIUM = "Compendium"


def is_foundry_id(value: object) -> bool:
    """True for 16-character alphanumeric document ids.

    Examples:
        >>> is_foundry_id("a1B2c3D4e5F6g7H8")
        True
        >>> is_foundry_id("short")
        False
    """
    return isinstance(value, str) and FOUNDRY_ID_RE.match(value) is not None


def random_id(length: int = 16) -> str:
    """Generate a document id in the host's alphabet."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))
