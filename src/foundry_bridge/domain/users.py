"""Caller identity and role ladder.

Role values mirror the host's ``CONST.USER_ROLES`` so they can be passed
through unchanged from a live world.
"""

from __future__ import annotations

from enum import IntEnum

from pydantic import BaseModel


class UserRole(IntEnum):
    """Host permission roles, lowest to highest."""

    NONE = 0
    PLAYER = 1
    TRUSTED = 2
    ASSISTANT = 3
    GAMEMASTER = 4

    @classmethod
    def parse(cls, value: str | int | UserRole) -> UserRole:
        """Accept a role name (case-insensitive) or its integer value."""
        if isinstance(value, str) and not value.isdigit():
            try:
                return cls[value.strip().upper()]
            except KeyError:
                msg = f"Unknown user role: {value!r}"
                raise ValueError(msg) from None
        return cls(int(value))


class User(BaseModel):
    """A connected host user invoking an operation."""

    model_config = {"frozen": True}

    id: str
    name: str
    role: UserRole = UserRole.PLAYER
    active: bool = True

    @property
    def is_gm(self) -> bool:
        """Assistant GMs count as GMs, matching the host's ``isGM``."""
        return self.role >= UserRole.ASSISTANT
