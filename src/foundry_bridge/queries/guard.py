"""Access guard: the single privilege check in front of every handler.

Denials are deliberately silent: the decision carries no reason, so an
unprivileged caller cannot learn why (or whether) an operation exists.
"""

from __future__ import annotations

from dataclasses import dataclass

from foundry_bridge.domain.users import User, UserRole


@dataclass(frozen=True)
class AccessDecision:
    """Outcome of a privilege check."""

    allowed: bool


class AccessGuard:
    """Require at least *minimum_role* (GM-level by default)."""

    def __init__(self, minimum_role: UserRole = UserRole.ASSISTANT) -> None:
        self.minimum_role = minimum_role

    def check(self, user: User | None) -> AccessDecision:
        if user is None or not user.active:
            return AccessDecision(allowed=False)
        return AccessDecision(allowed=user.role >= self.minimum_role)
