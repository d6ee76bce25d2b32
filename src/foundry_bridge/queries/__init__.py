"""Query layer: registry, access guard, validation, and handlers.

INVARIANT: every registered handler returns or raises; the registry's
``dispatch`` is the only place raised failures become response envelopes.
"""

from foundry_bridge.queries.guard import AccessDecision, AccessGuard
from foundry_bridge.queries.registry import QueryRegistry

__all__ = ["AccessDecision", "AccessGuard", "QueryRegistry"]
