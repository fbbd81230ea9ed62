import logging
import random
from typing import Iterable, Optional, Sequence

from app.core.cache import CacheService
from app.core.config import settings
from app.schemas.agent import AgentRef
from app.schemas.common import LeadCategory, RoutingMethod
from app.schemas.routing import RoutingDecision, RoutingRule

logger = logging.getLogger(__name__)

# Redis key prefix for per-(tenant, category) round-robin cursors
_ROUND_ROBIN_KEY_PREFIX = "round_robin:routing"


def find_policy(
    rules: Iterable[RoutingRule], category: str
) -> Optional[RoutingRule]:
    """Return the rule configured for *category*, or ``None``.

    Exact match only; there is no fallback policy.  ``None`` means
    "leave the lead unassigned", which is different from an explicit
    ``automation`` policy only in that nothing was configured.
    """
    for rule in rules:
        if rule.category == category:
            return rule
    return None


class LeadRouter:
    """Select an assignee for a categorised lead.

    Precedence:

    1. ``hot`` leads, and any ``skill_based`` policy, go to the first
       eligible agent.  List order is seniority, so this is
       deterministic and overrides whatever method a hot policy names.
    2. ``round_robin`` picks uniformly at random, or ``agents[cursor]``
       when the caller threads a cursor through.
    3. ``automation``, a missing policy, or an empty pool assign nobody.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    def route(
        self,
        policy: Optional[RoutingRule],
        agents: Sequence[AgentRef],
        cursor: Optional[int] = None,
    ) -> RoutingDecision:
        if policy is None or not agents:
            return RoutingDecision()

        if (
            policy.category is LeadCategory.hot
            or policy.method is RoutingMethod.skill_based
        ):
            return RoutingDecision(agent_id=agents[0].agent_id)

        if policy.method is RoutingMethod.round_robin:
            if cursor is not None:
                chosen = agents[cursor % len(agents)]
                return RoutingDecision(agent_id=chosen.agent_id, cursor=cursor + 1)
            return RoutingDecision(agent_id=self._rng.choice(agents).agent_id)

        # automation: nurture sequences handle the lead, no assignee
        return RoutingDecision()


class RoundRobinCursorStore:
    """Persist round-robin cursors in Redis, one per (tenant, category).

    ``reserve`` atomically claims the next cursor so concurrent
    qualifications for the same tenant never share a slot.  When Redis
    is unavailable it returns ``None`` and the router falls back to
    random selection.
    """

    def __init__(self, cache: CacheService, ttl: Optional[int] = None) -> None:
        self._cache = cache
        self._ttl = ttl if ttl is not None else settings.ROUND_ROBIN_TTL

    @staticmethod
    def key(tenant_id: str, category: str) -> str:
        return f"{_ROUND_ROBIN_KEY_PREFIX}:{tenant_id}:{category}"

    async def reserve(self, tenant_id: str, category: str) -> Optional[int]:
        counter = await self._cache.incr(self.key(tenant_id, category), ttl=self._ttl)
        if counter is None:
            logger.warning(
                "Round-robin cursor unavailable for tenant %s/%s, using random choice",
                tenant_id,
                category,
            )
            return None
        return counter - 1

    async def reset(self, tenant_id: str, category: str) -> None:
        await self._cache.delete(self.key(tenant_id, category))
