from typing import FrozenSet

from app.schemas.common import LeadCategory, MessageDirection, RoutingMethod

# Inclusive lower bounds
HOT_SCORE_THRESHOLD: int = 80
WARM_SCORE_THRESHOLD: int = 40

LEAD_CATEGORIES: FrozenSet[str] = frozenset(c.value for c in LeadCategory)

# Categories a routing policy can be configured for. Unqualified leads
# are never routed.
ROUTABLE_CATEGORIES: FrozenSet[str] = frozenset(
    {LeadCategory.hot.value, LeadCategory.warm.value, LeadCategory.cold.value}
)

ROUTING_METHODS: FrozenSet[str] = frozenset(m.value for m in RoutingMethod)

MESSAGE_DIRECTIONS: FrozenSet[str] = frozenset(d.value for d in MessageDirection)

SALES_AGENT_ROLE: str = "sales_agent"

QUALIFIED_STATUS: str = "qualified"


def _check_clause(column: str, values: FrozenSet[str]) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in sorted(values))})"


LEAD_CATEGORY_CHECK_CLAUSE: str = _check_clause("category", LEAD_CATEGORIES)
ROUTING_CATEGORY_CHECK_CLAUSE: str = _check_clause("category", ROUTABLE_CATEGORIES)
ROUTING_METHOD_CHECK_CLAUSE: str = _check_clause("method", ROUTING_METHODS)
MESSAGE_DIRECTION_CHECK_CLAUSE: str = _check_clause("direction", MESSAGE_DIRECTIONS)
