import logging
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from app.core.default_rules import DEFAULT_ROUTING_RULES, DEFAULT_SCORING_RULES
from app.core.exceptions import InvalidRoutingRuleError
from app.repositories.routing_rule_repository import RoutingRuleRepository
from app.repositories.scoring_rule_repository import ScoringRuleRepository
from app.schemas.routing import RoutingRule
from app.schemas.scoring import ScoringRule, load_scoring_rules
from app.services.lead_routing import RoundRobinCursorStore

logger = logging.getLogger(__name__)


class TenantConfigService:
    """Manage a tenant's questionnaire and routing policies.

    Everything is validated before storage is touched, so a rejected
    update leaves the previous configuration in place.  Committing is
    left to the caller.
    """

    def __init__(
        self,
        scoring_rule_repo: ScoringRuleRepository,
        routing_rule_repo: RoutingRuleRepository,
        cursor_store: Optional[RoundRobinCursorStore] = None,
    ) -> None:
        self._scoring_rule_repo = scoring_rule_repo
        self._routing_rule_repo = routing_rule_repo
        self._cursor_store = cursor_store

    async def seed_defaults(self, tenant_id: str) -> Tuple[bool, bool]:
        """Give a newly onboarded tenant the default questionnaire and policies.

        Returns ``(scoring_seeded, routing_seeded)``; either is ``False``
        when the tenant already had rules of that kind.
        """
        scoring_seeded = await self._scoring_rule_repo.seed_if_empty(
            tenant_id, DEFAULT_SCORING_RULES
        )
        routing_seeded = await self._routing_rule_repo.seed_if_empty(
            tenant_id, DEFAULT_ROUTING_RULES
        )
        return scoring_seeded, routing_seeded

    async def replace_scoring_rules(
        self, tenant_id: str, raw_rules: Iterable[Any]
    ) -> List[ScoringRule]:
        """Validate *raw_rules* and replace the tenant's questionnaire with them.

        Raises ``InvalidScoringRuleError`` if any rule is malformed, in
        which case nothing is written.  An empty list is allowed and
        leaves the tenant unconfigured (leads become ``unqualified``).
        """
        rules = load_scoring_rules(raw_rules)
        await self._scoring_rule_repo.replace_rules(tenant_id, rules)
        logger.info("Replaced scoring rules for tenant %s (%d rules)", tenant_id, len(rules))
        return rules

    async def deactivate_scoring_rule(self, tenant_id: str, rule_id: int) -> bool:
        return await self._scoring_rule_repo.deactivate(tenant_id, rule_id)

    async def list_routing_rules(self, tenant_id: str) -> List[RoutingRule]:
        return await self._routing_rule_repo.list_rules(tenant_id)

    async def update_routing_rule(
        self,
        tenant_id: str,
        category: str,
        method: str,
        notify: bool,
        settings: Optional[Dict[str, Any]] = None,
    ) -> RoutingRule:
        """Change the assignment method for one category.

        Raises ``InvalidRoutingRuleError`` for an unknown category or
        method, or when the tenant has no rule for *category* yet.
        """
        try:
            rule = RoutingRule(
                category=category, method=method, notify=notify, settings=settings
            )
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            raise InvalidRoutingRuleError(
                f"Invalid routing rule for {category!r}: {messages}"
            ) from exc

        updated = await self._routing_rule_repo.update_rule(
            tenant_id,
            rule.category.value,
            rule.method.value,
            rule.notify,
            settings or None,
        )
        if not updated:
            raise InvalidRoutingRuleError(
                f"No routing rule configured for category {category!r}"
            )

        # A new policy starts its rotation from the most senior agent
        if self._cursor_store is not None:
            await self._cursor_store.reset(tenant_id, rule.category.value)
        return rule
