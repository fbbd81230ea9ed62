import logging
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func, select, update

from app.models.routing_rule import RoutingRuleRecord
from app.repositories.base import BaseRepository
from app.schemas.routing import RoutingRule

logger = logging.getLogger(__name__)


class RoutingRuleRepository(BaseRepository):
    """Encapsulates queries against the ``routing_rules`` table."""

    async def list_rules(self, tenant_id: str) -> List[RoutingRule]:
        """Return every routing rule configured for a tenant."""
        result = await self._db.execute(
            select(RoutingRuleRecord)
            .where(RoutingRuleRecord.tenant_id == tenant_id)
            .order_by(RoutingRuleRecord.id)
        )
        return [RoutingRule.model_validate(row) for row in result.scalars().all()]

    async def get_routing_rule(
        self, tenant_id: str, category: str
    ) -> Optional[RoutingRule]:
        """Return the tenant's policy for *category*, or ``None``.

        Only the matching row is loaded and validated.
        """
        result = await self._db.execute(
            select(RoutingRuleRecord).where(
                RoutingRuleRecord.tenant_id == tenant_id,
                RoutingRuleRecord.category == category,
            )
        )
        row = result.scalar_one_or_none()
        return RoutingRule.model_validate(row) if row is not None else None

    async def update_rule(
        self,
        tenant_id: str,
        category: str,
        method: str,
        notify: bool,
        settings: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Overwrite the policy for an existing (tenant, category) pair.

        Returns ``False`` when no rule exists for that category.
        """
        result = await self._db.execute(
            update(RoutingRuleRecord)
            .where(
                RoutingRuleRecord.tenant_id == tenant_id,
                RoutingRuleRecord.category == category,
            )
            .values(method=method, notify=notify, settings=settings)
        )
        return result.rowcount > 0

    async def seed_if_empty(
        self, tenant_id: str, defaults: Sequence[Dict[str, Any]]
    ) -> bool:
        """Insert default routing rules when the tenant has none."""
        count_result = await self._db.execute(
            select(func.count())
            .select_from(RoutingRuleRecord)
            .where(RoutingRuleRecord.tenant_id == tenant_id)
        )
        if count_result.scalar():
            return False

        for rule_data in defaults:
            self._db.add(RoutingRuleRecord(tenant_id=tenant_id, **rule_data))
        await self.flush()
        logger.info(
            "Seeded %d default routing rules for tenant %s", len(defaults), tenant_id
        )
        return True
