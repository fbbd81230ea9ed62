import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy import delete, func, select, update

from app.models.scoring_rule import ScoringRuleRecord
from app.repositories.base import BaseRepository
from app.schemas.scoring import ScoringRule, load_scoring_rules

logger = logging.getLogger(__name__)


class ScoringRuleRepository(BaseRepository):
    """Encapsulates queries against the ``scoring_rules`` table."""

    async def get_active_rules(self, tenant_id: str) -> List[ScoringRule]:
        """Return the tenant's active rules in questionnaire (id) order.

        Stored rows are validated on the way out; a malformed answer
        table raises ``InvalidScoringRuleError`` here rather than
        reaching the score calculator.
        """
        result = await self._db.execute(
            select(ScoringRuleRecord)
            .where(
                ScoringRuleRecord.tenant_id == tenant_id,
                ScoringRuleRecord.is_active.is_(True),
            )
            .order_by(ScoringRuleRecord.id)
        )
        return load_scoring_rules(result.scalars().all())

    async def replace_rules(
        self, tenant_id: str, rules: Sequence[ScoringRule]
    ) -> None:
        """Replace the tenant's questionnaire wholesale.

        Existing rows (active or not) are deleted and *rules* inserted
        in order, so insertion order becomes questionnaire order.
        """
        await self._db.execute(
            delete(ScoringRuleRecord).where(ScoringRuleRecord.tenant_id == tenant_id)
        )
        for rule in rules:
            self._db.add(
                ScoringRuleRecord(
                    tenant_id=tenant_id,
                    question=rule.question,
                    weight=rule.weight,
                    answers=dict(rule.answers),
                )
            )
        await self.flush()

    async def deactivate(self, tenant_id: str, rule_id: int) -> bool:
        """Hide a rule from read paths without deleting it."""
        result = await self._db.execute(
            update(ScoringRuleRecord)
            .where(
                ScoringRuleRecord.tenant_id == tenant_id,
                ScoringRuleRecord.id == rule_id,
            )
            .values(is_active=False)
        )
        return result.rowcount > 0

    async def seed_if_empty(
        self, tenant_id: str, defaults: Sequence[Dict[str, Any]]
    ) -> bool:
        """Insert *defaults* when the tenant has no rules yet.

        Returns ``True`` if rows were inserted.  Idempotent: a tenant
        that already has rules is left untouched.
        """
        count_result = await self._db.execute(
            select(func.count())
            .select_from(ScoringRuleRecord)
            .where(ScoringRuleRecord.tenant_id == tenant_id)
        )
        if count_result.scalar():
            return False

        for rule_data in defaults:
            self._db.add(ScoringRuleRecord(tenant_id=tenant_id, **rule_data))
        await self.flush()
        logger.info(
            "Seeded %d default scoring rules for tenant %s", len(defaults), tenant_id
        )
        return True
