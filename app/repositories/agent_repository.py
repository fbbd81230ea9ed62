from typing import List

from sqlalchemy import select

from app.core.constants import SALES_AGENT_ROLE
from app.models.user import User
from app.repositories.base import BaseRepository
from app.schemas.agent import AgentRef


class AgentRepository(BaseRepository):
    """Encapsulates queries for sales agents (``users`` with the agent role)."""

    async def get_eligible_agents(self, tenant_id: str) -> List[AgentRef]:
        """Return the tenant's active sales agents, most senior first.

        Seniority is creation order; ``id`` breaks ties so the order is
        stable across calls.
        """
        result = await self._db.execute(
            select(User)
            .where(
                User.tenant_id == tenant_id,
                User.role == SALES_AGENT_ROLE,
                User.is_active.is_(True),
            )
            .order_by(User.created_at, User.id)
        )
        return [AgentRef.model_validate(user) for user in result.scalars().all()]
