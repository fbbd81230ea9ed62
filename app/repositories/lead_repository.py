from typing import Any, Dict, List, Optional

from sqlalchemy import func, or_, select, update

from app.core.constants import QUALIFIED_STATUS
from app.models.lead import Lead
from app.repositories.base import BaseRepository
from app.schemas.common import LeadCategory


class LeadRepository(BaseRepository):
    """Encapsulates every SQL query that touches the ``leads`` table."""

    async def get_by_id(self, lead_id: str) -> Optional[Lead]:
        """Return a single lead by primary key, or ``None``."""
        result = await self._db.execute(select(Lead).where(Lead.id == lead_id))
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> Lead:
        """Insert a new lead and flush so dependent rows can reference it."""
        lead = Lead(**kwargs)
        self._db.add(lead)
        await self.flush()
        return lead

    async def apply_qualification(
        self,
        lead_id: str,
        score: int,
        category: str,
        assigned_user_id: Optional[str],
    ) -> None:
        """Store the qualification result on the lead and mark it qualified."""
        await self._db.execute(
            update(Lead)
            .where(Lead.id == lead_id)
            .values(
                score=score,
                category=category,
                assigned_user_id=assigned_user_id,
                status=QUALIFIED_STATUS,
            )
        )

    async def list_leads(
        self,
        tenant_id: str,
        category: Optional[str] = None,
        status: Optional[str] = None,
        assigned: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[Lead]:
        """Return a tenant's leads, newest first, narrowed by optional filters.

        ``assigned=True`` keeps leads with an assignee, ``False`` keeps
        unassigned ones and ``None`` ignores assignment.  *search* is a
        case-insensitive substring match on name, email or phone.
        """
        stmt = select(Lead).where(Lead.tenant_id == tenant_id)
        if category is not None:
            stmt = stmt.where(Lead.category == category)
        if status is not None:
            stmt = stmt.where(Lead.status == status)
        if assigned is True:
            stmt = stmt.where(Lead.assigned_user_id.is_not(None))
        elif assigned is False:
            stmt = stmt.where(Lead.assigned_user_id.is_(None))
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(
                or_(
                    Lead.name.ilike(pattern),
                    Lead.email.ilike(pattern),
                    Lead.phone.ilike(pattern),
                )
            )
        result = await self._db.execute(stmt.order_by(Lead.created_at.desc(), Lead.id))
        return list(result.scalars().all())

    async def count_by_category(self, tenant_id: str) -> Dict[str, int]:
        """Return lead counts per category; categories with no leads map to 0."""
        result = await self._db.execute(
            select(Lead.category, func.count())
            .where(Lead.tenant_id == tenant_id)
            .group_by(Lead.category)
        )
        counts = {category.value: 0 for category in LeadCategory}
        for category, count in result.all():
            counts[category] = count
        return counts
