from typing import Any, Dict, Optional

from app.models.activity_log import ActivityLog
from app.repositories.base import BaseRepository


class ActivityLogRepository(BaseRepository):
    """Encapsulates inserts into the ``activity_log`` audit table."""

    async def log(
        self,
        tenant_id: str,
        user_id: Optional[str],
        entity_type: str,
        entity_id: str,
        action: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> ActivityLog:
        """Add an audit entry to the current unit of work."""
        entry = ActivityLog(
            tenant_id=tenant_id,
            user_id=user_id,
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            details=details,
        )
        self._db.add(entry)
        return entry
