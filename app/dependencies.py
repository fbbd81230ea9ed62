import logging
from typing import Optional

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.cache import CacheService
from app.core.config import settings
from app.repositories.activity_log_repository import ActivityLogRepository
from app.repositories.agent_repository import AgentRepository
from app.repositories.lead_repository import LeadRepository
from app.repositories.message_repository import MessageRepository
from app.repositories.routing_rule_repository import RoutingRuleRepository
from app.repositories.scoring_rule_repository import ScoringRuleRepository
from app.services.lead_intake_service import LeadIntakeService
from app.services.lead_routing import RoundRobinCursorStore
from app.services.qualification import QualificationOrchestrator
from app.services.tenant_config_service import TenantConfigService

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Redis client factory
# ---------------------------------------------------------------------------


async def get_redis_client() -> Optional[Redis]:
    """Return a connected async Redis client, or ``None`` if unreachable."""
    try:
        client = Redis.from_url(settings.REDIS_URL, decode_responses=True)
        await client.ping()
        return client
    except Exception:
        logger.warning("Redis unavailable, round-robin cursors disabled")
        return None


def get_cursor_store(cache: CacheService) -> Optional[RoundRobinCursorStore]:
    """Return a cursor store when rotating round-robin is configured."""
    if settings.ROUND_ROBIN_MODE != "rotating":
        return None
    if not cache.is_available:
        logger.warning("Rotating round-robin configured without Redis, using random choice")
        return None
    return RoundRobinCursorStore(cache)


# ---------------------------------------------------------------------------
# Service factory functions (all repositories share the given session)
# ---------------------------------------------------------------------------


def get_qualification_orchestrator(
    db: AsyncSession, cache: Optional[CacheService] = None
) -> QualificationOrchestrator:
    """Build a :class:`QualificationOrchestrator` backed by SQLAlchemy repositories."""
    return QualificationOrchestrator(
        rule_repo=ScoringRuleRepository(db),
        routing_repo=RoutingRuleRepository(db),
        agent_repo=AgentRepository(db),
        transcript_sink=MessageRepository(db),
        cursor_store=get_cursor_store(cache or CacheService()),
    )


def get_lead_intake_service(
    db: AsyncSession, cache: Optional[CacheService] = None
) -> LeadIntakeService:
    """Build a :class:`LeadIntakeService` with injected dependencies."""
    return LeadIntakeService(
        orchestrator=get_qualification_orchestrator(db, cache),
        lead_repo=LeadRepository(db),
        activity_repo=ActivityLogRepository(db),
        message_repo=MessageRepository(db),
    )


def get_tenant_config_service(
    db: AsyncSession, cache: Optional[CacheService] = None
) -> TenantConfigService:
    """Build a :class:`TenantConfigService` with injected dependencies."""
    return TenantConfigService(
        scoring_rule_repo=ScoringRuleRepository(db),
        routing_rule_repo=RoutingRuleRepository(db),
        cursor_store=get_cursor_store(cache or CacheService()),
    )
