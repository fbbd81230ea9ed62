"""Demo data seeder: one tenant, its agents, default rules, sample leads.

Run with ``python -m app.scripts.seed`` against an empty database.
"""

import asyncio
import logging

from sqlalchemy import text

from app.core.cache import CacheService
from app.core.config import settings
from app.core.database import AsyncSessionLocal, engine
from app.dependencies import (
    get_lead_intake_service,
    get_redis_client,
    get_tenant_config_service,
)
from app.models import Base, Tenant, User
from app.schemas.lead import LeadCreate
from app.services.answer_providers import RandomAnswerProvider

logger = logging.getLogger(__name__)

DEMO_TENANT_ID = "biz_demo"
DEMO_ADMIN_ID = "user_demo_admin"

DEMO_AGENTS = [
    ("user_demo_agent_1", "Priya Sharma", "priya@demo.example"),
    ("user_demo_agent_2", "Arjun Mehta", "arjun@demo.example"),
    ("user_demo_agent_3", "Sara Khan", "sara@demo.example"),
]

DEMO_LEADS = [
    LeadCreate(name="Rohan Gupta", email="rohan@example.com", phone="+919800000001", source="website"),
    LeadCreate(name="Anita Desai", email="anita@example.com", phone="+919800000002"),
    LeadCreate(name="Vikram Rao", phone="+919800000003", source="whatsapp"),
    LeadCreate(name="Neha Joshi", email="neha@example.com"),
    LeadCreate(name="Karan Patel", email="karan@example.com", phone="+919800000005"),
]


async def seed() -> None:
    # Local demo databases only; production schemas are managed elsewhere
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    redis_client = await get_redis_client()
    cache = CacheService(redis_client=redis_client)

    async with AsyncSessionLocal() as session:
        await session.execute(
            text(
                "TRUNCATE TABLE activity_log, messages, leads, routing_rules, "
                "scoring_rules, users, tenants CASCADE"
            )
        )

        session.add(Tenant(id=DEMO_TENANT_ID, name="Demo Business"))
        session.add(
            User(
                id=DEMO_ADMIN_ID,
                tenant_id=DEMO_TENANT_ID,
                name="Demo Admin",
                email="admin@demo.example",
                role="business_admin",
            )
        )
        # Agents share the transaction timestamp, so id order is seniority
        for agent_id, name, email in DEMO_AGENTS:
            session.add(
                User(id=agent_id, tenant_id=DEMO_TENANT_ID, name=name, email=email)
            )
        await session.flush()

        config_service = get_tenant_config_service(session, cache)
        await config_service.seed_defaults(DEMO_TENANT_ID)

        intake = get_lead_intake_service(session, cache)
        provider = RandomAnswerProvider()
        for lead_data in DEMO_LEADS:
            outcome = await intake.create_and_qualify(
                DEMO_TENANT_ID, lead_data, provider, actor_id=DEMO_ADMIN_ID
            )
            logger.info(
                "%s -> score %d, %s, assignee %s",
                lead_data.name,
                outcome.score,
                outcome.category.value,
                outcome.assignee or "none",
            )

        await session.commit()

    if redis_client is not None:
        await redis_client.aclose()
    await engine.dispose()
    logger.info("Seed complete for tenant %s", DEMO_TENANT_ID)


if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(seed())
