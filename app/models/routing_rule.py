from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import false, func

from app.core.constants import (
    ROUTING_CATEGORY_CHECK_CLAUSE,
    ROUTING_METHOD_CHECK_CLAUSE,
)
from app.models.base import Base


class RoutingRuleRecord(Base):
    """Assignment policy for one (tenant, category) pair."""

    __tablename__ = "routing_rules"
    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(
        String(50), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    category = Column(String(20), nullable=False)
    method = Column(String(20), nullable=False)
    notify = Column(Boolean, nullable=False, server_default=false())
    settings = Column(JSONB)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tenant = relationship("Tenant", back_populates="routing_rules")

    __table_args__ = (
        UniqueConstraint("tenant_id", "category", name="uq_routing_tenant_category"),
        CheckConstraint(ROUTING_CATEGORY_CHECK_CLAUSE, name="ck_routing_category"),
        CheckConstraint(ROUTING_METHOD_CHECK_CLAUSE, name="ck_routing_method"),
    )
