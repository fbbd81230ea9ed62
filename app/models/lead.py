from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.constants import LEAD_CATEGORY_CHECK_CLAUSE
from app.models.base import Base


class Lead(Base):
    """Prospective customer being qualified and routed.

    ``score``, ``category`` and ``assigned_user_id`` are written once by
    the qualification workflow when the lead is created.
    """

    __tablename__ = "leads"
    id = Column(String(50), primary_key=True)
    tenant_id = Column(
        String(50), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(200), nullable=False)
    email = Column(String(255))
    phone = Column(String(20))
    source = Column(String(100))
    # "metadata" is reserved on declarative classes
    lead_metadata = Column("metadata", JSONB)
    score = Column(Integer, nullable=False, server_default=text("0"))
    category = Column(String(20), nullable=False, server_default="unqualified")
    status = Column(String(20), nullable=False, server_default="new")
    assigned_user_id = Column(
        String(50), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    messages = relationship(
        "Message",
        back_populates="lead",
        cascade="all, delete-orphan",
        order_by="Message.seq",
    )

    __table_args__ = (
        CheckConstraint(
            LEAD_CATEGORY_CHECK_CLAUSE,
            name="ck_lead_category",
        ),
        CheckConstraint("score >= 0", name="ck_lead_score_nonneg"),
        Index("ix_leads_tenant_category", "tenant_id", "category"),
    )
