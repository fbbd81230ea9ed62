from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, true

from app.models.base import Base


class ScoringRuleRecord(Base):
    """Stored questionnaire entry for one tenant.

    ``answers`` is a JSONB object mapping answer label to point value
    (0–100).  Rows are replaced wholesale when a tenant edits its
    questionnaire; ``is_active = false`` hides a rule from read paths.
    """

    __tablename__ = "scoring_rules"
    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(
        String(50), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    question = Column(Text, nullable=False)
    weight = Column(Integer, nullable=False)
    answers = Column(JSONB, nullable=False)
    is_active = Column(Boolean, nullable=False, server_default=true())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tenant = relationship("Tenant", back_populates="scoring_rules")

    __table_args__ = (CheckConstraint("weight > 0", name="ck_scoring_weight_pos"),)
