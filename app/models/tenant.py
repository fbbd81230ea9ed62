from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.models.base import Base


class Tenant(Base):
    """Isolated customer account owning its own rules, agents, and leads."""

    __tablename__ = "tenants"
    id = Column(String(50), primary_key=True)
    name = Column(String(200), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    users = relationship("User", back_populates="tenant", cascade="all, delete-orphan")
    scoring_rules = relationship(
        "ScoringRuleRecord", back_populates="tenant", cascade="all, delete-orphan"
    )
    routing_rules = relationship(
        "RoutingRuleRecord", back_populates="tenant", cascade="all, delete-orphan"
    )
