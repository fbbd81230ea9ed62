from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func, true

from app.models.base import Base


class User(Base):
    """Tenant user.  Active users with the ``sales_agent`` role receive leads.

    Creation order doubles as seniority: the router's skill-based
    method picks the earliest-created eligible agent.
    """

    __tablename__ = "users"
    id = Column(String(50), primary_key=True)
    tenant_id = Column(
        String(50), ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False
    )
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(20), nullable=False, server_default="sales_agent")
    is_active = Column(Boolean, nullable=False, server_default=true())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    tenant = relationship("Tenant", back_populates="users")

    __table_args__ = (
        CheckConstraint(
            "role IN ('business_admin', 'sales_agent')", name="ck_user_role"
        ),
    )
