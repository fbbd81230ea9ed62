from sqlalchemy import (
    BigInteger,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Identity,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.core.constants import MESSAGE_DIRECTION_CHECK_CLAUSE
from app.models.base import Base


class Message(Base):
    """One side of a qualification exchange.

    The qualifier's question is stored with direction ``ai`` and the
    lead's answer with direction ``lead``.  Rows are append-only; ``seq``
    preserves write order, which timestamps alone cannot (``now()`` is
    fixed for the whole transaction).
    """

    __tablename__ = "messages"
    id = Column(String(50), primary_key=True)
    lead_id = Column(
        String(50), ForeignKey("leads.id", ondelete="CASCADE"), nullable=False
    )
    channel = Column(String(20), nullable=False)
    message = Column(Text, nullable=False)
    direction = Column(String(10), nullable=False)
    timestamp = Column(DateTime(timezone=True), server_default=func.now())
    seq = Column(BigInteger, Identity(), nullable=False)

    lead = relationship("Lead", back_populates="messages")

    __table_args__ = (
        CheckConstraint(MESSAGE_DIRECTION_CHECK_CLAUSE, name="ck_message_direction"),
    )
