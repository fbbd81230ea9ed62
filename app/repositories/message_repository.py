from typing import List, Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.message import Message
from app.repositories.base import BaseRepository
from app.schemas.common import MessageDirection


def _message_id() -> str:
    return f"msg_{uuid4().hex}"


class MessageRepository(BaseRepository):
    """Append-only store for qualification transcripts (``messages`` table).

    Implements the transcript sink used by the qualification
    orchestrator: each exchange becomes a question row (direction
    ``ai``) followed by an answer row (direction ``lead``).
    """

    def __init__(self, db: AsyncSession, channel: Optional[str] = None) -> None:
        super().__init__(db)
        self._channel = channel or settings.TRANSCRIPT_CHANNEL

    async def append(self, lead_id: str, question: str, answer: str) -> None:
        """Record one question/answer exchange for *lead_id*."""
        self._db.add(
            Message(
                id=_message_id(),
                lead_id=lead_id,
                channel=self._channel,
                message=question,
                direction=MessageDirection.ai.value,
            )
        )
        self._db.add(
            Message(
                id=_message_id(),
                lead_id=lead_id,
                channel=self._channel,
                message=answer,
                direction=MessageDirection.lead.value,
            )
        )
        await self.flush()

    async def list_for_lead(self, lead_id: str) -> List[Message]:
        """Return a lead's messages in the order they were written."""
        result = await self._db.execute(
            select(Message).where(Message.lead_id == lead_id).order_by(Message.seq)
        )
        return list(result.scalars().all())
