import logging
from typing import List, Optional
from uuid import uuid4

from app.core.exceptions import LeadNotFoundError
from app.models.lead import Lead
from app.repositories.activity_log_repository import ActivityLogRepository
from app.repositories.lead_repository import LeadRepository
from app.repositories.message_repository import MessageRepository
from app.schemas.lead import LeadCreate
from app.schemas.common import MessageDirection
from app.schemas.qualification import QualificationOutcome, TranscriptEntry
from app.services.answer_providers import AnswerProvider
from app.services.qualification import QualificationOrchestrator

logger = logging.getLogger(__name__)


def _lead_id() -> str:
    return f"lead_{uuid4().hex}"


class LeadIntakeService:
    """Lead-creation workflow: persist, qualify, route, audit.

    Dependencies are injected via the constructor so the class remains
    stateless and easily testable.  All writes share the repositories'
    session; the caller commits or rolls back, so a failed qualification
    leaves no half-created lead behind.
    """

    def __init__(
        self,
        orchestrator: QualificationOrchestrator,
        lead_repo: LeadRepository,
        activity_repo: ActivityLogRepository,
        message_repo: MessageRepository,
    ) -> None:
        self._orchestrator = orchestrator
        self._lead_repo = lead_repo
        self._activity_repo = activity_repo
        self._message_repo = message_repo

    async def get_lead(self, lead_id: str) -> Lead:
        lead = await self._lead_repo.get_by_id(lead_id)
        if lead is None:
            raise LeadNotFoundError(f"Lead {lead_id} not found")
        return lead

    async def get_transcript(self, lead_id: str) -> List[TranscriptEntry]:
        """Return the lead's qualification exchanges in questionnaire order.

        Raises ``LeadNotFoundError`` for an unknown lead.
        """
        await self.get_lead(lead_id)
        transcript: List[TranscriptEntry] = []
        question: Optional[str] = None
        for message in await self._message_repo.list_for_lead(lead_id):
            if message.direction == MessageDirection.ai.value:
                question = message.message
            elif question is not None:
                transcript.append(
                    TranscriptEntry(question=question, answer=message.message)
                )
                question = None
        return transcript

    async def create_and_qualify(
        self,
        tenant_id: str,
        lead_data: LeadCreate,
        answer_provider: AnswerProvider,
        actor_id: Optional[str] = None,
    ) -> QualificationOutcome:
        """Create a lead and store its qualification on the lead row.

        Steps:
        1. Insert the lead (status ``new``)
        2. Run ``qualify_and_route``
        3. Write score, category, assignee and status ``qualified``
        4. Record a ``created`` activity-log entry
        """
        lead_id = _lead_id()
        await self._lead_repo.create(
            id=lead_id,
            tenant_id=tenant_id,
            name=lead_data.name,
            email=lead_data.email,
            phone=lead_data.phone,
            source=lead_data.source,
            lead_metadata=lead_data.metadata,
        )

        outcome = await self._orchestrator.qualify_and_route(
            lead_id, tenant_id, answer_provider
        )

        await self._lead_repo.apply_qualification(
            lead_id,
            score=outcome.score,
            category=outcome.category.value,
            assigned_user_id=outcome.assignee,
        )
        await self._activity_repo.log(
            tenant_id=tenant_id,
            user_id=actor_id,
            entity_type="lead",
            entity_id=lead_id,
            action="created",
            details={
                "name": lead_data.name,
                "score": outcome.score,
                "category": outcome.category.value,
            },
        )

        if outcome.notify:
            logger.info(
                "Lead %s (%s) assigned to %s; notification requested",
                lead_id,
                outcome.category.value,
                outcome.assignee,
            )
        return outcome
