import logging
from typing import Dict, List, Optional, Protocol, Sequence

from app.schemas.agent import AgentRef
from app.schemas.common import LeadCategory, RoutingMethod
from app.schemas.qualification import QualificationOutcome, TranscriptEntry
from app.schemas.routing import RoutingDecision, RoutingRule
from app.schemas.scoring import ScoringRule
from app.services.answer_providers import AnswerProvider
from app.services.lead_routing import LeadRouter, RoundRobinCursorStore
from app.services.lead_scoring import ScoreCalculator, categorize

logger = logging.getLogger(__name__)


class RuleSetRepository(Protocol):
    async def get_active_rules(self, tenant_id: str) -> List[ScoringRule]: ...


class RoutingRepository(Protocol):
    async def get_routing_rule(
        self, tenant_id: str, category: str
    ) -> Optional[RoutingRule]: ...


class AgentRepository(Protocol):
    async def get_eligible_agents(self, tenant_id: str) -> List[AgentRef]: ...


class TranscriptSink(Protocol):
    async def append(self, lead_id: str, question: str, answer: str) -> None: ...


class QualificationOrchestrator:
    """Qualify a new lead against its tenant's questionnaire and route it.

    Collaborators are injected via the constructor; the orchestrator
    keeps no state between calls, so one instance can serve concurrent
    qualifications of different leads.  Tenant configuration is read
    once per call and treated as a read-only snapshot.
    """

    def __init__(
        self,
        rule_repo: RuleSetRepository,
        routing_repo: RoutingRepository,
        agent_repo: AgentRepository,
        transcript_sink: TranscriptSink,
        calculator: Optional[ScoreCalculator] = None,
        router: Optional[LeadRouter] = None,
        cursor_store: Optional[RoundRobinCursorStore] = None,
    ) -> None:
        self._rule_repo = rule_repo
        self._routing_repo = routing_repo
        self._agent_repo = agent_repo
        self._transcript_sink = transcript_sink
        self._calculator = calculator or ScoreCalculator()
        self._router = router or LeadRouter()
        self._cursor_store = cursor_store

    async def qualify_and_route(
        self,
        lead_id: str,
        tenant_id: str,
        answer_provider: AnswerProvider,
    ) -> QualificationOutcome:
        """Score, categorise and route one lead.

        Steps:
        1. Load the tenant's active scoring rules.  None configured →
           ``unqualified`` with score 0; unqualified leads are not routed.
        2. Ask *answer_provider* for one answer per rule, in rule order.
        3. Compute the score (fails fast on an invalid answer).
        4. Record the transcript, then categorise.
        5. Look up the category's routing policy and pick an assignee.

        No retries: any collaborator failure propagates unchanged and
        nothing after the failing step runs.
        """
        try:
            return await self._qualify_and_route(lead_id, tenant_id, answer_provider)
        except Exception:
            logger.exception(
                "Qualification failed for lead %s (tenant %s)", lead_id, tenant_id
            )
            raise

    async def _qualify_and_route(
        self,
        lead_id: str,
        tenant_id: str,
        answer_provider: AnswerProvider,
    ) -> QualificationOutcome:
        rules = await self._rule_repo.get_active_rules(tenant_id)
        if not rules:
            logger.warning(
                "Tenant %s has no active scoring rules; lead %s left unqualified",
                tenant_id,
                lead_id,
            )
            return QualificationOutcome(
                lead_id=lead_id, score=0, category=LeadCategory.unqualified
            )

        answers: Dict[int, str] = {}
        for index, rule in enumerate(rules):
            answers[index] = await answer_provider.select_answer(rule)

        score = self._calculator.compute_score(rules, answers)

        # Written only once every answer is known to be valid
        transcript = await self._record_transcript(lead_id, rules, answers)

        category = categorize(score)
        policy = await self._routing_repo.get_routing_rule(tenant_id, category.value)
        decision = await self._route(tenant_id, category, policy)

        logger.info(
            "Lead %s qualified: score=%d category=%s assignee=%s",
            lead_id,
            score,
            category.value,
            decision.agent_id,
        )
        return QualificationOutcome(
            lead_id=lead_id,
            score=score,
            category=category,
            assignee=decision.agent_id,
            notify=bool(policy is not None and policy.notify and decision.agent_id),
            transcript=transcript,
        )

    async def _record_transcript(
        self,
        lead_id: str,
        rules: Sequence[ScoringRule],
        answers: Dict[int, str],
    ) -> List[TranscriptEntry]:
        transcript: List[TranscriptEntry] = []
        for index, rule in enumerate(rules):
            entry = TranscriptEntry(question=rule.question, answer=answers[index])
            await self._transcript_sink.append(lead_id, entry.question, entry.answer)
            transcript.append(entry)
        return transcript

    async def _route(
        self,
        tenant_id: str,
        category: LeadCategory,
        policy: Optional[RoutingRule],
    ) -> RoutingDecision:
        if policy is None:
            logger.warning(
                "No routing policy for tenant %s category %s; lead left unassigned",
                tenant_id,
                category.value,
            )
            return RoutingDecision()

        # Eligibility is recomputed for every decision
        agents = await self._agent_repo.get_eligible_agents(tenant_id)

        cursor: Optional[int] = None
        if (
            self._cursor_store is not None
            and agents
            and category is not LeadCategory.hot
            and policy.method is RoutingMethod.round_robin
        ):
            cursor = await self._cursor_store.reserve(tenant_id, category.value)

        return self._router.route(policy, agents, cursor=cursor)
