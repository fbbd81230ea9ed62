import random
from unittest.mock import AsyncMock, call

import pytest

from app.core.cache import CacheService
from app.core.exceptions import InvalidAnswerError, InvalidScoringRuleError
from app.schemas.agent import AgentRef
from app.schemas.common import LeadCategory
from app.schemas.routing import RoutingRule
from app.schemas.scoring import ScoringRule
from app.services.answer_providers import RandomAnswerProvider, ScriptedAnswerProvider
from app.services.lead_routing import LeadRouter, RoundRobinCursorStore
from app.services.qualification import QualificationOrchestrator

AGENTS = [AgentRef(agent_id="agent_senior"), AgentRef(agent_id="agent_junior")]


def _orchestrator(rule_repo, routing_repo, agent_repo, sink, **kwargs):
    return QualificationOrchestrator(
        rule_repo=rule_repo,
        routing_repo=routing_repo,
        agent_repo=agent_repo,
        transcript_sink=sink,
        **kwargs,
    )


class TestUnconfiguredTenant:
    """A tenant with no scoring rules yields unqualified, unrouted leads."""

    @pytest.mark.asyncio
    async def test_empty_rule_set_short_circuits(self, repos_factory, default_policies):
        rule_repo, routing_repo, agent_repo, sink = repos_factory(
            [], default_policies, AGENTS
        )
        provider = AsyncMock()

        outcome = await _orchestrator(
            rule_repo, routing_repo, agent_repo, sink
        ).qualify_and_route("lead_1", "biz_1", provider)

        assert outcome.score == 0
        assert outcome.category is LeadCategory.unqualified
        assert outcome.assignee is None
        assert outcome.notify is False
        assert outcome.transcript == []
        provider.select_answer.assert_not_awaited()
        routing_repo.get_routing_rule.assert_not_awaited()
        agent_repo.get_eligible_agents.assert_not_awaited()
        sink.append.assert_not_awaited()


class TestQualifyAndRoute:
    """End-to-end qualification with mocked collaborators."""

    @pytest.mark.asyncio
    async def test_warm_lead_example(
        self, repos_factory, budget_timeline_rules, default_policies
    ):
        """Answers B and X: 15 + 25 = 40 -> warm, routed round-robin."""
        repos = repos_factory(budget_timeline_rules, default_policies, AGENTS)
        provider = ScriptedAnswerProvider({"Budget?": "B", "Timeline?": "X"})

        outcome = await _orchestrator(
            *repos, router=LeadRouter(rng=random.Random(1))
        ).qualify_and_route("lead_1", "biz_1", provider)

        assert outcome.score == 40
        assert outcome.category is LeadCategory.warm
        assert outcome.assignee in {"agent_senior", "agent_junior"}
        assert outcome.notify is False
        repos[1].get_routing_rule.assert_awaited_once_with("biz_1", "warm")
        assert outcome.result.score == 40
        assert outcome.result.category is LeadCategory.warm

    @pytest.mark.asyncio
    async def test_hot_lead_goes_to_senior_agent_and_notifies(
        self, repos_factory, default_policies
    ):
        rules = [
            ScoringRule(question="Decision maker?", weight=50, answers={"Yes": 100}),
            ScoringRule(question="Urgency?", weight=50, answers={"Critical": 100}),
        ]
        repos = repos_factory(rules, default_policies, AGENTS)
        provider = ScriptedAnswerProvider({"Decision maker?": "Yes", "Urgency?": "Critical"})

        outcome = await _orchestrator(*repos).qualify_and_route("lead_2", "biz_1", provider)

        assert outcome.score == 100
        assert outcome.category is LeadCategory.hot
        assert outcome.assignee == "agent_senior"
        assert outcome.notify is True

    @pytest.mark.asyncio
    async def test_hot_with_round_robin_policy_is_deterministic(self, repos_factory):
        rules = [ScoringRule(question="Fit?", weight=90, answers={"Great": 100})]
        policies = {"hot": RoutingRule(category="hot", method="round_robin")}

        assignees = set()
        for seed in range(10):
            repos = repos_factory(rules, policies, AGENTS)
            outcome = await _orchestrator(
                *repos, router=LeadRouter(rng=random.Random(seed))
            ).qualify_and_route("lead_3", "biz_1", ScriptedAnswerProvider({"Fit?": "Great"}))
            assignees.add(outcome.assignee)

        assert assignees == {"agent_senior"}

    @pytest.mark.asyncio
    async def test_cold_automation_leaves_unassigned(
        self, repos_factory, budget_timeline_rules, default_policies
    ):
        repos = repos_factory(budget_timeline_rules, default_policies, AGENTS)
        provider = ScriptedAnswerProvider({"Budget?": "A", "Timeline?": "Z"})

        outcome = await _orchestrator(*repos).qualify_and_route("lead_4", "biz_1", provider)

        # 5 + 7.5 = 12.5 -> 13
        assert outcome.score == 13
        assert outcome.category is LeadCategory.cold
        assert outcome.assignee is None

    @pytest.mark.asyncio
    async def test_absent_policy_leaves_unassigned(
        self, repos_factory, budget_timeline_rules
    ):
        rule_repo, routing_repo, agent_repo, sink = repos_factory(
            budget_timeline_rules, {}, AGENTS
        )
        provider = ScriptedAnswerProvider({"Budget?": "C", "Timeline?": "X"})

        outcome = await _orchestrator(
            rule_repo, routing_repo, agent_repo, sink
        ).qualify_and_route("lead_5", "biz_1", provider)

        assert outcome.category is LeadCategory.warm
        assert outcome.assignee is None
        agent_repo.get_eligible_agents.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_agent_pool_leaves_unassigned(
        self, repos_factory, budget_timeline_rules, default_policies
    ):
        repos = repos_factory(budget_timeline_rules, default_policies, [])
        provider = ScriptedAnswerProvider({"Budget?": "C", "Timeline?": "X"})

        outcome = await _orchestrator(*repos).qualify_and_route("lead_6", "biz_1", provider)

        assert outcome.assignee is None

    @pytest.mark.asyncio
    async def test_random_provider_always_produces_valid_qualification(
        self, repos_factory, budget_timeline_rules, default_policies
    ):
        repos = repos_factory(budget_timeline_rules, default_policies, AGENTS)
        provider = RandomAnswerProvider(rng=random.Random(11))

        outcome = await _orchestrator(*repos).qualify_and_route("lead_7", "biz_1", provider)

        assert 0 <= outcome.score <= 50
        assert outcome.category in {LeadCategory.warm, LeadCategory.cold}


class TestTranscript:
    """One exchange per rule, in rule order."""

    @pytest.mark.asyncio
    async def test_transcript_matches_rule_order(self, repos_factory, default_policies):
        rules = [
            ScoringRule(question="What is your budget range?", weight=25, answers={"Above ₹2L": 100}),
            ScoringRule(question="What is your timeline?", weight=25, answers={"Immediately": 100}),
            ScoringRule(question="Are you the decision maker?", weight=30, answers={"Yes": 100}),
        ]
        rule_repo, routing_repo, agent_repo, sink = repos_factory(
            rules, default_policies, AGENTS
        )

        outcome = await _orchestrator(
            rule_repo, routing_repo, agent_repo, sink
        ).qualify_and_route("lead_8", "biz_1", RandomAnswerProvider())

        assert len(outcome.transcript) == len(rules)
        assert [e.question for e in outcome.transcript] == [r.question for r in rules]
        assert [e.answer for e in outcome.transcript] == ["Above ₹2L", "Immediately", "Yes"]
        assert sink.append.await_args_list == [
            call("lead_8", "What is your budget range?", "Above ₹2L"),
            call("lead_8", "What is your timeline?", "Immediately"),
            call("lead_8", "Are you the decision maker?", "Yes"),
        ]


class TestFailFast:
    """Failures abort the qualification and propagate unchanged."""

    @pytest.mark.asyncio
    async def test_invalid_answer_aborts_without_transcript(
        self, repos_factory, budget_timeline_rules, default_policies
    ):
        rule_repo, routing_repo, agent_repo, sink = repos_factory(
            budget_timeline_rules, default_policies, AGENTS
        )
        provider = AsyncMock()
        provider.select_answer = AsyncMock(side_effect=["B", "not-an-answer"])

        with pytest.raises(InvalidAnswerError):
            await _orchestrator(
                rule_repo, routing_repo, agent_repo, sink
            ).qualify_and_route("lead_9", "biz_1", provider)

        sink.append.assert_not_awaited()
        routing_repo.get_routing_rule.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rule_repository_failure_propagates(self, repos_factory):
        rule_repo, routing_repo, agent_repo, sink = repos_factory([])
        rule_repo.get_active_rules = AsyncMock(side_effect=ConnectionError("db down"))

        with pytest.raises(ConnectionError):
            await _orchestrator(
                rule_repo, routing_repo, agent_repo, sink
            ).qualify_and_route("lead_10", "biz_1", RandomAnswerProvider())

    @pytest.mark.asyncio
    async def test_malformed_stored_rules_propagate(self, repos_factory):
        rule_repo, routing_repo, agent_repo, sink = repos_factory([])
        rule_repo.get_active_rules = AsyncMock(
            side_effect=InvalidScoringRuleError("Scoring rule #1 is invalid")
        )

        with pytest.raises(InvalidScoringRuleError):
            await _orchestrator(
                rule_repo, routing_repo, agent_repo, sink
            ).qualify_and_route("lead_11", "biz_1", RandomAnswerProvider())

    @pytest.mark.asyncio
    async def test_provider_failure_stops_remaining_rules(
        self, repos_factory, budget_timeline_rules, default_policies
    ):
        repos = repos_factory(budget_timeline_rules, default_policies, AGENTS)
        provider = AsyncMock()
        provider.select_answer = AsyncMock(side_effect=TimeoutError("no reply"))

        with pytest.raises(TimeoutError):
            await _orchestrator(*repos).qualify_and_route("lead_12", "biz_1", provider)

        provider.select_answer.assert_awaited_once()


class TestRotatingRoundRobin:
    """With a cursor store, warm leads rotate through the agent pool."""

    @pytest.mark.asyncio
    async def test_cursor_store_drives_rotation(
        self, repos_factory, budget_timeline_rules, default_policies, mock_redis
    ):
        mock_redis.incr = AsyncMock(side_effect=[1, 2, 3])
        cursor_store = RoundRobinCursorStore(CacheService(redis_client=mock_redis))
        agents = AGENTS + [AgentRef(agent_id="agent_new")]
        provider = ScriptedAnswerProvider({"Budget?": "C", "Timeline?": "X"})

        assignees = []
        for i in range(3):
            repos = repos_factory(budget_timeline_rules, default_policies, agents)
            outcome = await _orchestrator(
                *repos, cursor_store=cursor_store
            ).qualify_and_route(f"lead_rr_{i}", "biz_1", provider)
            assignees.append(outcome.assignee)

        assert assignees == ["agent_senior", "agent_junior", "agent_new"]

    @pytest.mark.asyncio
    async def test_hot_leads_do_not_consume_cursor(
        self, repos_factory, default_policies, mock_redis
    ):
        cursor_store = RoundRobinCursorStore(CacheService(redis_client=mock_redis))
        rules = [ScoringRule(question="Fit?", weight=100, answers={"Great": 100})]
        repos = repos_factory(rules, default_policies, AGENTS)

        outcome = await _orchestrator(*repos, cursor_store=cursor_store).qualify_and_route(
            "lead_hot", "biz_1", ScriptedAnswerProvider({"Fit?": "Great"})
        )

        assert outcome.assignee == "agent_senior"
        mock_redis.incr.assert_not_awaited()
