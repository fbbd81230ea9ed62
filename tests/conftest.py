from typing import Dict, List, Optional
from unittest.mock import AsyncMock

import pytest

from app.schemas.agent import AgentRef
from app.schemas.routing import RoutingRule
from app.schemas.scoring import ScoringRule


@pytest.fixture
def budget_timeline_rules() -> List[ScoringRule]:
    """Two 25%-weighted questions used throughout the qualification examples."""
    return [
        ScoringRule(question="Budget?", weight=25, answers={"A": 20, "B": 60, "C": 100}),
        ScoringRule(question="Timeline?", weight=25, answers={"X": 100, "Y": 70, "Z": 30}),
    ]


@pytest.fixture
def default_policies() -> Dict[str, RoutingRule]:
    """Routing policies every new tenant starts with."""
    return {
        "hot": RoutingRule(
            category="hot", method="skill_based", notify=True, settings={"priority": "high"}
        ),
        "warm": RoutingRule(category="warm", method="round_robin"),
        "cold": RoutingRule(category="cold", method="automation"),
    }


def _mock_repos(
    rules: List[ScoringRule],
    policies: Optional[Dict[str, RoutingRule]] = None,
    agents: Optional[List[AgentRef]] = None,
):
    """Return ``(rule_repo, routing_repo, agent_repo, sink)`` as ``AsyncMock``s."""
    policies = policies or {}

    rule_repo = AsyncMock()
    rule_repo.get_active_rules = AsyncMock(return_value=rules)

    routing_repo = AsyncMock()
    routing_repo.get_routing_rule = AsyncMock(
        side_effect=lambda tenant_id, category: policies.get(category)
    )

    agent_repo = AsyncMock()
    agent_repo.get_eligible_agents = AsyncMock(return_value=agents or [])

    sink = AsyncMock()
    sink.append = AsyncMock()
    return rule_repo, routing_repo, agent_repo, sink


@pytest.fixture
def repos_factory():
    """Factory building mocked collaborators for the orchestrator."""
    return _mock_repos


@pytest.fixture
def mock_redis() -> AsyncMock:
    """Return an ``AsyncMock`` that behaves like ``redis.asyncio.Redis``."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock()
    redis.setex = AsyncMock()
    redis.delete = AsyncMock()
    redis.incr = AsyncMock(return_value=1)
    redis.expire = AsyncMock()
    return redis
