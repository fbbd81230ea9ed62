"""Repository layer – all database access goes through here.

Repositories encapsulate SQLAlchemy queries so that the service layer
only contains qualification and routing logic.
"""

from app.repositories.lead_repository import LeadRepository
from app.repositories.agent_repository import AgentRepository
from app.repositories.scoring_rule_repository import ScoringRuleRepository
from app.repositories.routing_rule_repository import RoutingRuleRepository
from app.repositories.message_repository import MessageRepository
from app.repositories.activity_log_repository import ActivityLogRepository

__all__ = [
    "LeadRepository",
    "AgentRepository",
    "ScoringRuleRepository",
    "RoutingRuleRepository",
    "MessageRepository",
    "ActivityLogRepository",
]
