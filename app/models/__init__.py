from app.models.base import Base
from app.models.tenant import Tenant
from app.models.user import User
from app.models.lead import Lead
from app.models.scoring_rule import ScoringRuleRecord
from app.models.routing_rule import RoutingRuleRecord
from app.models.message import Message
from app.models.activity_log import ActivityLog

__all__ = [
    "Base",
    "Tenant",
    "User",
    "Lead",
    "ScoringRuleRecord",
    "RoutingRuleRecord",
    "Message",
    "ActivityLog",
]
