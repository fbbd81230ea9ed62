from enum import Enum


class LeadCategory(str, Enum):
    hot = "hot"
    warm = "warm"
    cold = "cold"
    unqualified = "unqualified"


class RoutingMethod(str, Enum):
    skill_based = "skill_based"
    round_robin = "round_robin"
    automation = "automation"


class MessageDirection(str, Enum):
    ai = "ai"
    lead = "lead"
