"""Pydantic schemas package – re-exports for convenience."""

from app.schemas.common import (
    LeadCategory as LeadCategory,
    RoutingMethod as RoutingMethod,
    MessageDirection as MessageDirection,
)
from app.schemas.scoring import (
    ScoringRule as ScoringRule,
    load_scoring_rules as load_scoring_rules,
)
from app.schemas.routing import (
    RoutingRule as RoutingRule,
    RoutingDecision as RoutingDecision,
)
from app.schemas.agent import AgentRef as AgentRef
from app.schemas.qualification import (
    TranscriptEntry as TranscriptEntry,
    QualificationResult as QualificationResult,
    QualificationOutcome as QualificationOutcome,
)
from app.schemas.lead import LeadCreate as LeadCreate
