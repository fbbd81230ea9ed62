from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.schemas.common import LeadCategory, RoutingMethod


class RoutingRule(BaseModel):
    """Per-tenant assignment policy for one lead category."""

    model_config = ConfigDict(from_attributes=True)

    category: LeadCategory
    method: RoutingMethod
    notify: bool = False
    settings: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("category")
    @classmethod
    def category_is_routable(cls, value: LeadCategory) -> LeadCategory:
        if value is LeadCategory.unqualified:
            raise ValueError("unqualified leads cannot have a routing policy")
        return value

    @field_validator("settings", mode="before")
    @classmethod
    def default_settings(cls, value: Any) -> Any:
        return {} if value is None else value


class RoutingDecision(BaseModel):
    """Router output: the chosen agent plus the cursor to use next time.

    ``cursor`` is only set when the caller supplied one for a
    round-robin policy.
    """

    agent_id: Optional[str] = None
    cursor: Optional[int] = None
