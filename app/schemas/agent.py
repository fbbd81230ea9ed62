from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AgentRef(BaseModel):
    """A sales agent eligible to receive routed leads."""

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    agent_id: str = Field(..., validation_alias="id")
    name: Optional[str] = None
