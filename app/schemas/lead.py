"""Lead intake schemas."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator


class LeadCreate(BaseModel):
    """Contact details submitted when a lead is created."""

    name: str = Field(..., min_length=2)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(default=None, max_length=20)
    source: Optional[str] = Field(default=None, max_length=100)
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        stripped = value.strip()
        if len(stripped) < 2:
            raise ValueError("name must be at least 2 characters")
        return stripped
