from typing import List, Optional

from pydantic import BaseModel, Field

from app.schemas.common import LeadCategory


class TranscriptEntry(BaseModel):
    """One question/answer exchange, recorded in rule order."""

    question: str
    answer: str


class QualificationResult(BaseModel):
    score: int
    category: LeadCategory


class QualificationOutcome(BaseModel):
    """Everything ``qualify_and_route`` produces for one lead."""

    lead_id: str
    score: int
    category: LeadCategory
    assignee: Optional[str] = None
    notify: bool = False
    transcript: List[TranscriptEntry] = Field(default_factory=list)

    @property
    def result(self) -> QualificationResult:
        return QualificationResult(score=self.score, category=self.category)
