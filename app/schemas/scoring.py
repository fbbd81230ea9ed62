"""Scoring-rule schemas.

Answer tables arrive as tenant-supplied JSON.  They are validated here,
when configuration is loaded or replaced, so the score calculator only
ever sees well-formed rules.
"""

from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.core.exceptions import InvalidScoringRuleError

_MIN_POINTS = 0
_MAX_POINTS = 100


class ScoringRule(BaseModel):
    """One weighted question with its enumerated answers.

    ``weight`` is the percentage this question contributes; a choice
    worth ``p`` points adds ``p * weight / 100`` to the total.  Weights
    across a rule set are not required to sum to 100.
    """

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    rule_id: Optional[int] = Field(default=None, validation_alias="id")
    question: str = Field(..., min_length=1)
    weight: int = Field(..., gt=0, strict=True)
    answers: Dict[str, int] = Field(..., min_length=1)

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question must not be blank")
        return value

    @field_validator("answers", mode="before")
    @classmethod
    def check_answer_table(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            raise ValueError("answers must be a mapping of label to points")
        for label, points in value.items():
            if not isinstance(label, str) or not label.strip():
                raise ValueError("answer labels must be non-empty strings")
            # bool is an int subclass; reject it explicitly
            if isinstance(points, bool) or not isinstance(points, int):
                raise ValueError(f"points for {label!r} must be an integer")
            if not _MIN_POINTS <= points <= _MAX_POINTS:
                raise ValueError(
                    f"points for {label!r} must be between "
                    f"{_MIN_POINTS} and {_MAX_POINTS}, got {points}"
                )
        return value

    @property
    def choices(self) -> List[str]:
        """Answer labels in table order."""
        return list(self.answers)


def load_scoring_rules(raw_rules: Iterable[Any]) -> List[ScoringRule]:
    """Validate *raw_rules* (dicts or ORM rows) into ``ScoringRule`` objects.

    Raises ``InvalidScoringRuleError`` naming the first offending rule;
    nothing is returned for a partially valid set.
    """
    rules: List[ScoringRule] = []
    for index, raw in enumerate(raw_rules):
        try:
            rules.append(ScoringRule.model_validate(raw))
        except ValidationError as exc:
            messages = "; ".join(err["msg"] for err in exc.errors())
            raise InvalidScoringRuleError(
                f"Scoring rule #{index + 1} is invalid: {messages}"
            ) from exc
    return rules
