"""Answer sources for the qualification questionnaire.

The orchestrator asks an ``AnswerProvider`` for one answer label per
scoring rule.  A conversational agent can be plugged in here without
touching scoring or routing.
"""

import random
from typing import Mapping, Optional, Protocol

from app.core.exceptions import InvalidAnswerError
from app.schemas.scoring import ScoringRule


class AnswerProvider(Protocol):
    async def select_answer(self, rule: ScoringRule) -> str:
        """Return the label the lead chose for *rule*."""
        ...


class RandomAnswerProvider:
    """Simulate a lead by choosing a uniformly random valid answer."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()

    async def select_answer(self, rule: ScoringRule) -> str:
        return self._rng.choice(rule.choices)


class ScriptedAnswerProvider:
    """Replay answers captured elsewhere (web form, import), keyed by question.

    The labels are passed through unchecked; an unknown label surfaces
    as ``InvalidAnswerError`` from the score calculator.
    """

    def __init__(self, answers: Mapping[str, str]) -> None:
        self._answers = dict(answers)

    async def select_answer(self, rule: ScoringRule) -> str:
        try:
            return self._answers[rule.question]
        except KeyError:
            raise InvalidAnswerError(
                f"No answer recorded for {rule.question!r}"
            ) from None
