import random

import pytest

from app.core.exceptions import InvalidAnswerError
from app.schemas.scoring import ScoringRule
from app.services.answer_providers import RandomAnswerProvider, ScriptedAnswerProvider

RULE = ScoringRule(
    question="How urgent is this requirement?",
    weight=20,
    answers={"Critical": 100, "Important": 60, "Nice to have": 30},
)


class TestRandomAnswerProvider:
    @pytest.mark.asyncio
    async def test_only_returns_valid_labels(self):
        provider = RandomAnswerProvider(rng=random.Random(5))
        picks = {await provider.select_answer(RULE) for _ in range(50)}
        assert picks <= set(RULE.answers)
        assert len(picks) > 1

    @pytest.mark.asyncio
    async def test_seeded_rng_is_reproducible(self):
        first = await RandomAnswerProvider(random.Random(9)).select_answer(RULE)
        second = await RandomAnswerProvider(random.Random(9)).select_answer(RULE)
        assert first == second


class TestScriptedAnswerProvider:
    @pytest.mark.asyncio
    async def test_returns_recorded_answer(self):
        provider = ScriptedAnswerProvider({RULE.question: "Important"})
        assert await provider.select_answer(RULE) == "Important"

    @pytest.mark.asyncio
    async def test_missing_question_raises(self):
        provider = ScriptedAnswerProvider({})
        with pytest.raises(InvalidAnswerError):
            await provider.select_answer(RULE)

    @pytest.mark.asyncio
    async def test_unknown_label_passed_through(self):
        """Validation belongs to the score calculator, not the provider."""
        provider = ScriptedAnswerProvider({RULE.question: "Someday"})
        assert await provider.select_answer(RULE) == "Someday"
