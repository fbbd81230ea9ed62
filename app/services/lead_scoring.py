import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Mapping, Sequence

from app.core.constants import HOT_SCORE_THRESHOLD, WARM_SCORE_THRESHOLD
from app.core.exceptions import InvalidAnswerError
from app.schemas.common import LeadCategory
from app.schemas.scoring import ScoringRule

logger = logging.getLogger(__name__)

_HUNDRED = Decimal(100)


class ScoreCalculator:
    """Turn one answer per question into a weighted lead score.

    Each rule contributes ``points * weight / 100``.  Contributions are
    summed exactly (``Decimal``) and the total is rounded half-up once,
    at the end.  Rounding each contribution before summing drifts, e.g.
    two contributions of 17.5 give 35 summed-then-rounded but 36 when
    rounded first.
    """

    def compute_score(
        self,
        rules: Sequence[ScoringRule],
        answers: Mapping[int, str],
    ) -> int:
        """Return the rounded total for *answers* keyed by rule index.

        An empty rule set scores 0.  Raises ``InvalidAnswerError`` on the
        first rule whose selection is missing or not in its answer table.
        """
        total = sum(self.contributions(rules, answers), Decimal(0))
        return self.round_score(total)

    def contributions(
        self,
        rules: Sequence[ScoringRule],
        answers: Mapping[int, str],
    ) -> List[Decimal]:
        """Return the unrounded per-rule contributions, in rule order."""
        contributions: List[Decimal] = []
        for index, rule in enumerate(rules):
            points = self._point_value(rule, index, answers)
            contributions.append(Decimal(points) * Decimal(rule.weight) / _HUNDRED)
        return contributions

    @staticmethod
    def round_score(total: Decimal) -> int:
        """Round half-up to the nearest integer (17.5 -> 18, never banker's)."""
        return int(total.quantize(Decimal(1), rounding=ROUND_HALF_UP))

    @staticmethod
    def _point_value(rule: ScoringRule, index: int, answers: Mapping[int, str]) -> int:
        if index not in answers:
            raise InvalidAnswerError(
                f"No answer selected for question {index + 1} ({rule.question!r})",
                rule_index=index,
            )
        answer = answers[index]
        try:
            return rule.answers[answer]
        except (KeyError, TypeError):
            raise InvalidAnswerError(
                f"{answer!r} is not a valid answer to {rule.question!r}; "
                f"expected one of {rule.choices}",
                rule_index=index,
                answer=answer,
            ) from None


def categorize(score: int) -> LeadCategory:
    """Map a score to hot / warm / cold using inclusive lower bounds.

    Never returns ``unqualified``; that category is reserved for tenants
    with no scoring rules and is assigned by the orchestrator.
    """
    if score >= HOT_SCORE_THRESHOLD:
        return LeadCategory.hot
    if score >= WARM_SCORE_THRESHOLD:
        return LeadCategory.warm
    return LeadCategory.cold
