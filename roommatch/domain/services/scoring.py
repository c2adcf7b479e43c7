"""
Compatibility scoring between two preference records.

The scorer is pure: it holds only its configuration (factor table and
questionnaire) and can be shared freely across requests and threads.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from roommatch.domain.models import Band, CompatibilityResult, PreferenceRecord
from roommatch.domain.questionnaire import Answer, AnswerType, Questionnaire
from roommatch.domain.reference_data import QUESTIONNAIRE
from roommatch.domain.weights import DEFAULT_FACTOR_TABLE, WeightedFactor

NEUTRAL_SCORE = 50
SCALE_SPAN = 4
DEAL_BREAKER_CONFLICT = 0.3
CATEGORICAL_MISMATCH = 0.5


def to_decimal(value: float) -> Decimal:
    """Exact decimal for a float as written (0.15 stays 0.15)."""
    return Decimal(repr(value))


def round_half_up(value: float | Decimal, exponent: str = "1") -> Decimal:
    """Round half away from zero to ``exponent`` ("1" for integers, "0.1" for tenths)."""
    if not isinstance(value, Decimal):
        value = to_decimal(value)
    return value.quantize(Decimal(exponent), rounding=ROUND_HALF_UP)


def factor_compatibility(answer_type: AnswerType | None, left: Answer, right: Answer) -> float:
    """Per-factor compatibility in [0, 1].

    ``answer_type`` is ``None`` for factors the questionnaire does not know;
    their kind is inferred from the answer values.
    """
    if answer_type is None:
        if isinstance(left, frozenset) and isinstance(right, frozenset):
            answer_type = AnswerType.MULTI_SELECT
        elif _is_number(left) and _is_number(right):
            answer_type = AnswerType.SCALE
        else:
            answer_type = AnswerType.SINGLE_CHOICE

    if answer_type == AnswerType.MULTI_SELECT:
        # Any shared item is a conflict; the overlap size does not matter
        conflict = bool(frozenset(left) & frozenset(right))
        return DEAL_BREAKER_CONFLICT if conflict else 1.0
    if answer_type == AnswerType.SCALE:
        return max(0.0, 1 - abs(left - right) / SCALE_SPAN)
    return 1.0 if left == right else CATEGORICAL_MISMATCH


class CompatibilityScorer:
    """Weighted multi-factor comparison of two preference records."""

    def __init__(
        self,
        factors: Sequence[WeightedFactor] = DEFAULT_FACTOR_TABLE,
        questionnaire: Questionnaire = QUESTIONNAIRE,
    ) -> None:
        self.factors = tuple(factors)
        self.questionnaire = questionnaire

    def score(
        self,
        viewer: PreferenceRecord | None,
        candidate: PreferenceRecord | None,
        *,
        viewer_id: str | None = None,
        candidate_id: str | None = None,
    ) -> CompatibilityResult:
        """Compare two records; an absent record behaves like one with no answers."""
        viewer_answers = viewer.answers if viewer is not None else {}
        candidate_answers = candidate.answers if candidate is not None else {}

        # Summed as decimals so an exact .5 is not lost to binary float error
        weighted_sum = Decimal(0)
        weighted_total = Decimal(0)
        contributions: dict[str, float] = {}

        for factor in self.factors:
            if factor.factor_id not in viewer_answers or factor.factor_id not in candidate_answers:
                continue
            question = self.questionnaire.get(factor.factor_id)
            compatibility = factor_compatibility(
                question.answer_type if question else None,
                viewer_answers[factor.factor_id],
                candidate_answers[factor.factor_id],
            )
            contributions[factor.factor_id] = compatibility
            weight = to_decimal(factor.weight)
            weighted_sum += to_decimal(compatibility) * weight
            weighted_total += weight

        if weighted_total > 0:
            score = int(round_half_up(100 * weighted_sum / weighted_total))
        else:
            score = NEUTRAL_SCORE
        score = min(100, max(0, score))

        return CompatibilityResult(
            viewer_id=viewer_id if viewer_id is not None else _owner(viewer),
            candidate_id=candidate_id if candidate_id is not None else _owner(candidate),
            score=score,
            band=Band.for_score(score),
            contributions=contributions,
        )


def _owner(record: PreferenceRecord | None) -> str | None:
    return record.owner_id if record is not None else None


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)
