from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass

from roommatch.domain.questionnaire import Questionnaire
from roommatch.domain.reference_data import DEFAULT_FACTOR_WEIGHTS, QUESTIONNAIRE

WEIGHT_SUM_TOLERANCE = 1e-6


class WeightTableError(ValueError):
    """Raised when a weighted factor table is malformed."""


@dataclass(frozen=True, slots=True)
class WeightedFactor:
    factor_id: str
    weight: float


def build_factor_table(
    weights: Mapping[str, float] | None = None,
    questionnaire: Questionnaire = QUESTIONNAIRE,
) -> tuple[WeightedFactor, ...]:
    """Build a validated factor table, falling back to the default weights.

    Table order follows the mapping's insertion order and is the order the
    aggregator uses to break ties.
    """
    weights = DEFAULT_FACTOR_WEIGHTS if weights is None else weights
    if not weights:
        raise WeightTableError("Factor table must contain at least one factor")

    table: list[WeightedFactor] = []
    for factor_id, weight in weights.items():
        if factor_id not in questionnaire:
            raise WeightTableError(f"Factor {factor_id!r} does not match any question")
        if weight <= 0:
            raise WeightTableError(f"Factor {factor_id!r} must have a positive weight")
        table.append(WeightedFactor(factor_id=factor_id, weight=float(weight)))

    total = math.fsum(factor.weight for factor in table)
    if abs(total - 1.0) > WEIGHT_SUM_TOLERANCE:
        raise WeightTableError(f"Factor weights must sum to 1.0 (got {total:.6f})")
    return tuple(table)


DEFAULT_FACTOR_TABLE = build_factor_table()
