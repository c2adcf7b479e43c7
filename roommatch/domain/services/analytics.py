from __future__ import annotations

from collections.abc import Iterable, Sequence
from decimal import Decimal

from roommatch.domain.models import Band, CompatibilityResult, FactorAverage, MatchDistribution
from roommatch.domain.services.scoring import round_half_up, to_decimal
from roommatch.domain.weights import DEFAULT_FACTOR_TABLE, WeightedFactor

TOP_FACTOR_LIMIT = 3


def summarize_matches(
    results: Iterable[CompatibilityResult],
    factors: Sequence[WeightedFactor] = DEFAULT_FACTOR_TABLE,
) -> MatchDistribution:
    """Summarize a scored set into bands, an average score and the strongest factors.

    Callers decide whether ``results`` is the whole pool or the thresholded set.
    """
    results = list(results)
    band_counts = {band: 0 for band in Band}
    for result in results:
        band_counts[result.band] += 1

    average_score = (
        int(round_half_up(Decimal(sum(result.score for result in results)) / len(results)))
        if results
        else 0
    )

    averages: list[FactorAverage] = []
    for factor in factors:
        values = [
            result.contributions[factor.factor_id]
            for result in results
            if factor.factor_id in result.contributions
        ]
        percent = (
            float(round_half_up(100 * sum(map(to_decimal, values)) / len(values), "0.1"))
            if values
            else 0.0
        )
        averages.append(
            FactorAverage(factor_id=factor.factor_id, average_contribution_percent=percent)
        )
    # sorted() is stable, so ties keep table order
    top_factors = sorted(averages, key=lambda item: item.average_contribution_percent, reverse=True)

    return MatchDistribution(
        total_count=len(results),
        average_score=average_score,
        band_counts=band_counts,
        top_factors=top_factors[:TOP_FACTOR_LIMIT],
    )
