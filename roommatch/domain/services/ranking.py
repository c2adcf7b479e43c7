from __future__ import annotations

from collections.abc import Iterable, Sequence

from roommatch.domain.models import Candidate, MatchPage, PageRequest, PreferenceRecord, RankedMatch
from roommatch.domain.services.scoring import CompatibilityScorer

DEFAULT_MIN_SCORE = 60


class MatchRanker:
    """Scores a candidate pool against a viewer, then filters, sorts and pages it."""

    def __init__(self, scorer: CompatibilityScorer | None = None) -> None:
        self.scorer = scorer or CompatibilityScorer()

    def score_pool(
        self,
        viewer_id: str,
        viewer_record: PreferenceRecord | None,
        candidates: Iterable[Candidate],
    ) -> list[RankedMatch]:
        """Score every candidate; no filtering or ordering is applied."""
        return [
            RankedMatch(
                candidate=candidate,
                result=self.scorer.score(
                    viewer_record,
                    candidate.preference_record,
                    viewer_id=viewer_id,
                    candidate_id=candidate.id,
                ),
            )
            for candidate in candidates
        ]

    def rank(
        self,
        viewer_id: str,
        viewer_record: PreferenceRecord | None,
        candidates: Iterable[Candidate],
        *,
        min_score: int = DEFAULT_MIN_SCORE,
        page: PageRequest | None = None,
    ) -> MatchPage:
        scored = self.score_pool(viewer_id, viewer_record, candidates)
        return self.paginate(self.filter_and_sort(scored, min_score=min_score), page or PageRequest())

    @staticmethod
    def filter_and_sort(matches: Iterable[RankedMatch], *, min_score: int) -> list[RankedMatch]:
        kept = [match for match in matches if match.result.score >= min_score]
        # Candidate id is the last key so equal score and timestamp still order the same way
        kept.sort(key=lambda match: match.candidate.id)
        kept.sort(key=lambda match: match.candidate.created_at, reverse=True)
        kept.sort(key=lambda match: match.result.score, reverse=True)
        return kept

    @staticmethod
    def paginate(matches: Sequence[RankedMatch], page: PageRequest) -> MatchPage:
        return MatchPage(
            items=list(matches[page.offset : page.offset + page.size]),
            page=page.page,
            size=page.size,
            total_count=len(matches),
        )
