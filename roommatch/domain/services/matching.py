"""
Matching service: ties the preference store and candidate source to the
ranker and the aggregator.

Fetch failures are reported as an ``unavailable`` outcome so callers can
tell them apart from a pool that legitimately produced no matches. A request
superseded by a newer one from the same viewer while its candidate fetch was
in flight resolves as ``superseded`` and its late result is dropped.
"""

from __future__ import annotations

import enum
import itertools
import time
from dataclasses import dataclass

import structlog
from roommatch.domain.models import (
    Candidate,
    CompatibilityResult,
    MatchDistribution,
    MatchPage,
    PageRequest,
    PreferenceRecord,
)
from roommatch.domain.repositories import (
    CandidateSource,
    CandidateSourceError,
    PreferenceStore,
    PreferenceStoreError,
)
from roommatch.domain.services.analytics import summarize_matches
from roommatch.domain.services.ranking import DEFAULT_MIN_SCORE, MatchRanker

logger = structlog.get_logger()


class MatchStatus(str, enum.Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"
    SUPERSEDED = "superseded"


@dataclass(slots=True)
class MatchQueryResult:
    status: MatchStatus
    page: MatchPage | None = None
    viewer_has_record: bool = False


@dataclass(slots=True)
class AnalyticsQueryResult:
    status: MatchStatus
    distribution: MatchDistribution | None = None


class RequestGenerations:
    """Monotonic per-viewer request tokens.

    ``begin`` issues a token; ``is_current`` is true only while no newer
    token has been issued for the same viewer. ``finish`` forgets the viewer
    once its latest request is done, so only in-flight viewers are tracked.
    """

    def __init__(self) -> None:
        self._counter = itertools.count(1)
        self._latest: dict[str, int] = {}

    def begin(self, key: str) -> int:
        token = next(self._counter)
        self._latest[key] = token
        return token

    def is_current(self, key: str, token: int) -> bool:
        return self._latest.get(key) == token

    def finish(self, key: str, token: int) -> None:
        # A newer request still in flight keeps its entry
        if self._latest.get(key) == token:
            del self._latest[key]

    def __len__(self) -> int:
        return len(self._latest)


class MatchingService:
    def __init__(
        self,
        store: PreferenceStore,
        candidates: CandidateSource,
        *,
        ranker: MatchRanker | None = None,
        generations: RequestGenerations | None = None,
    ) -> None:
        self.store = store
        self.candidates = candidates
        self.ranker = ranker or MatchRanker()
        self.generations = generations or RequestGenerations()

    async def find_matches(
        self,
        viewer_id: str,
        *,
        min_score: int = DEFAULT_MIN_SCORE,
        page: PageRequest | None = None,
    ) -> MatchQueryResult:
        """Return one ranked page of candidates for the viewer."""
        start_time = time.time()
        token = self.generations.begin(viewer_id)
        try:
            return await self._rank_for(viewer_id, token, start_time, min_score, page)
        finally:
            self.generations.finish(viewer_id, token)

    async def _rank_for(
        self,
        viewer_id: str,
        token: int,
        start_time: float,
        min_score: int,
        page: PageRequest | None,
    ) -> MatchQueryResult:
        try:
            viewer_record, pool = await self._load(viewer_id)
        except (CandidateSourceError, PreferenceStoreError) as exc:
            await logger.awarning(
                "candidate_pool_unavailable", viewer_id=viewer_id, error=str(exc)
            )
            return MatchQueryResult(status=MatchStatus.UNAVAILABLE)

        if not self.generations.is_current(viewer_id, token):
            await logger.ainfo("match_request_superseded", viewer_id=viewer_id, token=token)
            return MatchQueryResult(status=MatchStatus.SUPERSEDED)

        match_page = self.ranker.rank(
            viewer_id, viewer_record, pool, min_score=min_score, page=page
        )

        await logger.ainfo(
            "matches_ranked",
            viewer_id=viewer_id,
            pool_size=len(pool),
            matched=match_page.total_count,
            page=match_page.page,
            returned=len(match_page.items),
            min_score=min_score,
            duration_ms=int((time.time() - start_time) * 1000),
        )
        return MatchQueryResult(
            status=MatchStatus.OK,
            page=match_page,
            viewer_has_record=viewer_record is not None,
        )

    async def match_analytics(
        self,
        viewer_id: str,
        *,
        min_score: int | None = None,
    ) -> AnalyticsQueryResult:
        """Summarize the viewer's pool; ``min_score`` restricts it to the thresholded set."""
        try:
            viewer_record, pool = await self._load(viewer_id)
        except (CandidateSourceError, PreferenceStoreError) as exc:
            await logger.awarning(
                "candidate_pool_unavailable", viewer_id=viewer_id, error=str(exc)
            )
            return AnalyticsQueryResult(status=MatchStatus.UNAVAILABLE)

        matches = self.ranker.score_pool(viewer_id, viewer_record, pool)
        if min_score is not None:
            matches = self.ranker.filter_and_sort(matches, min_score=min_score)
        distribution = summarize_matches(
            (match.result for match in matches), self.ranker.scorer.factors
        )

        await logger.ainfo(
            "match_analytics_computed",
            viewer_id=viewer_id,
            total=distribution.total_count,
            average_score=distribution.average_score,
        )
        return AnalyticsQueryResult(status=MatchStatus.OK, distribution=distribution)

    async def compare(self, viewer_id: str, other_id: str) -> CompatibilityResult:
        """Score the viewer against one other user; missing records score neutral."""
        viewer_record = await self.store.get_preference_record(viewer_id)
        other_record = await self.store.get_preference_record(other_id)
        return self.ranker.scorer.score(
            viewer_record, other_record, viewer_id=viewer_id, candidate_id=other_id
        )

    async def _load(self, viewer_id: str) -> tuple[PreferenceRecord | None, list[Candidate]]:
        viewer_record = await self.store.get_preference_record(viewer_id)
        pool = await self.candidates.list_candidates(viewer_id)
        return viewer_record, pool
