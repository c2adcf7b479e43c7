from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest
from roommatch.domain.models import Band, PageRequest
from roommatch.domain.repositories import CandidateSourceError, PreferenceStoreError
from roommatch.domain.services.matching import MatchingService, MatchStatus, RequestGenerations
from tests.utils import FULL_ANSWERS, make_candidate, make_record


def build_service(*, viewer_answers=FULL_ANSWERS, candidates=None) -> MatchingService:
    store = AsyncMock()
    store.get_preference_record.return_value = (
        make_record("viewer", viewer_answers) if viewer_answers is not None else None
    )
    source = AsyncMock()
    source.list_candidates.return_value = candidates if candidates is not None else []
    return MatchingService(store, source)


def pool():
    return [
        make_candidate("twin", FULL_ANSWERS, age_minutes=5),
        make_candidate("close", {**FULL_ANSWERS, "cleanliness": 3, "study_habits": "bedroom"}),
        make_candidate("opposite", {"cleanliness": 1, "noise_level": 1, "social_level": 5}),
    ]


def test_request_generations_track_latest_token_per_key() -> None:
    generations = RequestGenerations()

    first = generations.begin("viewer")
    other = generations.begin("someone-else")
    second = generations.begin("viewer")

    assert not generations.is_current("viewer", first)
    assert generations.is_current("viewer", second)
    assert generations.is_current("someone-else", other)
    assert second > first


def test_finish_forgets_only_the_latest_token() -> None:
    generations = RequestGenerations()
    first = generations.begin("viewer")
    second = generations.begin("viewer")

    generations.finish("viewer", first)
    assert generations.is_current("viewer", second)

    generations.finish("viewer", second)
    assert len(generations) == 0


@pytest.mark.asyncio
async def test_finished_requests_leave_no_generation_entries() -> None:
    service = build_service(candidates=pool())

    for index in range(50):
        await service.find_matches(f"viewer-{index}")
    service.candidates.list_candidates.side_effect = CandidateSourceError("timeout")
    await service.find_matches("viewer-failing")

    assert len(service.generations) == 0


@pytest.mark.asyncio
async def test_find_matches_returns_ranked_page() -> None:
    service = build_service(candidates=pool())

    outcome = await service.find_matches("viewer", min_score=60, page=PageRequest(size=10))

    assert outcome.status == MatchStatus.OK
    assert outcome.viewer_has_record is True
    assert [match.candidate.id for match in outcome.page.items] == ["twin", "close"]
    service.candidates.list_candidates.assert_awaited_once_with("viewer")


@pytest.mark.asyncio
async def test_empty_pool_is_ok_not_unavailable() -> None:
    service = build_service(candidates=[])

    outcome = await service.find_matches("viewer")

    assert outcome.status == MatchStatus.OK
    assert outcome.page.items == []
    assert outcome.page.total_count == 0


@pytest.mark.asyncio
async def test_candidate_fetch_failure_is_unavailable() -> None:
    service = build_service()
    service.candidates.list_candidates.side_effect = CandidateSourceError("timeout")

    outcome = await service.find_matches("viewer")

    assert outcome.status == MatchStatus.UNAVAILABLE
    assert outcome.page is None


@pytest.mark.asyncio
async def test_store_failure_is_unavailable() -> None:
    service = build_service()
    service.store.get_preference_record.side_effect = PreferenceStoreError("db down")

    outcome = await service.find_matches("viewer")

    assert outcome.status == MatchStatus.UNAVAILABLE


@pytest.mark.asyncio
async def test_viewer_without_record_is_flagged() -> None:
    service = build_service(viewer_answers=None, candidates=pool())

    outcome = await service.find_matches("viewer", min_score=50)

    assert outcome.viewer_has_record is False
    assert {match.result.score for match in outcome.page.items} == {50}


@pytest.mark.asyncio
async def test_older_request_is_superseded_by_newer_one() -> None:
    service = build_service()
    release_first = asyncio.Event()
    calls = 0

    async def list_candidates(viewer_id: str):
        nonlocal calls
        calls += 1
        if calls == 1:
            await release_first.wait()
            return pool()
        return [make_candidate("fresh", FULL_ANSWERS)]

    service.candidates.list_candidates.side_effect = list_candidates

    first = asyncio.create_task(service.find_matches("viewer"))
    while calls == 0:
        await asyncio.sleep(0)
    second = await service.find_matches("viewer")
    release_first.set()
    stale = await first

    assert second.status == MatchStatus.OK
    assert [match.candidate.id for match in second.page.items] == ["fresh"]
    assert stale.status == MatchStatus.SUPERSEDED
    assert stale.page is None
    assert len(service.generations) == 0


@pytest.mark.asyncio
async def test_analytics_over_whole_pool_and_thresholded_set() -> None:
    service = build_service(candidates=pool())

    everything = await service.match_analytics("viewer")
    thresholded = await service.match_analytics("viewer", min_score=60)

    assert everything.status == MatchStatus.OK
    assert everything.distribution.total_count == 3
    assert everything.distribution.band_counts[Band.POOR] == 1
    assert thresholded.distribution.total_count == 2
    assert thresholded.distribution.band_counts[Band.POOR] == 0


@pytest.mark.asyncio
async def test_analytics_unavailable_when_pool_fails() -> None:
    service = build_service()
    service.candidates.list_candidates.side_effect = CandidateSourceError("timeout")

    outcome = await service.match_analytics("viewer")

    assert outcome.status == MatchStatus.UNAVAILABLE
    assert outcome.distribution is None


@pytest.mark.asyncio
async def test_compare_scores_two_users() -> None:
    service = build_service()
    service.store.get_preference_record.side_effect = [
        make_record("viewer", FULL_ANSWERS),
        None,
    ]

    result = await service.compare("viewer", "newcomer")

    assert result.viewer_id == "viewer"
    assert result.candidate_id == "newcomer"
    assert result.score == 50
