from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status
from roommatch.api.deps import get_matching_service, require_roles
from roommatch.api.schemas.matches import (
    CandidateSchema,
    CompatibilityResultSchema,
    FactorAverageSchema,
    MatchDistributionResponse,
    MatchItem,
    MatchPageResponse,
)
from roommatch.core.config import Settings, get_settings
from roommatch.domain import CompatibilityResult, User
from roommatch.domain.models import PageRequest
from roommatch.domain.repositories import PreferenceStoreError
from roommatch.domain.services.matching import MatchingService, MatchStatus

router = APIRouter(tags=["Matches"])

POOL_UNAVAILABLE = "Candidate pool unavailable, try again later"


def _result_schema(result: CompatibilityResult) -> CompatibilityResultSchema:
    return CompatibilityResultSchema(
        viewer_id=result.viewer_id,
        candidate_id=result.candidate_id,
        score=result.score,
        band=result.band.value,
        contributions=dict(result.contributions),
    )


@router.get("/matches", response_model=MatchPageResponse)
async def list_matches(
    min_score: int | None = Query(None, ge=0, le=100),
    page: int = Query(1, ge=1),
    size: int | None = Query(None, ge=1),
    service: MatchingService = Depends(get_matching_service),
    settings: Settings = Depends(get_settings),
    user: User = Depends(require_roles(["student"])),
) -> MatchPageResponse:
    """
    Ranked roommate candidates for the caller.

    - Candidates scoring below ``min_score`` are dropped
    - Sorted by score, newest post first on ties
    - 503 when the candidate pool cannot be fetched (an empty list means no matches)
    - 409 when a newer request from the same caller superseded this one
    """
    threshold = settings.match_min_score if min_score is None else min_score
    page_size = min(size or settings.match_page_size, settings.match_max_page_size)

    result = await service.find_matches(
        user.user_id,
        min_score=threshold,
        page=PageRequest(page=page, size=page_size),
    )
    if result.status == MatchStatus.SUPERSEDED:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"status": MatchStatus.SUPERSEDED.value, "message": "Superseded by a newer request"},
        )
    if result.status == MatchStatus.UNAVAILABLE or result.page is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": MatchStatus.UNAVAILABLE.value, "message": POOL_UNAVAILABLE},
        )

    match_page = result.page
    return MatchPageResponse(
        status=result.status.value,
        items=[
            MatchItem(
                candidate=CandidateSchema(
                    id=item.candidate.id,
                    owner_id=item.candidate.owner_id,
                    created_at=item.candidate.created_at,
                    has_preferences=item.candidate.preference_record is not None,
                ),
                compatibility=_result_schema(item.result),
            )
            for item in match_page.items
        ],
        page=match_page.page,
        size=match_page.size,
        total_count=match_page.total_count,
        total_pages=match_page.total_pages,
        min_score=threshold,
        viewer_has_preferences=result.viewer_has_record,
    )


@router.get("/matches/analytics", response_model=MatchDistributionResponse)
async def match_analytics(
    min_score: int | None = Query(
        None, ge=0, le=100, description="Summarize only candidates at or above this score"
    ),
    service: MatchingService = Depends(get_matching_service),
    user: User = Depends(require_roles(["student"])),
) -> MatchDistributionResponse:
    """Score distribution, average and top factors over the caller's candidate pool."""
    result = await service.match_analytics(user.user_id, min_score=min_score)
    if result.status == MatchStatus.UNAVAILABLE or result.distribution is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={"status": MatchStatus.UNAVAILABLE.value, "message": POOL_UNAVAILABLE},
        )

    distribution = result.distribution
    return MatchDistributionResponse(
        status=result.status.value,
        total_count=distribution.total_count,
        average_score=distribution.average_score,
        band_counts={band.value: count for band, count in distribution.band_counts.items()},
        top_factors=[
            FactorAverageSchema(
                factor_id=factor.factor_id,
                average_contribution_percent=factor.average_contribution_percent,
            )
            for factor in distribution.top_factors
        ],
        min_score=min_score,
    )


@router.get("/compatibility/{owner_id}", response_model=CompatibilityResultSchema)
async def compatibility_with(
    owner_id: str,
    service: MatchingService = Depends(get_matching_service),
    user: User = Depends(require_roles(["student"])),
) -> CompatibilityResultSchema:
    """Pairwise compatibility between the caller and another user."""
    try:
        result = await service.compare(user.user_id, owner_id)
    except PreferenceStoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return _result_schema(result)
