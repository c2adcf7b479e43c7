from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from roommatch.core.auth import Role, create_access_token
from roommatch.domain.models import Candidate, PreferenceRecord
from roommatch.infrastructure.db.models import PostStatus, RoommatePost
from sqlalchemy.ext.asyncio import AsyncSession

BASE_TIME = datetime(2026, 9, 1, tzinfo=UTC)

FULL_ANSWERS: dict[str, Any] = {
    "cleanliness": 4,
    "noise_level": 4,
    "social_level": 3,
    "sleep_schedule": "normal",
    "study_habits": "library",
    "cooking_habits": "few_times_week",
    "sharing_comfort": "kitchen_items",
    "pet_preference": "ok_with_pets",
    "budget_range": "500_800",
    "deal_breakers": [],
}


def auth_headers(user_id: str = "student-1", role: Role = Role.STUDENT) -> dict[str, str]:
    token = create_access_token(user_id, roles=[role.value])
    return {"Authorization": f"Bearer {token}"}


def make_record(owner_id: str, answers: Mapping[str, Any] | None = None) -> PreferenceRecord:
    return PreferenceRecord.build(owner_id, answers or {}, updated_at=BASE_TIME)


def make_candidate(
    candidate_id: str,
    answers: Mapping[str, Any] | None = None,
    *,
    age_minutes: int = 0,
) -> Candidate:
    """Candidate whose post was created ``age_minutes`` before BASE_TIME.

    ``answers=None`` produces a candidate without a preference record.
    """
    return Candidate(
        id=candidate_id,
        owner_id=f"owner-{candidate_id}",
        created_at=BASE_TIME - timedelta(minutes=age_minutes),
        preference_record=make_record(f"owner-{candidate_id}", answers)
        if answers is not None
        else None,
    )


async def add_post(
    session: AsyncSession,
    owner_id: str,
    *,
    age_minutes: int = 0,
    status: PostStatus = PostStatus.LOOKING,
) -> RoommatePost:
    post = RoommatePost(
        owner_id=owner_id,
        title=f"Room for {owner_id}",
        status=status,
        created_at=BASE_TIME - timedelta(minutes=age_minutes),
    )
    session.add(post)
    await session.commit()
    return post
