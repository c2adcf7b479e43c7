from __future__ import annotations

import structlog
from roommatch.domain.models import Candidate, PreferenceRecord
from roommatch.domain.questionnaire import ValidationError
from roommatch.domain.repositories import CandidateSourceError
from roommatch.infrastructure.db.models import PostStatus, PreferenceRecordModel, RoommatePost
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()

DEFAULT_CANDIDATE_LIMIT = 500


def candidate_record(row: PreferenceRecordModel) -> PreferenceRecord | None:
    """Rebuild a candidate's record; rows that no longer validate score as unanswered."""
    try:
        return PreferenceRecord.build(row.owner_id, row.answers or {}, updated_at=row.updated_at)
    except ValidationError as exc:
        logger.warning(
            "candidate_preferences_skipped",
            owner_id=row.owner_id,
            question_id=exc.question_id,
            error=str(exc),
        )
        return None


class SqlCandidateSource:
    """Candidate pool from active roommate posts, joined with each owner's preferences.

    Only the newest ``limit`` posts are scored.
    """

    def __init__(self, session: AsyncSession, *, limit: int = DEFAULT_CANDIDATE_LIMIT) -> None:
        self.session = session
        self.limit = limit

    async def list_candidates(self, viewer_id: str) -> list[Candidate]:
        stmt = (
            select(RoommatePost, PreferenceRecordModel)
            .outerjoin(
                PreferenceRecordModel,
                PreferenceRecordModel.owner_id == RoommatePost.owner_id,
            )
            .where(
                RoommatePost.status == PostStatus.LOOKING,
                RoommatePost.owner_id != viewer_id,
            )
            .order_by(RoommatePost.created_at.desc(), RoommatePost.id)
            .limit(self.limit)
        )
        try:
            result = await self.session.execute(stmt)
            rows = result.all()
        except SQLAlchemyError as exc:
            raise CandidateSourceError("Candidate pool query failed") from exc

        candidates = [
            Candidate(
                id=post.id,
                owner_id=post.owner_id,
                created_at=post.created_at,
                preference_record=candidate_record(prefs) if prefs is not None else None,
            )
            for post, prefs in rows
        ]
        if len(candidates) >= self.limit:
            await logger.awarning(
                "candidate_pool_truncated", viewer_id=viewer_id, limit=self.limit
            )
        await logger.adebug("candidate_pool_loaded", viewer_id=viewer_id, count=len(candidates))
        return candidates
