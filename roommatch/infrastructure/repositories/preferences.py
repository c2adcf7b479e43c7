from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import structlog
from roommatch.domain.models import PreferenceRecord
from roommatch.domain.questionnaire import ValidationError
from roommatch.domain.repositories import PreferenceStoreError
from roommatch.infrastructure.db.models import PreferenceRecordModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

logger = structlog.get_logger()


class SqlPreferenceStore:
    """Preference store backed by the ``preference_records`` table."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_preference_record(self, owner_id: str) -> PreferenceRecord | None:
        try:
            row = await self.session.get(PreferenceRecordModel, owner_id)
        except SQLAlchemyError as exc:
            raise PreferenceStoreError(f"Could not load preferences for {owner_id}") from exc
        if row is None:
            return None
        try:
            return PreferenceRecord.build(
                row.owner_id, row.answers or {}, updated_at=row.updated_at
            )
        except ValidationError as exc:
            # Stored but no longer valid is not the same as never saved
            await logger.aerror(
                "preference_record_invalid",
                owner_id=owner_id,
                question_id=exc.question_id,
                error=str(exc),
            )
            raise PreferenceStoreError(
                f"Stored preferences for {owner_id} no longer match the questionnaire"
            ) from exc

    async def put_preference_record(
        self, owner_id: str, answers: Mapping[str, Any]
    ) -> PreferenceRecord:
        """Validate and store ``answers``, replacing any previous record for the owner.

        Raises ``ValidationError`` for bad answers before anything is written.
        """
        record = PreferenceRecord.build(owner_id, answers, updated_at=datetime.now(UTC))
        payload = record.to_json_answers()

        try:
            row = await self.session.get(PreferenceRecordModel, owner_id)
            if row is None:
                row = PreferenceRecordModel(owner_id=owner_id)
                self.session.add(row)
            row.answers = payload
            row.is_complete = record.is_complete
            row.updated_at = record.updated_at
            await self.session.commit()
        except SQLAlchemyError as exc:
            await self.session.rollback()
            await logger.aerror("preference_record_save_failed", owner_id=owner_id, error=str(exc))
            raise PreferenceStoreError(f"Could not save preferences for {owner_id}") from exc

        await logger.ainfo(
            "preference_record_saved",
            owner_id=owner_id,
            answered=len(payload),
            is_complete=record.is_complete,
        )
        return record
