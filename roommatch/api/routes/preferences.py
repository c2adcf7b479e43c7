from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from roommatch.api.deps import get_preference_store, require_roles
from roommatch.api.schemas.preferences import PreferenceRecordResponse, PreferenceUpdateRequest
from roommatch.domain import PreferenceRecord, User
from roommatch.domain.questionnaire import ValidationError as AnswerValidationError
from roommatch.domain.reference_data import QUESTIONNAIRE
from roommatch.domain.repositories import PreferenceStoreError
from roommatch.infrastructure.repositories.preferences import SqlPreferenceStore

router = APIRouter(prefix="/preferences", tags=["Preferences"])


def _to_response(record: PreferenceRecord) -> PreferenceRecordResponse:
    return PreferenceRecordResponse(
        owner_id=record.owner_id,
        answers=record.to_json_answers(),
        is_complete=record.is_complete,
        updated_at=record.updated_at,
        missing_questions=[qid for qid in QUESTIONNAIRE.question_ids if qid not in record.answers],
    )


@router.get("/me", response_model=PreferenceRecordResponse)
async def get_my_preferences(
    store: SqlPreferenceStore = Depends(get_preference_store),
    user: User = Depends(require_roles(["student"])),
) -> PreferenceRecordResponse:
    """Return the caller's preference record; 404 means the questionnaire was never saved."""
    try:
        record = await store.get_preference_record(user.user_id)
    except PreferenceStoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No preference record")
    return _to_response(record)


@router.put("/me", response_model=PreferenceRecordResponse)
async def replace_my_preferences(
    payload: PreferenceUpdateRequest,
    store: SqlPreferenceStore = Depends(get_preference_store),
    user: User = Depends(require_roles(["student"])),
) -> PreferenceRecordResponse:
    """
    Replace the caller's preference record.

    - The whole answer map is overwritten; omitted questions become unanswered
    - Any invalid answer rejects the request and nothing is stored
    """
    try:
        record = await store.put_preference_record(user.user_id, payload.answers)
    except AnswerValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={"message": str(exc), "question_id": exc.question_id},
        ) from exc
    except PreferenceStoreError as exc:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from exc
    return _to_response(record)
