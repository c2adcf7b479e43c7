from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class PreferenceUpdateRequest(BaseModel):
    answers: dict[str, Any] = Field(
        ...,
        description="Full answer map keyed by question id; replaces any existing record",
    )


class PreferenceRecordResponse(BaseModel):
    owner_id: str
    answers: dict[str, Any]
    is_complete: bool
    updated_at: datetime
    missing_questions: list[str] = Field(default_factory=list)
