"""
Questionnaire session: walks one user through the compatibility quiz.

The session is a small state machine with two states. While in progress it
tracks the current step and a private draft of answers; ``next()`` on the
last step completes it, persisting the draft through the preference store.
Next doubles as Skip, so unanswered steps may be passed over.
"""

from __future__ import annotations

import enum
from collections.abc import Mapping
from typing import Any

import structlog
from roommatch.domain.models import PreferenceRecord
from roommatch.domain.questionnaire import Answer, Question, Questionnaire
from roommatch.domain.reference_data import QUESTIONNAIRE
from roommatch.domain.repositories import PreferenceStore, PreferenceStoreError

logger = structlog.get_logger(__name__)


class SessionState(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class SessionCompletedError(Exception):
    """Raised when a completed session receives another transition."""


class QuestionnaireSession:
    def __init__(
        self,
        owner_id: str,
        store: PreferenceStore,
        *,
        existing_answers: Mapping[str, Any] | None = None,
        questionnaire: Questionnaire = QUESTIONNAIRE,
    ) -> None:
        if len(questionnaire) == 0:
            raise ValueError("Questionnaire has no questions")
        self.owner_id = owner_id
        self.store = store
        self.questionnaire = questionnaire
        self.state = SessionState.IN_PROGRESS
        self.step_index = 0
        self.record: PreferenceRecord | None = None
        # Resuming a prior record: answers are re-validated against the current questions
        self._draft: dict[str, Answer] = questionnaire.validate_answers(existing_answers or {})

    @property
    def draft_answers(self) -> dict[str, Answer]:
        return dict(self._draft)

    @property
    def current_question(self) -> Question:
        return self.questionnaire[self.step_index]

    @property
    def is_last_step(self) -> bool:
        return self.step_index == len(self.questionnaire) - 1

    @property
    def progress(self) -> float:
        return (self.step_index + 1) / len(self.questionnaire) * 100

    def answer(self, value: Any, *, question_id: str | None = None) -> None:
        """Record an answer for the current (or referenced) question.

        Raises ``ValidationError`` without touching the draft when the value
        does not fit the question.
        """
        self._ensure_in_progress()
        question = (
            self.current_question
            if question_id is None
            else self.questionnaire.question(question_id)
        )
        self._draft[question.id] = question.validate(value)

    async def next(self) -> SessionState:
        """Advance one step, completing the session on the last step."""
        self._ensure_in_progress()
        if not self.is_last_step:
            self.step_index += 1
            return self.state
        await self._complete()
        return self.state

    def previous(self) -> None:
        self._ensure_in_progress()
        if self.step_index > 0:
            self.step_index -= 1

    async def _complete(self) -> None:
        answers = dict(self._draft)
        try:
            record = await self.store.put_preference_record(self.owner_id, answers)
        except PreferenceStoreError:
            # Draft and step are kept so the caller can retry next()
            await logger.awarning(
                "questionnaire_save_failed",
                owner_id=self.owner_id,
                answered=len(answers),
            )
            raise

        self.record = record
        self.state = SessionState.COMPLETED
        await logger.ainfo(
            "questionnaire_completed",
            owner_id=self.owner_id,
            answered=len(answers),
            is_complete=record.is_complete,
        )

    def _ensure_in_progress(self) -> None:
        if self.state == SessionState.COMPLETED:
            raise SessionCompletedError("Questionnaire session is already completed")
