"""
Questionnaire model for the roommate compatibility quiz.

Questions are immutable and ordered; their order is the step order of the
questionnaire session. Answer validation lives here so the session, the API
and the preference store all enforce the same rules.
"""

from __future__ import annotations

import enum
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

# A stored answer: scale -> int, singleChoice -> str | int, multiSelect -> frozenset
Answer = int | str | frozenset

SCALE_MIN = 1
SCALE_MAX = 5


class AnswerType(str, enum.Enum):
    SCALE = "scale"
    SINGLE_CHOICE = "singleChoice"
    MULTI_SELECT = "multiSelect"


class ValidationError(Exception):
    """Raised when an answer does not fit its question's type or options."""

    def __init__(self, message: str, question_id: str | None = None):
        super().__init__(message)
        self.question_id = question_id


@dataclass(frozen=True, slots=True)
class Option:
    value: int | str
    label: str


@dataclass(frozen=True, slots=True)
class Question:
    """A single compatibility question."""

    id: str
    category: str
    prompt: str
    answer_type: AnswerType
    options: tuple[Option, ...]

    @property
    def option_values(self) -> tuple[int | str, ...]:
        return tuple(option.value for option in self.options)

    def validate(self, value: Any) -> Answer:
        """Return the normalized answer or raise ``ValidationError``."""
        if self.answer_type == AnswerType.SCALE:
            return self._validate_scale(value)
        if self.answer_type == AnswerType.SINGLE_CHOICE:
            return self._validate_choice(value)
        return self._validate_multi(value)

    def _validate_scale(self, value: Any) -> int:
        # bool is an int subclass; True must not pass as 1
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                f"{self.id}: expected an integer between {SCALE_MIN} and {SCALE_MAX}",
                question_id=self.id,
            )
        if not SCALE_MIN <= value <= SCALE_MAX or value not in self.option_values:
            raise ValidationError(
                f"{self.id}: {value} is outside the scale {SCALE_MIN}-{SCALE_MAX}",
                question_id=self.id,
            )
        return value

    def _validate_choice(self, value: Any) -> int | str:
        if isinstance(value, bool) or not isinstance(value, (int, str)):
            raise ValidationError(f"{self.id}: expected a single option value", question_id=self.id)
        if value not in self.option_values:
            raise ValidationError(f"{self.id}: unknown option {value!r}", question_id=self.id)
        return value

    def _validate_multi(self, value: Any) -> frozenset:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise ValidationError(f"{self.id}: expected a list of option values", question_id=self.id)
        selected = list(value)
        unknown = [item for item in selected if item not in self.option_values]
        if unknown:
            raise ValidationError(
                f"{self.id}: unknown option(s) {', '.join(repr(item) for item in unknown)}",
                question_id=self.id,
            )
        return frozenset(selected)


class Questionnaire:
    """Ordered, read-only collection of questions."""

    def __init__(self, questions: Sequence[Question]) -> None:
        ids = [question.id for question in questions]
        if len(set(ids)) != len(ids):
            raise ValueError("Question ids must be unique")
        self._questions = tuple(questions)
        self._by_id = {question.id: question for question in self._questions}

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)

    def __getitem__(self, index: int) -> Question:
        return self._questions[index]

    def __contains__(self, question_id: object) -> bool:
        return question_id in self._by_id

    @property
    def question_ids(self) -> tuple[str, ...]:
        return tuple(self._by_id)

    def get(self, question_id: str) -> Question | None:
        return self._by_id.get(question_id)

    def question(self, question_id: str) -> Question:
        question = self._by_id.get(question_id)
        if question is None:
            raise ValidationError(f"Unknown question: {question_id}", question_id=question_id)
        return question

    def validate_answer(self, question_id: str, value: Any) -> Answer:
        return self.question(question_id).validate(value)

    def validate_answers(self, answers: Mapping[str, Any]) -> dict[str, Answer]:
        """Validate a whole answer map, returned in questionnaire order."""
        for question_id in answers:
            self.question(question_id)
        return {
            question.id: question.validate(answers[question.id])
            for question in self._questions
            if question.id in answers
        }

    def is_complete(self, answers: Mapping[str, Any]) -> bool:
        return all(question.id in answers for question in self._questions)
