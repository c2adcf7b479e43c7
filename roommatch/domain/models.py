from __future__ import annotations

import enum
import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from roommatch.domain.questionnaire import Answer, Questionnaire
from roommatch.domain.reference_data import QUESTIONNAIRE


class Band(str, enum.Enum):
    """Qualitative compatibility bucket derived from a 0-100 score."""

    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"

    @classmethod
    def for_score(cls, score: int) -> Band:
        if score >= 90:
            return cls.EXCELLENT
        if score >= 70:
            return cls.GOOD
        if score >= 50:
            return cls.FAIR
        return cls.POOR


@dataclass(slots=True)
class User:
    """Authenticated caller, resolved from the bearer token."""

    user_id: str
    roles: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class PreferenceRecord:
    """A user's validated answers to the compatibility questionnaire.

    Records are replaced wholesale on update; build new ones with
    :meth:`build` so validation and ``is_complete`` stay consistent.
    """

    owner_id: str
    answers: Mapping[str, Answer]
    is_complete: bool
    updated_at: datetime

    @classmethod
    def build(
        cls,
        owner_id: str,
        answers: Mapping[str, Any],
        *,
        updated_at: datetime | None = None,
        questionnaire: Questionnaire = QUESTIONNAIRE,
    ) -> PreferenceRecord:
        validated = questionnaire.validate_answers(answers)
        return cls(
            owner_id=owner_id,
            answers=validated,
            is_complete=questionnaire.is_complete(validated),
            updated_at=updated_at or datetime.now(UTC),
        )

    def has_answer(self, question_id: str) -> bool:
        return question_id in self.answers

    def to_json_answers(self) -> dict[str, Any]:
        """Answers in a JSON-safe shape (sets become sorted lists)."""
        return {
            question_id: sorted(value) if isinstance(value, frozenset) else value
            for question_id, value in self.answers.items()
        }


@dataclass(frozen=True, slots=True)
class Candidate:
    """A roommate post in the candidate pool, optionally carrying its owner's record."""

    id: str
    owner_id: str
    created_at: datetime
    preference_record: PreferenceRecord | None = None


@dataclass(frozen=True, slots=True)
class CompatibilityResult:
    viewer_id: str | None
    candidate_id: str | None
    score: int
    band: Band
    contributions: Mapping[str, float]


@dataclass(frozen=True, slots=True)
class RankedMatch:
    candidate: Candidate
    result: CompatibilityResult


@dataclass(frozen=True, slots=True)
class PageRequest:
    page: int = 1
    size: int = 10

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if self.size < 1:
            raise ValueError("size must be >= 1")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size


@dataclass(frozen=True, slots=True)
class MatchPage:
    items: list[RankedMatch]
    page: int
    size: int
    total_count: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total_count / self.size) if self.total_count else 0


@dataclass(frozen=True, slots=True)
class FactorAverage:
    factor_id: str
    average_contribution_percent: float


@dataclass(frozen=True, slots=True)
class MatchDistribution:
    total_count: int
    average_score: int
    band_counts: Mapping[Band, int]
    top_factors: list[FactorAverage]
