from roommatch.domain.models import (
    Band,
    Candidate,
    CompatibilityResult,
    MatchDistribution,
    PreferenceRecord,
    User,
)
from roommatch.domain.questionnaire import ValidationError

__all__ = [
    "Band",
    "Candidate",
    "CompatibilityResult",
    "MatchDistribution",
    "PreferenceRecord",
    "User",
    "ValidationError",
]
