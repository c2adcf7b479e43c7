"""Domain services."""

from roommatch.domain.services.analytics import summarize_matches
from roommatch.domain.services.matching import (
    MatchingService,
    MatchQueryResult,
    MatchStatus,
    RequestGenerations,
)
from roommatch.domain.services.ranking import MatchRanker
from roommatch.domain.services.scoring import CompatibilityScorer
from roommatch.domain.services.session import (
    QuestionnaireSession,
    SessionCompletedError,
    SessionState,
)

__all__ = [
    "CompatibilityScorer",
    "MatchQueryResult",
    "MatchRanker",
    "MatchStatus",
    "MatchingService",
    "QuestionnaireSession",
    "RequestGenerations",
    "SessionCompletedError",
    "SessionState",
    "summarize_matches",
]
