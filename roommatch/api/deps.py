from __future__ import annotations

from collections.abc import AsyncIterator, Callable, Iterable, Sequence

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from roommatch.core.auth import TokenError, decode_access_token
from roommatch.core.config import Settings, get_settings
from roommatch.domain import User
from roommatch.domain.services.matching import MatchingService, RequestGenerations
from roommatch.domain.services.ranking import MatchRanker
from roommatch.domain.services.scoring import CompatibilityScorer
from roommatch.infrastructure.db.session import get_session
from roommatch.infrastructure.repositories.candidates import SqlCandidateSource
from roommatch.infrastructure.repositories.preferences import SqlPreferenceStore
from sqlalchemy.ext.asyncio import AsyncSession

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),  # noqa: B008
) -> User:
    """Resolve the authenticated user from a bearer token."""
    if credentials is None:
        raise _unauthorized("Missing bearer token")

    try:
        payload = decode_access_token(credentials.credentials)
    except TokenError as exc:
        raise _unauthorized(str(exc)) from exc

    user_id = payload.get("sub")
    roles: Iterable[str] = payload.get("roles", [])

    if not user_id:
        raise _unauthorized("Token missing subject")

    if not roles:
        raise _forbidden("Token missing required roles")

    return User(user_id=user_id, roles=list(roles))


def require_roles(required_roles: Sequence[str]) -> Callable[[User], User]:
    """Dependency factory enforcing that the authenticated user has one of the required roles."""
    allowed = set(get_settings().allowed_roles)

    invalid_roles = [role for role in required_roles if role not in allowed]
    if invalid_roles:
        raise ValueError(f"Unsupported role(s) requested: {', '.join(invalid_roles)}")

    required = set(required_roles)

    def dependency(user: User = Depends(get_current_user)) -> User:  # noqa: B008
        if not required.intersection(user.roles):
            raise _forbidden("Insufficient role privileges")
        return user

    return dependency


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """Provide an async SQLAlchemy session for API handlers."""
    async for session in get_session():
        yield session


def get_preference_store(
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
) -> SqlPreferenceStore:
    return SqlPreferenceStore(session)


def get_request_generations(request: Request) -> RequestGenerations:
    generations = getattr(request.app.state, "request_generations", None)
    if generations is None:
        generations = RequestGenerations()
        request.app.state.request_generations = generations
    return generations


def get_matching_service(
    session: AsyncSession = Depends(get_db_session),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
    generations: RequestGenerations = Depends(get_request_generations),  # noqa: B008
) -> MatchingService:
    scorer = CompatibilityScorer(settings.factor_table())
    return MatchingService(
        SqlPreferenceStore(session),
        SqlCandidateSource(session, limit=settings.match_candidate_limit),
        ranker=MatchRanker(scorer),
        generations=generations,
    )


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=detail)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)
