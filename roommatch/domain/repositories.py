"""Collaborator interfaces the matching engine depends on."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from roommatch.domain.models import Candidate, PreferenceRecord


class PreferenceStoreError(Exception):
    """Raised when a preference record cannot be read or written. Retrying is safe."""


class CandidateSourceError(Exception):
    """Raised when the candidate pool cannot be fetched."""


class PreferenceStore(Protocol):
    async def get_preference_record(self, owner_id: str) -> PreferenceRecord | None: ...

    async def put_preference_record(
        self, owner_id: str, answers: Mapping[str, Any]
    ) -> PreferenceRecord:
        """Replace the owner's record with ``answers`` in full."""
        ...


class CandidateSource(Protocol):
    async def list_candidates(self, viewer_id: str) -> list[Candidate]:
        """Return other users' active posts; the viewer's own posts are excluded."""
        ...
