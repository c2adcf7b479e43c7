from __future__ import annotations

import pytest
from httpx import AsyncClient
from roommatch.infrastructure.db.models import PreferenceRecordModel
from sqlalchemy.ext.asyncio import AsyncSession
from tests.utils import BASE_TIME, FULL_ANSWERS, auth_headers


@pytest.mark.asyncio
async def test_get_without_record_is_404(async_client: AsyncClient) -> None:
    response = await async_client.get("/preferences/me", headers=auth_headers())

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_requests_without_token_are_rejected(async_client: AsyncClient) -> None:
    response = await async_client.put("/preferences/me", json={"answers": {"cleanliness": 3}})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_put_then_get_round_trip(async_client: AsyncClient) -> None:
    headers = auth_headers("student-1")
    answers = {**FULL_ANSWERS, "deal_breakers": ["smoking", "loud_music"]}

    saved = await async_client.put("/preferences/me", json={"answers": answers}, headers=headers)
    fetched = await async_client.get("/preferences/me", headers=headers)

    assert saved.status_code == 200
    assert fetched.status_code == 200
    body = fetched.json()
    assert body["owner_id"] == "student-1"
    assert body["is_complete"] is True
    assert body["missing_questions"] == []
    assert body["answers"]["deal_breakers"] == ["loud_music", "smoking"]
    assert body["answers"]["cleanliness"] == 4


@pytest.mark.asyncio
async def test_put_replaces_whole_record(async_client: AsyncClient) -> None:
    headers = auth_headers("student-1")
    await async_client.put("/preferences/me", json={"answers": FULL_ANSWERS}, headers=headers)

    response = await async_client.put(
        "/preferences/me", json={"answers": {"noise_level": 2}}, headers=headers
    )

    assert response.status_code == 200
    body = response.json()
    assert body["answers"] == {"noise_level": 2}
    assert body["is_complete"] is False
    assert "cleanliness" in body["missing_questions"]


@pytest.mark.asyncio
async def test_invalid_answer_is_422_and_nothing_is_stored(
    async_client: AsyncClient, db: AsyncSession
) -> None:
    response = await async_client.put(
        "/preferences/me",
        json={"answers": {"cleanliness": 3, "noise_level": 9}},
        headers=auth_headers("student-2"),
    )

    assert response.status_code == 422
    assert response.json()["detail"]["question_id"] == "noise_level"
    assert await db.get(PreferenceRecordModel, "student-2") is None


@pytest.mark.asyncio
async def test_unknown_question_is_422(async_client: AsyncClient) -> None:
    response = await async_client.put(
        "/preferences/me",
        json={"answers": {"favourite_colour": "blue"}},
        headers=auth_headers(),
    )

    assert response.status_code == 422
    assert response.json()["detail"]["question_id"] == "favourite_colour"


@pytest.mark.asyncio
async def test_stored_record_that_no_longer_validates_is_503(
    async_client: AsyncClient, db: AsyncSession
) -> None:
    db.add(
        PreferenceRecordModel(
            owner_id="student-3",
            answers={"cleanliness": 9},
            is_complete=False,
            updated_at=BASE_TIME,
        )
    )
    await db.commit()

    response = await async_client.get("/preferences/me", headers=auth_headers("student-3"))

    assert response.status_code == 503
