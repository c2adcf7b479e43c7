from __future__ import annotations

import pytest
from httpx import AsyncClient
from roommatch.api.routes import health


@pytest.mark.asyncio
async def test_health_reports_database_status(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["datastores"]["database"]["status"] == "ok"
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_health_degraded_when_database_fails(
    async_client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    async def failing_check() -> dict:
        return {"status": "error", "message": "connection refused"}

    monkeypatch.setattr(health, "check_database", failing_check)

    response = await async_client.get("/health", headers={"x-request-id": "probe-1"})

    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.headers["X-Request-ID"] == "probe-1"


@pytest.mark.asyncio
async def test_questionnaire_lists_steps_in_order(async_client: AsyncClient) -> None:
    response = await async_client.get("/questionnaire")

    assert response.status_code == 200
    body = response.json()
    questions = body["questions"]
    assert [question["step"] for question in questions] == list(range(1, 11))
    assert questions[0]["id"] == "cleanliness"
    assert questions[0]["answer_type"] == "scale"
    assert [option["value"] for option in questions[0]["options"]] == [1, 2, 3, 4, 5]
    assert questions[-1]["answer_type"] == "multiSelect"
    assert "budget_range" not in body["scored_factors"]
    assert len(body["scored_factors"]) == 9
