from __future__ import annotations

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.asyncio


async def post_insight(
    client: AsyncClient,
    headers: dict[str, str],
    *,
    course_code: str = "COP5536",
    text: str = "Projects take a full weekend",
    difficulty: int = 8,
    is_anonymous: bool = False,
) -> dict:
    response = await client.post(
        "/api/insights",
        json={
            "courseCode": course_code,
            "text": text,
            "difficulty": difficulty,
            "isAnonymous": is_anonymous,
        },
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


async def test_create_insight_returns_author(
    async_client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    body = await post_insight(async_client, auth_headers)

    assert body["_id"]
    assert body["courseCode"] == "COP5536"
    assert body["userId"] == "student-1"
    assert body["difficulty"] == 8
    assert body["isAnonymous"] is False
    assert body["user"] == {
        "_id": "student-1",
        "name": "Alex Student",
        "image": "https://example.com/alex.png",
    }


async def test_anonymous_insight_hides_author(
    async_client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    await post_insight(async_client, auth_headers, is_anonymous=True)

    response = await async_client.get("/api/insights", params={"courseCode": "COP5536"})

    assert response.status_code == 200
    [insight] = response.json()
    assert insight["isAnonymous"] is True
    assert insight["user"] is None
    assert insight["userId"] is None


async def test_list_is_public_and_newest_first(
    async_client: AsyncClient,
    auth_headers: dict[str, str],
    other_auth_headers: dict[str, str],
) -> None:
    await post_insight(async_client, auth_headers, text="first")
    await post_insight(async_client, other_auth_headers, text="second")
    await post_insight(async_client, auth_headers, course_code="CIS4301", text="elsewhere")

    response = await async_client.get("/api/insights", params={"courseCode": "COP5536"})

    assert [insight["text"] for insight in response.json()] == ["second", "first"]


async def test_create_requires_authentication(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/api/insights",
        json={"courseCode": "COP5536", "text": "hi", "difficulty": 5},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Unauthorized"


async def test_invalid_token_is_rejected(async_client: AsyncClient) -> None:
    response = await async_client.post(
        "/api/insights",
        json={"courseCode": "COP5536", "text": "hi", "difficulty": 5},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 401


@pytest.mark.parametrize(
    "payload",
    [
        {"courseCode": "COP5536", "text": "hi", "difficulty": 11},
        {"courseCode": "COP5536", "text": "hi", "difficulty": 0},
        {"courseCode": "COP5536", "text": "", "difficulty": 5},
        {"text": "hi", "difficulty": 5},
    ],
)
async def test_invalid_payload_is_a_bad_request(
    async_client: AsyncClient, auth_headers: dict[str, str], payload: dict
) -> None:
    response = await async_client.post("/api/insights", json=payload, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["detail"]


async def test_list_requires_course_code(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/insights")

    assert response.status_code == 400


async def test_owner_can_delete_insight(
    async_client: AsyncClient, auth_headers: dict[str, str]
) -> None:
    created = await post_insight(async_client, auth_headers)

    response = await async_client.delete(
        "/api/insights", params={"id": created["_id"]}, headers=auth_headers
    )

    assert response.status_code == 200
    assert response.json() == {"success": True}
    listing = await async_client.get("/api/insights", params={"courseCode": "COP5536"})
    assert listing.json() == []


async def test_cannot_delete_someone_elses_insight(
    async_client: AsyncClient,
    auth_headers: dict[str, str],
    other_auth_headers: dict[str, str],
) -> None:
    created = await post_insight(async_client, auth_headers)

    response = await async_client.delete(
        "/api/insights", params={"id": created["_id"]}, headers=other_auth_headers
    )

    assert response.status_code == 404
    assert response.json()["detail"] == "Insight not found or unauthorized"
    listing = await async_client.get("/api/insights", params={"courseCode": "COP5536"})
    assert len(listing.json()) == 1
