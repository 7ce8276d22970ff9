from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from course_catalog.api.deps import get_rating_client
from course_catalog.libs.rating_client import RatingClient
from tests.utils import professor_payload

pytestmark = pytest.mark.asyncio


async def seed(client: AsyncClient, headers: dict[str, str]) -> str:
    await client.post(
        "/api/insights",
        json={"courseCode": "COP5536", "text": "Lots of trees", "difficulty": 9},
        headers=headers,
    )
    category = (
        await client.post("/api/categories", json={"name": "Favorites"}, headers=headers)
    ).json()
    await client.post(
        "/api/course-categories",
        json={"courseCode": "COP5536", "categoryId": category["_id"]},
        headers=headers,
    )
    return category["_id"]


class TestBatch:
    async def test_signed_in_caller_gets_insights_and_categories(
        self, async_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        category_id = await seed(async_client, auth_headers)

        response = await async_client.get(
            "/api/batch", params={"courseCodes": "COP5536,CIS4301"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"COP5536", "CIS4301"}
        assert [i["text"] for i in body["COP5536"]["insights"]] == ["Lots of trees"]
        assert [c["categoryId"] for c in body["COP5536"]["categories"]] == [category_id]
        assert body["CIS4301"] == {"insights": [], "categories": []}

    async def test_anonymous_caller_gets_no_categories(
        self, async_client: AsyncClient, auth_headers: dict[str, str]
    ) -> None:
        await seed(async_client, auth_headers)

        response = await async_client.get("/api/batch", params={"courseCodes": "COP5536"})

        assert response.status_code == 200
        entry = response.json()["COP5536"]
        assert len(entry["insights"]) == 1
        assert entry["categories"] == []

    async def test_other_users_assignments_are_not_returned(
        self,
        async_client: AsyncClient,
        auth_headers: dict[str, str],
        other_auth_headers: dict[str, str],
    ) -> None:
        await seed(async_client, auth_headers)

        response = await async_client.get(
            "/api/batch", params={"courseCodes": "COP5536"}, headers=other_auth_headers
        )

        assert response.json()["COP5536"]["categories"] == []

    @pytest.mark.parametrize("course_codes", ["", " , "])
    async def test_missing_course_codes(self, async_client: AsyncClient, course_codes: str) -> None:
        response = await async_client.get("/api/batch", params={"courseCodes": course_codes})

        assert response.status_code == 400
        assert response.json()["detail"] == "Course codes are required"


@pytest.fixture
def rating_requests(api: FastAPI) -> Iterator[list[httpx.Request]]:
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        if request.url.params["professor"] == "Unknown Person":
            return httpx.Response(404, json={"error": "Professor not found"})
        if request.url.params["professor"] == "Ambiguous":
            return httpx.Response(200, json=[{"name": "Ann Biguous"}, {"name": "Amb Iguous"}])
        return httpx.Response(200, json=professor_payload(request.url.params["professor"]))

    api.dependency_overrides[get_rating_client] = lambda: RatingClient(
        base_url="https://ratings.example.com/api/professor",
        transport=httpx.MockTransport(handler),
    )
    yield requests
    api.dependency_overrides.pop(get_rating_client, None)


class TestRatingProxy:
    async def test_proxies_upstream_body(
        self, async_client: AsyncClient, rating_requests: list[httpx.Request]
    ) -> None:
        response = await async_client.get(
            "/api/rmp", params={"school": "University of Florida", "professor": "Jane Doe"}
        )

        assert response.status_code == 200
        assert response.json() == professor_payload("Jane Doe")
        assert rating_requests[0].url.params["school"] == "University of Florida"

    async def test_non_object_body_is_passed_through(
        self, async_client: AsyncClient, rating_requests: list[httpx.Request]
    ) -> None:
        response = await async_client.get(
            "/api/rmp", params={"school": "University of Florida", "professor": "Ambiguous"}
        )

        assert response.status_code == 200
        assert response.json() == [{"name": "Ann Biguous"}, {"name": "Amb Iguous"}]

    @pytest.mark.parametrize(
        "params", [{"school": "University of Florida"}, {"professor": "Jane Doe"}, {}]
    )
    async def test_missing_parameters(
        self,
        async_client: AsyncClient,
        rating_requests: list[httpx.Request],
        params: dict[str, str],
    ) -> None:
        response = await async_client.get("/api/rmp", params=params)

        assert response.status_code == 400
        assert response.json()["detail"] == "School and professor parameters are required"
        assert rating_requests == []

    async def test_upstream_failure_is_a_server_error(
        self, async_client: AsyncClient, rating_requests: list[httpx.Request]
    ) -> None:
        response = await async_client.get(
            "/api/rmp", params={"school": "University of Florida", "professor": "Unknown Person"}
        )

        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to fetch professor data"
