"""
Backend API client used by the client-side stores.

Wraps the insight, category, course-category and batch endpoints and
converts their JSON payloads into domain objects.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import httpx
import structlog

from course_catalog.core.config import get_settings
from course_catalog.domain.models import (
    Category,
    CourseCategory,
    Insight,
    InsightAuthor,
)

logger = structlog.get_logger(__name__)


class BackendClientError(Exception):
    """Base exception for backend client errors."""


class BackendAPIError(BackendClientError):
    """Raised for non-success responses from the backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass(slots=True)
class BatchCourseData:
    """Insights and the caller's category assignments for one course."""

    insights: list[Insight] = field(default_factory=list)
    categories: list[CourseCategory] = field(default_factory=list)


class BackendClient:
    """Async client for the course catalog backend."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        timeout_seconds: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.backend_base_url).rstrip("/")
        self.token = token
        self.timeout = (
            timeout_seconds if timeout_seconds is not None else settings.http_timeout_seconds
        )
        self._transport = transport

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    # ------------------------------------------------------------------
    # Insights
    # ------------------------------------------------------------------

    async def list_insights(self, course_code: str) -> list[Insight]:
        data = await self._request("GET", "/api/insights", params={"courseCode": course_code})
        with _parsing("/api/insights"):
            return [parse_insight(item) for item in data]

    async def create_insight(
        self,
        course_code: str,
        text: str,
        difficulty: int,
        is_anonymous: bool = False,
    ) -> Insight:
        data = await self._request(
            "POST",
            "/api/insights",
            json={
                "courseCode": course_code,
                "text": text,
                "difficulty": difficulty,
                "isAnonymous": is_anonymous,
            },
        )
        with _parsing("/api/insights"):
            return parse_insight(data)

    async def delete_insight(self, insight_id: str) -> None:
        await self._request("DELETE", "/api/insights", params={"id": insight_id})

    # ------------------------------------------------------------------
    # Categories
    # ------------------------------------------------------------------

    async def list_categories(self) -> list[Category]:
        data = await self._request("GET", "/api/categories")
        with _parsing("/api/categories"):
            return [parse_category(item) for item in data]

    async def create_category(self, name: str) -> Category:
        data = await self._request("POST", "/api/categories", json={"name": name})
        with _parsing("/api/categories"):
            return parse_category(data)

    async def delete_category(self, category_id: str) -> None:
        await self._request("DELETE", "/api/categories", params={"id": category_id})

    # ------------------------------------------------------------------
    # Course-category assignments
    # ------------------------------------------------------------------

    async def list_course_categories(self, course_code: str) -> list[CourseCategory]:
        data = await self._request(
            "GET", "/api/course-categories", params={"courseCode": course_code}
        )
        with _parsing("/api/course-categories"):
            return [parse_course_category(item, course_code=course_code) for item in data]

    async def add_course_category(self, course_code: str, category_id: str) -> CourseCategory:
        data = await self._request(
            "POST",
            "/api/course-categories",
            json={"courseCode": course_code, "categoryId": category_id},
        )
        with _parsing("/api/course-categories"):
            return parse_course_category(data, course_code=course_code)

    async def remove_course_category(self, course_code: str, category_id: str) -> None:
        await self._request(
            "DELETE",
            "/api/course-categories",
            params={"courseCode": course_code, "categoryId": category_id},
        )

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    async def get_batch(self, course_codes: Sequence[str]) -> dict[str, BatchCourseData]:
        data = await self._request(
            "GET", "/api/batch", params={"courseCodes": ",".join(course_codes)}
        )
        result: dict[str, BatchCourseData] = {}
        with _parsing("/api/batch"):
            for code, entry in data.items():
                result[code] = BatchCourseData(
                    insights=[parse_insight(item) for item in entry.get("insights") or []],
                    categories=[
                        parse_course_category(item, course_code=code)
                        for item in entry.get("categories") or []
                    ],
                )
        return result

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
    ) -> Any:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    params=params,
                    json=json,
                    headers=headers,
                )
        except httpx.RequestError as exc:
            await logger.awarning("backend_request_error", method=method, path=path, error=str(exc))
            raise BackendClientError(f"Request failed: {exc}") from exc

        if not response.is_success:
            detail = _error_detail(response)
            await logger.awarning(
                "backend_request_rejected",
                method=method,
                path=path,
                status_code=response.status_code,
                detail=detail,
            )
            raise BackendAPIError(
                f"Backend error {response.status_code}: {detail}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise BackendAPIError(
                "Backend response was not valid JSON",
                status_code=response.status_code,
            ) from exc


@contextmanager
def _parsing(path: str) -> Iterator[None]:
    """Turn a 2xx body of the wrong shape into a BackendAPIError."""
    try:
        yield
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        logger.warning("backend_response_malformed", path=path, error=repr(exc))
        raise BackendAPIError(f"Backend response was malformed: {path}") from exc


def _error_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(body, dict):
        return str(body.get("detail") or body.get("error") or body)
    return str(body)


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if not value:
        return datetime.now(UTC)
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def parse_insight(data: Mapping[str, Any]) -> Insight:
    user = data.get("user")
    return Insight(
        id=str(data["_id"]),
        course_code=data["courseCode"],
        text=data["text"],
        difficulty=int(data["difficulty"]),
        created_at=_parse_datetime(data.get("createdAt")),
        is_anonymous=bool(data.get("isAnonymous", False)),
        user_id=data.get("userId"),
        user=(
            InsightAuthor(id=str(user["_id"]), name=user.get("name"), image=user.get("image"))
            if user
            else None
        ),
    )


def parse_category(data: Mapping[str, Any]) -> Category:
    return Category(
        id=str(data["_id"]),
        name=data["name"],
        created_at=_parse_datetime(data.get("createdAt")),
        user_id=data.get("userId"),
    )


def parse_course_category(
    data: Mapping[str, Any], *, course_code: str | None = None
) -> CourseCategory:
    return CourseCategory(
        id=str(data["_id"]),
        category_id=str(data["categoryId"]),
        category_name=data.get("categoryName"),
        course_code=data.get("courseCode", course_code),
    )
