"""
Professor rating client.

Async HTTP client for the external, read-only professor rating endpoint.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from course_catalog.core.config import get_settings
from course_catalog.domain.models import ProfessorRating, ProfessorRatings

logger = structlog.get_logger(__name__)


class RatingClientError(Exception):
    """Base exception for rating client errors."""


class RatingAPIError(RatingClientError):
    """Raised for non-success responses from the rating endpoint."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class RatingsPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    overall: float | None = None
    difficulty: float | None = None
    would_take_again: float | None = Field(default=None, alias="wouldTakeAgain")
    total_ratings: int | None = Field(default=None, alias="totalRatings")


class ProfessorPayload(BaseModel):
    name: str
    link: str | None = None
    department: str | None = None
    ratings: RatingsPayload = Field(default_factory=RatingsPayload)


class RatingLookupResponse(BaseModel):
    """Body returned by the rating endpoint for a successful lookup."""

    school: str | None = None
    professor: ProfessorPayload

    def to_domain(self) -> ProfessorRating:
        ratings = self.professor.ratings
        return ProfessorRating(
            name=self.professor.name,
            link=self.professor.link,
            department=self.professor.department,
            ratings=ProfessorRatings(
                overall=ratings.overall,
                difficulty=ratings.difficulty,
                would_take_again=ratings.would_take_again,
                total_ratings=ratings.total_ratings or 0,
            ),
        )


class RatingClientProtocol(Protocol):
    """Protocol for rating clients (allows mocking)."""

    async def lookup(self, professor_name: str) -> ProfessorRating:
        """Return the endpoint's best candidate for professor_name."""
        ...


class RatingClient:
    """Async client for the professor rating endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        school_name: str | None = None,
        timeout_seconds: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = base_url or settings.rating_api_url
        self.school_name = school_name or settings.rating_school_name
        self.timeout = (
            timeout_seconds if timeout_seconds is not None else settings.http_timeout_seconds
        )
        self._transport = transport

    async def fetch_raw(self, school: str, professor: str) -> Any:
        """Return the endpoint's JSON body untouched."""
        params = {"school": school, "professor": professor}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(self.base_url, params=params)
        except httpx.TimeoutException as exc:
            raise RatingClientError(f"Rating lookup timed out for {professor!r}") from exc
        except httpx.RequestError as exc:
            raise RatingClientError(f"Rating lookup failed: {exc}") from exc

        if response.status_code != 200:
            raise RatingAPIError(
                f"Rating endpoint error {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as exc:
            raise RatingAPIError(
                "Rating response was not valid JSON",
                status_code=response.status_code,
            ) from exc

    async def lookup(self, professor_name: str) -> ProfessorRating:
        """Look up professor_name at the configured school."""
        data = await self.fetch_raw(self.school_name, professor_name)

        try:
            parsed = RatingLookupResponse.model_validate(data)
        except ValidationError as exc:
            await logger.awarning(
                "rating_response_invalid",
                professor=professor_name,
                error=str(exc)[:200],
            )
            raise RatingAPIError("Rating response missing professor data") from exc

        return parsed.to_domain()
