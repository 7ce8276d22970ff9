from __future__ import annotations

import asyncio
from typing import Any

from course_catalog.domain.models import ProfessorRating, ProfessorRatings
from course_catalog.infrastructure.kv_store import KeyValueStoreError
from course_catalog.libs.rating_client import RatingClientError


def professor_payload(
    name: str = "John Smith",
    *,
    overall: float = 4.2,
    difficulty: float = 3.1,
    would_take_again: float = 87.0,
    total_ratings: int = 42,
) -> dict[str, Any]:
    """Body shaped like the rating endpoint's successful response."""
    return {
        "school": "University of Florida",
        "professor": {
            "name": name,
            "link": "https://ratings.example.com/professor/1",
            "department": "Computer Science",
            "ratings": {
                "overall": overall,
                "difficulty": difficulty,
                "wouldTakeAgain": would_take_again,
                "totalRatings": total_ratings,
            },
        },
    }


def make_professor(name: str = "John Smith") -> ProfessorRating:
    return ProfessorRating(
        name=name,
        link="https://ratings.example.com/professor/1",
        department="Computer Science",
        ratings=ProfessorRatings(
            overall=4.2, difficulty=3.1, would_take_again=87.0, total_ratings=42
        ),
    )


class MockRatingClient:
    """Rating client double that records calls and can hold them open."""

    def __init__(
        self,
        candidates: dict[str, str] | None = None,
        should_fail: bool = False,
        gate: asyncio.Event | None = None,
    ) -> None:
        # Requested name -> name the endpoint answers with
        self.candidates = candidates or {}
        self.should_fail = should_fail
        self.gate = gate
        self.call_count = 0
        self.calls: list[str] = []

    async def lookup(self, professor_name: str) -> ProfessorRating:
        self.call_count += 1
        self.calls.append(professor_name)

        if self.gate is not None:
            await self.gate.wait()

        if self.should_fail:
            raise RatingClientError("Mocked rating failure")

        return make_professor(self.candidates.get(professor_name, professor_name))


class MemoryKeyValueStore:
    """In-memory key/value store with switchable write failures."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values = dict(initial or {})
        self.fail_writes = False
        self.write_count = 0

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise KeyValueStoreError("disk full")
        self.write_count += 1
        self.values[key] = value


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
