from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any


@dataclass(slots=True)
class User:
    """Represents an authenticated actor within the system."""

    user_id: str
    name: str | None = None
    image: str | None = None
    email: str = ""


@dataclass(slots=True, frozen=True)
class InsightAuthor:
    """Public profile embedded into non-anonymous insights."""

    id: str
    name: str | None = None
    image: str | None = None


@dataclass(slots=True, frozen=True)
class Insight:
    """A user's free-text comment and difficulty rating for a course."""

    id: str
    course_code: str
    text: str
    difficulty: int
    created_at: datetime
    is_anonymous: bool = False
    user_id: str | None = None
    user: InsightAuthor | None = None


@dataclass(slots=True, frozen=True)
class Category:
    """A user-owned label for grouping courses."""

    id: str
    name: str
    created_at: datetime
    user_id: str | None = None


@dataclass(slots=True, frozen=True)
class CourseCategory:
    """One course assigned to one of the caller's categories."""

    id: str
    category_id: str
    category_name: str | None = None
    course_code: str | None = None


@dataclass(slots=True, frozen=True)
class CourseEntry:
    """Insights and assigned category ids cached for a single course code."""

    insights: tuple[Insight, ...] = ()
    categories: tuple[str, ...] = ()


@dataclass(slots=True, frozen=True)
class ProfessorRatings:
    overall: float | None = None
    difficulty: float | None = None
    would_take_again: float | None = None
    total_ratings: int = 0


@dataclass(slots=True, frozen=True)
class ProfessorRating:
    """Aggregate student ratings for a single professor."""

    name: str
    link: str | None = None
    department: str | None = None
    ratings: ProfessorRatings = field(default_factory=ProfessorRatings)

    def to_payload(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "link": self.link,
            "department": self.department,
            "ratings": {
                "overall": self.ratings.overall,
                "difficulty": self.ratings.difficulty,
                "wouldTakeAgain": self.ratings.would_take_again,
                "totalRatings": self.ratings.total_ratings,
            },
        }

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> ProfessorRating:
        ratings = data.get("ratings") or {}
        return cls(
            name=data["name"],
            link=data.get("link"),
            department=data.get("department"),
            ratings=ProfessorRatings(
                overall=ratings.get("overall"),
                difficulty=ratings.get("difficulty"),
                would_take_again=ratings.get("wouldTakeAgain"),
                total_ratings=ratings.get("totalRatings") or 0,
            ),
        )


@dataclass(slots=True, frozen=True)
class RatingResult:
    """Outcome of a professor rating lookup: found with data, or not found."""

    found: bool
    professor: ProfessorRating | None = None

    @classmethod
    def hit(cls, professor: ProfessorRating) -> RatingResult:
        return cls(found=True, professor=professor)

    @classmethod
    def not_found(cls) -> RatingResult:
        return cls(found=False)


@dataclass(slots=True, frozen=True)
class CourseStoreState:
    """Snapshot published by the course data store after every change."""

    course_data: Mapping[str, CourseEntry] = field(
        default_factory=lambda: MappingProxyType({})
    )
    all_categories: tuple[Category, ...] = ()
    is_loading: bool = False
    error: str | None = None


@dataclass(slots=True, frozen=True)
class CategoryStoreState:
    """Snapshot published by the category store after every change."""

    categories: tuple[Category, ...] = ()
    course_categories: Mapping[str, tuple[str, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    is_loading: bool = False
    error: str | None = None
