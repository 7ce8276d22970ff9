"""Domain models and services."""

from course_catalog.domain.models import (
    Category,
    CategoryStoreState,
    CourseCategory,
    CourseEntry,
    CourseStoreState,
    Insight,
    InsightAuthor,
    ProfessorRating,
    ProfessorRatings,
    RatingResult,
    User,
)

__all__ = [
    "Category",
    "CategoryStoreState",
    "CourseCategory",
    "CourseEntry",
    "CourseStoreState",
    "Insight",
    "InsightAuthor",
    "ProfessorRating",
    "ProfessorRatings",
    "RatingResult",
    "User",
]
