"""Domain services."""

from course_catalog.domain.services.category_store import CategoryStore
from course_catalog.domain.services.course_store import CourseStore
from course_catalog.domain.services.name_matching import names_match
from course_catalog.domain.services.rating_cache import RatingCache
from course_catalog.domain.services.rating_fetcher import (
    RatingFetcher,
    fetch_instructor_ratings,
    should_lookup_rating,
)

__all__ = [
    "CategoryStore",
    "CourseStore",
    "RatingCache",
    "RatingFetcher",
    "fetch_instructor_ratings",
    "names_match",
    "should_lookup_rating",
]
