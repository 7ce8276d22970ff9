"""Shared library helpers."""

from course_catalog.libs.backend_client import (
    BackendAPIError,
    BackendClient,
    BackendClientError,
    BatchCourseData,
)
from course_catalog.libs.rating_client import (
    RatingAPIError,
    RatingClient,
    RatingClientError,
    RatingClientProtocol,
)

__all__ = [
    "BackendAPIError",
    "BackendClient",
    "BackendClientError",
    "BatchCourseData",
    "RatingAPIError",
    "RatingClient",
    "RatingClientError",
    "RatingClientProtocol",
]
