"""
Remote professor rating fetcher.

Resolves instructor names to rating outcomes through the rating cache,
issuing at most one outbound lookup per name at any instant.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import structlog

from course_catalog.core.config import Settings, get_settings
from course_catalog.domain.models import RatingResult
from course_catalog.domain.services.name_matching import names_match
from course_catalog.domain.services.rating_cache import RatingCache
from course_catalog.infrastructure.kv_store import build_kv_store
from course_catalog.libs.rating_client import (
    RatingClient,
    RatingClientError,
    RatingClientProtocol,
)

logger = structlog.get_logger(__name__)

# Placeholder the catalog shows for sections without an assigned instructor
UNASSIGNED_INSTRUCTOR = "Staff"


def should_lookup_rating(professor_name: str | None) -> bool:
    """Return False for names that must never reach the rating endpoint."""
    if not professor_name:
        return False
    name = professor_name.strip()
    return bool(name) and name.lower() != UNASSIGNED_INSTRUCTOR.lower()


class RatingFetcher:
    """Cache-first professor rating lookups with per-name request sharing."""

    def __init__(self, cache: RatingCache, client: RatingClientProtocol) -> None:
        self.cache = cache
        self.client = client
        self._in_flight: dict[str, asyncio.Task[RatingResult]] = {}

    def is_in_flight(self, professor_name: str) -> bool:
        return professor_name.strip() in self._in_flight

    async def fetch_rating(self, professor_name: str) -> RatingResult:
        """Return the rating for professor_name; never raises."""
        key = professor_name.strip()

        cached = self.cache.get(key)
        if cached is not None:
            return cached

        pending = self._in_flight.get(key)
        if pending is None:
            pending = asyncio.create_task(self._lookup(key))
            self._in_flight[key] = pending
            pending.add_done_callback(lambda task: self._release(key, task))
        else:
            logger.debug("rating_lookup_joined", professor=key)

        # Shielded so one cancelled caller does not cancel the lookup for the others
        return await asyncio.shield(pending)

    def _release(self, key: str, task: asyncio.Task[RatingResult]) -> None:
        if self._in_flight.get(key) is task:
            del self._in_flight[key]

    async def _lookup(self, key: str) -> RatingResult:
        try:
            professor = await self.client.lookup(key)
        except RatingClientError as exc:
            # Failures are not cached so the next call retries
            await logger.awarning("rating_lookup_failed", professor=key, error=str(exc))
            return RatingResult.not_found()

        if names_match(key, professor.name):
            result = RatingResult.hit(professor)
        else:
            await logger.ainfo(
                "rating_lookup_mismatch",
                professor=key,
                candidate=professor.name,
            )
            result = RatingResult.not_found()

        self.cache.set(key, result)
        return result


async def fetch_instructor_ratings(
    fetcher: RatingFetcher, instructor_names: Iterable[str]
) -> dict[str, RatingResult]:
    """
    Look up every distinct rateable instructor concurrently.

    Empty names and the unassigned placeholder are skipped without
    touching the cache or the network.
    """
    names: list[str] = []
    for name in instructor_names:
        if should_lookup_rating(name) and name not in names:
            names.append(name)

    if not names:
        return {}

    results = await asyncio.gather(*(fetcher.fetch_rating(name) for name in names))
    return dict(zip(names, results, strict=True))


def create_rating_fetcher(settings: Settings | None = None) -> RatingFetcher:
    """Wire a fetcher with its durable cache and HTTP client from settings."""
    settings = settings or get_settings()
    cache = RatingCache(
        build_kv_store(settings),
        storage_key=settings.rating_cache_key,
        ttl_seconds=settings.rating_cache_ttl_seconds,
    )
    client = RatingClient(
        base_url=settings.rating_api_url,
        school_name=settings.rating_school_name,
        timeout_seconds=settings.http_timeout_seconds,
    )
    return RatingFetcher(cache, client)
