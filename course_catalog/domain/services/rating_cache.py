"""
Expiring cache for professor rating lookups.

Entries live in memory and are mirrored into a durable key/value store
so they survive restarts within their expiry window.
"""

from __future__ import annotations

import json
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from course_catalog.core.config import get_settings
from course_catalog.domain.models import ProfessorRating, RatingResult
from course_catalog.infrastructure.kv_store import KeyValueStore, KeyValueStoreError

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class _CacheEntry:
    result: RatingResult
    timestamp_ms: int


class RatingCache:
    """Professor name -> rating lookup outcome, expiring after a fixed TTL."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        storage_key: str | None = None,
        ttl_seconds: int | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        settings = get_settings()
        self.store = store
        self.storage_key = storage_key or settings.rating_cache_key
        ttl = ttl_seconds if ttl_seconds is not None else settings.rating_cache_ttl_seconds
        self.ttl_ms = ttl * 1000
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = self._load()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> RatingResult | None:
        """Return the cached outcome, dropping it if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._now_ms() - entry.timestamp_ms > self.ttl_ms:
            del self._entries[key]
            logger.debug("rating_cache_expired", key=key)
            return None

        return entry.result

    def set(self, key: str, result: RatingResult) -> None:
        """Store result under key with the current timestamp and persist."""
        self._entries[key] = _CacheEntry(result=result, timestamp_ms=self._now_ms())
        self._persist()

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def clear(self) -> None:
        self._entries.clear()
        self._persist()

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _load(self) -> dict[str, _CacheEntry]:
        try:
            raw = self.store.read(self.storage_key)
        except KeyValueStoreError as exc:
            logger.warning("rating_cache_load_failed", key=self.storage_key, error=str(exc))
            return {}

        if not raw:
            return {}

        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise ValueError("cache root is not an object")
            entries = {key: _decode_entry(value) for key, value in data.items()}
        except (ValueError, TypeError, KeyError, AttributeError) as exc:
            # Corrupt contents start an empty cache; the next set overwrites them
            logger.warning("rating_cache_corrupt", key=self.storage_key, error=str(exc))
            return {}

        logger.info("rating_cache_loaded", key=self.storage_key, entries=len(entries))
        return entries

    def _persist(self) -> None:
        payload = {key: _encode_entry(entry) for key, entry in self._entries.items()}
        try:
            self.store.write(self.storage_key, json.dumps(payload))
        except KeyValueStoreError as exc:
            logger.warning("rating_cache_persist_failed", key=self.storage_key, error=str(exc))


def _encode_entry(entry: _CacheEntry) -> dict[str, Any]:
    professor = entry.result.professor
    return {
        "data": professor.to_payload() if entry.result.found and professor else None,
        "timestamp": entry.timestamp_ms,
    }


def _decode_entry(value: dict[str, Any]) -> _CacheEntry:
    data = value["data"]
    result = (
        RatingResult.hit(ProfessorRating.from_payload(data)) if data else RatingResult.not_found()
    )
    return _CacheEntry(result=result, timestamp_ms=int(value["timestamp"]))
