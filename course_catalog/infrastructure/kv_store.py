"""
Durable local key/value stores backing the rating cache.

Both backends hold opaque text values under string keys; the cache
serializes its whole contents into a single key.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog
from redis import Redis
from redis.exceptions import RedisError

from course_catalog.core.config import Settings, get_settings

logger = structlog.get_logger(__name__)


class KeyValueStoreError(Exception):
    """Raised when the durable store cannot be read or written."""


class KeyValueStore(Protocol):
    """Protocol for synchronous text key/value stores (allows mocking)."""

    def read(self, key: str) -> str | None:
        """Return the stored value or None when the key is absent."""
        ...

    def write(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        ...


class FileKeyValueStore:
    """Stores each key as a JSON text file inside a directory."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise KeyValueStoreError(f"Failed to read {path}: {exc}") from exc

    def write(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_name: str | None = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Write-then-rename so a crash never leaves a half-written cache file
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise KeyValueStoreError(f"Failed to write {path}: {exc}") from exc


class RedisKeyValueStore:
    """Stores keys as plain Redis strings."""

    def __init__(self, client: Redis) -> None:
        self.client = client

    def read(self, key: str) -> str | None:
        try:
            value = self.client.get(key)
        except RedisError as exc:
            raise KeyValueStoreError(f"Failed to read {key} from Redis: {exc}") from exc
        if value is None:
            return None
        if isinstance(value, bytes):
            try:
                return value.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise KeyValueStoreError(f"Value under {key} is not UTF-8 text") from exc
        return value

    def write(self, key: str, value: str) -> None:
        try:
            self.client.set(key, value)
        except RedisError as exc:
            raise KeyValueStoreError(f"Failed to write {key} to Redis: {exc}") from exc


def build_kv_store(settings: Settings | None = None) -> KeyValueStore:
    """Create the durable store selected by RATING_CACHE_BACKEND."""
    settings = settings or get_settings()
    backend = settings.rating_cache_backend.lower()

    if backend == "redis":
        logger.info("kv_store_selected", backend="redis", redis_url=settings.redis_url)
        return RedisKeyValueStore(Redis.from_url(settings.redis_url))

    if backend == "file":
        logger.info("kv_store_selected", backend="file", directory=settings.rating_cache_dir)
        return FileKeyValueStore(settings.rating_cache_dir)

    raise ValueError(f"Unsupported rating cache backend: {settings.rating_cache_backend}")
