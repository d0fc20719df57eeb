"""Key-value storage backends and the note persistence adapter.

A backend only knows how to ``load(key)`` and ``save(key, text)``.
``NotePersistence`` sits on top of a backend and owns the two fixed keys:
the serialized note collection and the theme preference. Malformed stored
data is logged and replaced by defaults, never raised.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Protocol

import redis
from pydantic import ValidationError

from notes_engine.config import STORAGE_KEY, THEME_KEY, Settings
from notes_engine.metrics import (
    STORAGE_LOAD_FAILURES,
    STORAGE_WRITE_DURATION,
    STORAGE_WRITES,
)
from notes_engine.models import Note, NoteCollection

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    """Minimal durable key-value medium."""

    def load(self, key: str) -> Optional[str]: ...

    def save(self, key: str, text: str) -> None: ...


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class MemoryStorage:
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, text: str) -> None:
        self._data[key] = text


class JsonFileStorage:
    """Keeps every key in a single JSON object on disk.

    The file is read once on construction and rewritten atomically on every
    save, so an interrupted write never leaves a truncated file behind.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] = {}
        self._read()

    @property
    def path(self) -> Path:
        """Location of the backing file."""
        return self._path

    def _read(self) -> None:
        if not self._path.exists():
            logger.info("No storage file found at %s — starting fresh", self._path)
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.error("Failed to read %s: %s — starting fresh", self._path, exc)
            return
        if not isinstance(raw, dict):
            logger.error("Storage file %s is not a JSON object — starting fresh", self._path)
            return
        self._data = {k: v for k, v in raw.items() if isinstance(v, str)}
        logger.info("Loaded %d keys from %s", len(self._data), self._path)

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, text: str) -> None:
        self._data[key] = text
        self._write()

    def _write(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class RedisStorage:
    """Redis-backed storage. Handles Redis being unavailable gracefully.

    When the connection fails the backend behaves as empty and drops
    writes with a warning; the engine keeps working in memory.
    """

    def __init__(self, redis_url: str, prefix: str = "notes:") -> None:
        self._redis_url = redis_url
        self._prefix = prefix
        self._client: Optional[redis.Redis] = None

    @property
    def available(self) -> bool:
        """Whether the Redis connection is active."""
        return self._client is not None

    def connect(self) -> None:
        """Connect to Redis. Non-fatal if Redis is unavailable."""
        try:
            self._client = redis.from_url(self._redis_url, decode_responses=True)
            self._client.ping()
            logger.info("Redis storage connected: %s", self._redis_url)
        except redis.RedisError as e:
            logger.warning("Redis unavailable, notes will not be saved: %s", e)
            self._client = None

    def close(self) -> None:
        """Close the Redis connection."""
        if self._client:
            self._client.close()
            self._client = None

    def load(self, key: str) -> Optional[str]:
        if not self._client:
            return None
        try:
            return self._client.get(self._prefix + key)
        except redis.RedisError as e:
            logger.warning("Redis get failed for %s: %s", key, e)
            return None

    def save(self, key: str, text: str) -> None:
        if not self._client:
            logger.warning("Redis unavailable, dropping write for %s", key)
            return
        try:
            self._client.set(self._prefix + key, text)
        except redis.RedisError as e:
            logger.warning("Redis set failed for %s: %s", key, e)


def build_storage(settings: Settings) -> StorageBackend:
    """Create the backend selected by ``settings.storage_backend``."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "redis":
        storage = RedisStorage(settings.redis_url, prefix=settings.redis_prefix)
        storage.connect()
        return storage
    return JsonFileStorage(settings.storage_path)


# ---------------------------------------------------------------------------
# Persistence adapter
# ---------------------------------------------------------------------------


class NotePersistence:
    """Serializes notes and the theme preference to a storage backend."""

    def __init__(
        self,
        backend: StorageBackend,
        notes_key: str = STORAGE_KEY,
        theme_key: str = THEME_KEY,
    ) -> None:
        self._backend = backend
        self._notes_key = notes_key
        self._theme_key = theme_key

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    def load_notes(self) -> list[Note]:
        """Return the stored collection, or an empty one if absent or malformed."""
        raw = self._backend.load(self._notes_key)
        if raw is None:
            logger.info("No saved notes under %r — starting fresh", self._notes_key)
            return []
        try:
            notes = NoteCollection.model_validate_json(raw).root
        except ValidationError as exc:
            STORAGE_LOAD_FAILURES.labels(key=self._notes_key).inc()
            logger.error(
                "Failed to load notes from %r: %s — starting fresh",
                self._notes_key,
                exc,
            )
            return []

        seen: set[str] = set()
        unique: list[Note] = []
        for note in notes:
            if note.id in seen:
                logger.warning("Dropping stored note with duplicate id %s", note.id)
                continue
            seen.add(note.id)
            unique.append(note)
        logger.info("Loaded %d notes from %r", len(unique), self._notes_key)
        return unique

    def save_notes(self, notes: Iterable[Note]) -> None:
        """Write the full collection, in order."""
        payload = NoteCollection(list(notes)).model_dump_json(by_alias=True)
        self._write(self._notes_key, payload)

    def load_theme(self) -> bool:
        """Return the dark-mode flag, defaulting to light."""
        raw = self._backend.load(self._theme_key)
        if raw is None:
            return False
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            STORAGE_LOAD_FAILURES.labels(key=self._theme_key).inc()
            logger.warning("Malformed theme preference %r: %s", raw, exc)
            return False
        if not isinstance(value, bool):
            STORAGE_LOAD_FAILURES.labels(key=self._theme_key).inc()
            logger.warning("Theme preference is not a boolean: %r", value)
            return False
        return value

    def save_theme(self, dark: bool) -> None:
        self._write(self._theme_key, json.dumps(bool(dark)))

    def _write(self, key: str, text: str) -> None:
        with STORAGE_WRITE_DURATION.time():
            self._backend.save(key, text)
        STORAGE_WRITES.labels(key=key).inc()
