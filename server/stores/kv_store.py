"""
Key-value backends for persisted widget slots.

Each device persists two string slots (game state JSON and theme name).
Backends only store strings; JSON encoding and validation live in
stores/game_store.py.

Backends:
- MemoryStore: process-local dict (tests, ephemeral runs)
- SQLiteStore: single-file database, the default for a local deployment
- RedisStore: shared Redis instance

Every backend raises StorageError for failures of its underlying client,
so callers only need to handle one exception type.
"""

import logging
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

import redis

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when a backend cannot read or write a slot."""
    pass


class KeyValueStore(ABC):
    """String key-value persistence interface."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the value for key, or None if absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key. Deleting a missing key is not an error."""

    def ping(self) -> bool:
        """Check the backend is reachable."""
        return True

    def close(self) -> None:
        pass


class MemoryStore(KeyValueStore):
    """In-process dict backend."""

    def __init__(self):
        self.data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


class SQLiteStore(KeyValueStore):
    """SQLite-backed slot storage."""

    def __init__(self, db_path: str = "wolf.db"):
        self.db_path = Path(db_path)
        self._init_db()

    def _init_db(self):
        """Initialize database schema."""
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS kv (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open {self.db_path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        try:
            with sqlite3.connect(self.db_path) as conn:
                row = conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute(
                    """
                    INSERT INTO kv (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (key, value),
                )
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    def delete(self, key: str) -> None:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e

    def ping(self) -> bool:
        try:
            with sqlite3.connect(self.db_path) as conn:
                conn.execute("SELECT 1").fetchone()
        except sqlite3.Error as e:
            raise StorageError(str(e)) from e
        return True


class RedisStore(KeyValueStore):
    """
    Redis-backed slot storage.

    Key pattern:
    - wolf:{slot_key}  -> String (slot value)
    """

    KEY = "wolf:{key}"

    def __init__(self, redis_client: redis.Redis):
        """
        Initialize with a Redis client.

        Args:
            redis_client: Redis client created with decode_responses=True.
        """
        self.redis = redis_client

    @classmethod
    def create(cls, redis_url: str) -> "RedisStore":
        """
        Create a RedisStore with a new Redis connection.

        Args:
            redis_url: Redis connection URL.

        Returns:
            Configured RedisStore instance.
        """
        client = redis.from_url(redis_url, decode_responses=True)
        try:
            client.ping()
        except redis.RedisError as e:
            raise StorageError(f"Redis connection failed: {e}") from e
        logger.info("RedisStore connected to Redis")
        return cls(client)

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(self.KEY.format(key=key))
        except redis.RedisError as e:
            raise StorageError(str(e)) from e
        if isinstance(value, bytes):
            value = value.decode()
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.redis.set(self.KEY.format(key=key), value)
        except redis.RedisError as e:
            raise StorageError(str(e)) from e

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(self.KEY.format(key=key))
        except redis.RedisError as e:
            raise StorageError(str(e)) from e

    def ping(self) -> bool:
        try:
            return bool(self.redis.ping())
        except redis.RedisError as e:
            raise StorageError(str(e)) from e

    def close(self) -> None:
        self.redis.close()


def create_store(backend: str, sqlite_path: str = "wolf.db", redis_url: str = "") -> KeyValueStore:
    """
    Build a backend by name.

    Args:
        backend: "sqlite", "redis" or "memory".
        sqlite_path: Database file for the sqlite backend.
        redis_url: Connection URL for the redis backend.

    Returns:
        The configured KeyValueStore.

    Raises:
        ValueError: If the backend name is unknown.
        StorageError: If the backend cannot be opened.
    """
    if backend == "sqlite":
        return SQLiteStore(sqlite_path)
    if backend == "redis":
        return RedisStore.create(redis_url)
    if backend == "memory":
        return MemoryStore()
    raise ValueError(f"Unknown storage backend: {backend}")


# Global store instance (initialized on first use)
_store: Optional[KeyValueStore] = None


def get_store(backend: str = "sqlite", sqlite_path: str = "wolf.db", redis_url: str = "") -> KeyValueStore:
    """
    Get or create the global key-value store.

    Arguments are only used the first time the store is created.
    """
    global _store
    if _store is None:
        _store = create_store(backend, sqlite_path, redis_url)
        logger.info(f"Storage backend ready: {backend}")
    return _store


def close_store() -> None:
    """Close the global store."""
    global _store
    if _store is not None:
        _store.close()
        _store = None
