"""Stores package for Wolf tracker persistence."""

from .kv_store import (
    KeyValueStore,
    MemoryStore,
    SQLiteStore,
    RedisStore,
    StorageError,
    create_store,
    get_store,
    close_store,
)
from .game_store import GameStore, ThemeStore, parse_state

__all__ = [
    # Backends
    "KeyValueStore",
    "MemoryStore",
    "SQLiteStore",
    "RedisStore",
    "StorageError",
    "create_store",
    "get_store",
    "close_store",
    # Slots
    "GameStore",
    "ThemeStore",
    "parse_state",
]
