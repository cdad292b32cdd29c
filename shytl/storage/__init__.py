"""Storage backends - the key-value store the session layer persists through."""

from .backend import KeyValueStore, Write, GAMES, KEY_TO_PLAYER, PLAYER_TO_KEY
from .memory import MemoryStore
from .redis_store import RedisStore

__all__ = [
    "KeyValueStore",
    "Write",
    "GAMES",
    "KEY_TO_PLAYER",
    "PLAYER_TO_KEY",
    "MemoryStore",
    "RedisStore",
]
