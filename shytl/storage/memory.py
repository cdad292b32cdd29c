"""
Memory Store - In-process backend for tests and local development.

Tables live in a dict of dicts. One lock covers all tables so an
atomic batch is never observed half-applied. Nothing survives a restart.
"""

from __future__ import annotations
import threading

from .backend import KeyValueStore, Write


class MemoryStore(KeyValueStore):
    """
    Dict-backed KeyValueStore.

    Usage:
        store = MemoryStore()
        store.atomic([Write.put("games", "g1", "{...}")])
        store.get("games", "g1")
    """

    def __init__(self):
        self._tables: dict[str, dict[str, str]] = {}
        self._lock = threading.Lock()

    def get(self, table: str, key: str) -> str | None:
        with self._lock:
            return self._tables.get(table, {}).get(key)

    def set(self, table: str, key: str, value: str) -> None:
        with self._lock:
            self._tables.setdefault(table, {})[key] = value

    def delete(self, table: str, key: str) -> None:
        with self._lock:
            self._tables.get(table, {}).pop(key, None)

    def atomic(self, writes: list[Write]) -> None:
        with self._lock:
            for write in writes:
                if write.is_delete:
                    self._tables.get(write.table, {}).pop(write.key, None)
                else:
                    self._tables.setdefault(write.table, {})[write.key] = write.value

    def snapshot(self, table: str) -> dict[str, str]:
        """Copy of one table, for inspection."""
        with self._lock:
            return dict(self._tables.get(table, {}))

    def clear(self) -> None:
        with self._lock:
            self._tables.clear()
