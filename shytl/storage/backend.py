"""
Storage Backend - The key-value interface the session layer persists through.

A backend offers:
- Single-key reads: get(table, key)
- Single-key writes: set / delete
- Atomic batches: atomic([Write, ...]) applies all writes or none

Atomic batches give all-or-nothing commits, not isolation: two
read-modify-write cycles on the same key can still overwrite each other.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass


# Table names (Redis hash names)
GAMES = "games"
KEY_TO_PLAYER = "key-to-userid"
PLAYER_TO_KEY = "userid-to-key"


@dataclass(frozen=True)
class Write:
    """One entry in an atomic batch. A value of None deletes the key."""
    table: str
    key: str
    value: str | None = None

    @property
    def is_delete(self) -> bool:
        return self.value is None

    @classmethod
    def put(cls, table: str, key: str, value: str) -> Write:
        return cls(table=table, key=key, value=value)

    @classmethod
    def remove(cls, table: str, key: str) -> Write:
        return cls(table=table, key=key, value=None)


class KeyValueStore(ABC):
    """
    Abstract persistence backend.

    Implementations raise TransientStorageError when the backend is
    unreachable or a transaction fails.
    """

    @abstractmethod
    def get(self, table: str, key: str) -> str | None:
        """Read one value, None if absent."""

    @abstractmethod
    def set(self, table: str, key: str, value: str) -> None:
        """Write one value."""

    @abstractmethod
    def delete(self, table: str, key: str) -> None:
        """Remove one key; missing keys are ignored."""

    @abstractmethod
    def atomic(self, writes: list[Write]) -> None:
        """Apply every write as one indivisible unit."""

    def open(self) -> None:
        """Acquire process-wide resources. Called once at startup."""

    def close(self) -> None:
        """Release process-wide resources. Called once at shutdown."""
