"""
Key Registry - Maps secret session keys to player ids and back.

Two tables are kept in lockstep:
    key-to-userid:  session key -> player id
    userid-to-key:  player id   -> session key

bind() and unbind() never write anything themselves. They return the
writes for both directions so the caller can commit them in the same
atomic batch as the game record. A binding is therefore never created
or removed without the membership change that goes with it.
"""

from __future__ import annotations
from dataclasses import dataclass

from ..storage import KeyValueStore, Write, KEY_TO_PLAYER, PLAYER_TO_KEY


@dataclass
class KeyRegistry:
    """Reads bindings from the store; produces batch writes for changes."""
    store: KeyValueStore

    def resolve_player(self, key: str) -> str | None:
        """Player id bound to key, used to authenticate a request."""
        return self.store.get(KEY_TO_PLAYER, key)

    def resolve_key(self, player_id: str) -> str | None:
        """Key bound to a player, used to drop a kicked player's binding."""
        return self.store.get(PLAYER_TO_KEY, player_id)

    def bind(self, key: str, player_id: str) -> list[Write]:
        """Writes establishing both directions of a new binding."""
        return [
            Write.put(KEY_TO_PLAYER, key, player_id),
            Write.put(PLAYER_TO_KEY, player_id, key),
        ]

    def unbind(self, key: str, player_id: str) -> list[Write]:
        """Writes removing both directions of a binding."""
        return [
            Write.remove(KEY_TO_PLAYER, key),
            Write.remove(PLAYER_TO_KEY, player_id),
        ]
