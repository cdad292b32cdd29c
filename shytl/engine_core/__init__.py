"""
Engine Core - Deterministic session state and the rules around it.

The engine is the pure part of the system:
1. Holds GameSession values
2. Applies events via the reducer
3. Authorizes player commands via the guard

Nothing in here touches storage.
"""

from .state import GameSession, Player, LEVELS, DEFAULT_LEVEL, is_valid_level
from .event import Event, EventType, EventPayload, EventResult
from .reducer import Reducer, apply_event
from .guard import Command, AuthResult, authorize

__all__ = [
    "GameSession",
    "Player",
    "LEVELS",
    "DEFAULT_LEVEL",
    "is_valid_level",
    "Event",
    "EventType",
    "EventPayload",
    "EventResult",
    "Reducer",
    "apply_event",
    "Command",
    "AuthResult",
    "authorize",
]
