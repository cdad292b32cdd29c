"""
Event System - Events, payloads, and results.

Events represent every change a session can undergo:
1. Membership (add player, remove player)
2. Turn flow (draw card, skip turn)
3. Difficulty (jump to level)

All session changes flow through events.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .state import GameSession, Player


class EventType(Enum):
    """Types of events in the system."""
    ADD_PLAYER = "AddPlayer"
    REMOVE_PLAYER = "RemovePlayer"
    DRAW_CARD = "DrawCard"
    SKIP_TURN = "SkipTurn"
    JUMP_TO_LEVEL = "JumpToLevel"


@dataclass(frozen=True)
class EventPayload:
    """
    Payload for an event.

    Different event types use different fields; the reducer
    validates that the ones it needs are present.
    """
    player: Player | None = None
    player_id: str | None = None
    level: Any = None


@dataclass(frozen=True)
class Event:
    """A single event to be applied to a GameSession."""
    event_type: EventType
    payload: EventPayload = field(default_factory=EventPayload)

    @classmethod
    def add_player(cls, player: Player) -> Event:
        """Factory for add player event."""
        return cls(EventType.ADD_PLAYER, EventPayload(player=player))

    @classmethod
    def remove_player(cls, player_id: str) -> Event:
        """Factory for remove player event."""
        return cls(EventType.REMOVE_PLAYER, EventPayload(player_id=player_id))

    @classmethod
    def draw_card(cls) -> Event:
        return cls(EventType.DRAW_CARD)

    @classmethod
    def skip_turn(cls) -> Event:
        return cls(EventType.SKIP_TURN)

    @classmethod
    def jump_to_level(cls, level: int) -> Event:
        """Factory for level change event."""
        return cls(EventType.JUMP_TO_LEVEL, EventPayload(level=level))


@dataclass
class EventResult:
    """
    Result of applying an event.

    Contains:
    - Whether the event succeeded
    - New session (if succeeded)
    - Error and error code (if failed)
    - Human-readable changes (for logging)
    """
    success: bool
    new_state: GameSession | None = None
    error: str | None = None
    error_code: str | None = None
    state_changes: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> EventResult:
        """Create a failure result."""
        return cls(success=False, error=error, error_code=error_code)

    @classmethod
    def success_with_state(
        cls,
        state: GameSession,
        changes: list[str] | None = None,
    ) -> EventResult:
        """Create a success result with new state."""
        return cls(success=True, new_state=state, state_changes=changes or [])
