"""
Reducer - Applies events to a game session.

The reducer is the single point of state transition.
All session changes must go through apply_event().

Design principles:
- Pure function: (session, event) -> new session
- Validates before applying
- Returns EventResult with success/failure, never raises on bad input
- Knows nothing about storage, keys or who sent the event
"""

from __future__ import annotations
from dataclasses import dataclass

from .state import GameSession, Player, is_valid_level
from .event import Event, EventType, EventResult


# Reducer error codes
DUPLICATE_PLAYER = "DUPLICATE_PLAYER"
PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
NO_PLAYERS = "NO_PLAYERS"
NO_CURRENT_ANSWERER = "NO_CURRENT_ANSWERER"
INVALID_LEVEL = "INVALID_LEVEL"
INVALID_EVENT = "INVALID_EVENT"


@dataclass
class Reducer:
    """
    Reducer applies events to game sessions.

    Stateless - all state is in GameSession.
    """

    def apply(self, state: GameSession, event: Event) -> EventResult:
        """
        Apply an event to the session.

        Returns EventResult with new session or error.
        """
        handler = self._get_handler(event.event_type)
        if not handler:
            return EventResult.failure(
                f"No handler for event type: {event.event_type}",
                error_code=INVALID_EVENT,
            )
        return handler(state, event)

    def _get_handler(self, event_type: EventType):
        """Get the handler function for an event type."""
        handlers = {
            EventType.ADD_PLAYER: self._handle_add_player,
            EventType.REMOVE_PLAYER: self._handle_remove_player,
            EventType.DRAW_CARD: self._handle_draw_card,
            EventType.SKIP_TURN: self._handle_skip_turn,
            EventType.JUMP_TO_LEVEL: self._handle_jump_to_level,
        }
        return handlers.get(event_type)

    def _handle_add_player(self, state: GameSession, event: Event) -> EventResult:
        """Append a player to the end of the join order."""
        player = event.payload.player
        if not isinstance(player, Player):
            return EventResult.failure("AddPlayer requires a player", error_code=INVALID_EVENT)

        if state.has_player(player.id):
            return EventResult.failure(
                f"Player {player.id} is already in the game",
                error_code=DUPLICATE_PLAYER,
            )

        new_state = state._copy_with(players=state.players + (player,))
        return EventResult.success_with_state(
            new_state,
            changes=[f"{player.name} joined"],
        )

    def _handle_remove_player(self, state: GameSession, event: Event) -> EventResult:
        """
        Remove a player, keeping everyone else in order.

        The turn stays with whoever held it. If the current answerer
        is the one leaving, the turn passes to the next player in order.
        """
        player_id = event.payload.player_id
        removed_idx = state.index_of(player_id) if player_id is not None else None
        if removed_idx is None:
            return EventResult.failure(
                f"Player {player_id} not found",
                error_code=PLAYER_NOT_FOUND,
            )

        removed = state.players[removed_idx]
        new_players = state.players[:removed_idx] + state.players[removed_idx + 1:]

        current = state.current_answerer
        if current is not None:
            if not new_players:
                current = None
            elif removed_idx < current:
                current -= 1
            elif removed_idx == current:
                current = current % len(new_players)

        new_state = state._copy_with(players=new_players, current_answerer=current)
        return EventResult.success_with_state(
            new_state,
            changes=[f"{removed.name} left"],
        )

    def _handle_draw_card(self, state: GameSession, event: Event) -> EventResult:
        """Draw the next card and pass the turn along."""
        if not state.players:
            return EventResult.failure("No players in the game", error_code=NO_PLAYERS)

        new_state = state._copy_with(
            current_answerer=self._next_answerer(state),
            card_number=state.card_number + 1,
        )
        return EventResult.success_with_state(
            new_state,
            changes=[f"Card {new_state.card_number} drawn for {new_state.answerer.name}"],
        )

    def _handle_skip_turn(self, state: GameSession, event: Event) -> EventResult:
        """Pass the current card on to the next player without drawing."""
        if not state.players:
            return EventResult.failure("No players in the game", error_code=NO_PLAYERS)
        if state.current_answerer is None:
            return EventResult.failure(
                "No card has been drawn yet",
                error_code=NO_CURRENT_ANSWERER,
            )

        skipped = state.answerer
        new_state = state._copy_with(current_answerer=self._next_answerer(state))
        return EventResult.success_with_state(
            new_state,
            changes=[f"{skipped.name} skipped to {new_state.answerer.name}"],
        )

    def _handle_jump_to_level(self, state: GameSession, event: Event) -> EventResult:
        level = event.payload.level
        if not is_valid_level(level):
            return EventResult.failure(
                f"Not a valid level: {level!r}",
                error_code=INVALID_LEVEL,
            )

        new_state = state._copy_with(level=level)
        return EventResult.success_with_state(
            new_state,
            changes=[f"Jumped to level {level}"],
        )

    def _next_answerer(self, state: GameSession) -> int:
        """Next index in turn order; the host starts."""
        if state.current_answerer is None:
            return 0
        return (state.current_answerer + 1) % len(state.players)


def apply_event(state: GameSession, event: Event) -> EventResult:
    """
    Convenience function to apply an event.

    Creates a Reducer and applies the event.
    """
    reducer = Reducer()
    return reducer.apply(state, event)
