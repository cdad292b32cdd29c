"""
Tests for the reducer (session transitions).

Tests:
- Event application
- Turn order and wrap-around
- Answerer re-derivation on removal
- Validation failures never raise
"""

import pytest

from ..engine_core.state import GameSession, Player, DEFAULT_LEVEL, LEVELS
from ..engine_core.event import Event, EventType, EventPayload
from ..engine_core.reducer import (
    Reducer, apply_event,
    DUPLICATE_PLAYER, PLAYER_NOT_FOUND, NO_PLAYERS, NO_CURRENT_ANSWERER, INVALID_LEVEL,
)
from .conftest import ALICE, BOB, CAROL


class TestAddPlayer:
    """Tests for AddPlayer."""

    def test_first_player_becomes_host(self, empty_session):
        """The first joiner is host with no answerer."""
        result = apply_event(empty_session, Event.add_player(ALICE))

        assert result.success
        assert result.new_state.players == (ALICE,)
        assert result.new_state.host == ALICE
        assert result.new_state.current_answerer is None

    def test_appends_in_join_order(self, empty_session):
        """Players keep join order; host stays first."""
        state = apply_event(empty_session, Event.add_player(ALICE)).new_state
        state = apply_event(state, Event.add_player(BOB)).new_state

        assert [p.id for p in state.players] == ["alice", "bob"]
        assert state.host == ALICE

    def test_duplicate_id_fails(self, three_player_session):
        """A repeated player id is rejected."""
        result = apply_event(three_player_session, Event.add_player(Player(id="bob", name="Bobby")))

        assert not result.success
        assert result.error_code == DUPLICATE_PLAYER
        assert result.new_state is None

    def test_missing_player_payload_fails(self, empty_session):
        """AddPlayer without a player fails."""
        result = apply_event(empty_session, Event(EventType.ADD_PLAYER, EventPayload()))

        assert not result.success

    def test_does_not_mutate_input(self, empty_session):
        """Transitions return a new session."""
        apply_event(empty_session, Event.add_player(ALICE))

        assert empty_session.players == ()


class TestDrawCard:
    """Tests for DrawCard."""

    def test_first_draw_goes_to_host(self, three_player_session):
        """The first draw starts with the host."""
        result = apply_event(three_player_session, Event.draw_card())

        assert result.success
        assert result.new_state.current_answerer == 0
        assert result.new_state.card_number == 1

    @pytest.mark.parametrize("n", [1, 2, 3])
    def test_draw_wraps(self, n):
        """The turn wraps from the last player to the first."""
        players = (ALICE, BOB, CAROL)[:n]
        for i in range(n):
            state = GameSession(id="g", players=players, current_answerer=i)
            result = apply_event(state, Event.draw_card())
            assert result.new_state.current_answerer == (i + 1) % n

    def test_draw_with_no_players_fails(self, empty_session):
        """Nobody can draw in an empty game."""
        result = apply_event(empty_session, Event.draw_card())

        assert not result.success
        assert result.error_code == NO_PLAYERS

    def test_draw_keeps_level(self, three_player_session):
        """Drawing leaves the level alone."""
        state = three_player_session._copy_with(level=3)
        result = apply_event(state, Event.draw_card())

        assert result.new_state.level == 3


class TestSkipTurn:
    """Tests for SkipTurn."""

    def test_skip_passes_card_without_drawing(self, three_player_session):
        """Skip moves the turn but keeps the card."""
        state = three_player_session._copy_with(current_answerer=1, card_number=4)
        result = apply_event(state, Event.skip_turn())

        assert result.success
        assert result.new_state.current_answerer == 2
        assert result.new_state.card_number == 4

    def test_skip_wraps(self, three_player_session):
        """Skip wraps like a draw."""
        state = three_player_session._copy_with(current_answerer=2)
        result = apply_event(state, Event.skip_turn())

        assert result.new_state.current_answerer == 0

    def test_skip_before_first_draw_fails(self, three_player_session):
        """No answerer means nothing to skip."""
        result = apply_event(three_player_session, Event.skip_turn())

        assert not result.success
        assert result.error_code == NO_CURRENT_ANSWERER

    def test_skip_with_no_players_fails(self, empty_session):
        """Skip in an empty game fails."""
        result = apply_event(empty_session, Event.skip_turn())

        assert result.error_code == NO_PLAYERS


class TestJumpToLevel:
    """Tests for JumpToLevel."""

    @pytest.mark.parametrize("level", LEVELS)
    def test_sets_level(self, three_player_session, level):
        """Every listed level is accepted."""
        result = apply_event(three_player_session, Event.jump_to_level(level))

        assert result.success
        assert result.new_state.level == level

    def test_jump_twice_is_idempotent(self, three_player_session):
        """Repeating a jump changes nothing else."""
        state = three_player_session._copy_with(current_answerer=1, card_number=7)
        once = apply_event(state, Event.jump_to_level(3)).new_state
        twice = apply_event(once, Event.jump_to_level(3)).new_state

        assert once.level == twice.level == 3
        assert once == twice
        assert twice.current_answerer == 1
        assert twice.card_number == 7
        assert twice.players == state.players

    @pytest.mark.parametrize("level", [0, 5, -1, "2", None, True])
    def test_invalid_level_fails(self, three_player_session, level):
        """Only integer levels from LEVELS pass."""
        result = apply_event(three_player_session, Event.jump_to_level(level))

        assert not result.success
        assert result.error_code == INVALID_LEVEL

    def test_default_level(self, empty_session):
        """New sessions start at level 1."""
        assert empty_session.level == DEFAULT_LEVEL == 1


class TestRemovePlayer:
    """Tests for RemovePlayer and the answerer policy."""

    def test_remove_unknown_fails(self, three_player_session):
        """Removing a non-member fails."""
        result = apply_event(three_player_session, Event.remove_player("dave"))

        assert not result.success
        assert result.error_code == PLAYER_NOT_FOUND

    def test_remove_preserves_order(self, three_player_session):
        """Remaining players keep their order."""
        result = apply_event(three_player_session, Event.remove_player("bob"))

        assert result.new_state.players == (ALICE, CAROL)

    def test_removing_host_promotes_next(self, three_player_session):
        """The next player becomes host."""
        result = apply_event(three_player_session, Event.remove_player("alice"))

        assert result.new_state.host == BOB

    def test_absent_answerer_stays_absent(self, three_player_session):
        """Removal before the first draw keeps no answerer."""
        result = apply_event(three_player_session, Event.remove_player("bob"))

        assert result.new_state.current_answerer is None

    def test_removing_earlier_player_keeps_turn_with_same_player(self, three_player_session):
        """The index shifts down to follow the answerer."""
        state = three_player_session._copy_with(current_answerer=2)
        result = apply_event(state, Event.remove_player("alice"))

        assert result.new_state.current_answerer == 1
        assert result.new_state.answerer == CAROL

    def test_removing_later_player_keeps_index(self, three_player_session):
        """Removals after the answerer change nothing."""
        state = three_player_session._copy_with(current_answerer=0)
        result = apply_event(state, Event.remove_player("carol"))

        assert result.new_state.answerer == ALICE

    def test_removing_answerer_passes_turn_to_next(self, three_player_session):
        """The turn moves to the following player."""
        state = three_player_session._copy_with(current_answerer=1)
        result = apply_event(state, Event.remove_player("bob"))

        assert result.new_state.answerer == CAROL

    def test_removing_last_answerer_wraps_to_first(self, three_player_session):
        """Removing the last seat wraps to the first."""
        state = three_player_session._copy_with(current_answerer=2)
        result = apply_event(state, Event.remove_player("carol"))

        assert result.new_state.current_answerer == 0
        assert result.new_state.answerer == ALICE

    def test_removing_only_player_clears_answerer(self):
        """An empty game has no answerer."""
        state = GameSession(id="g", players=(ALICE,), current_answerer=0)
        result = apply_event(state, Event.remove_player("alice"))

        assert result.new_state.players == ()
        assert result.new_state.current_answerer is None

    def test_answerer_never_out_of_range(self, three_player_session):
        """Any removal leaves a valid answerer index."""
        for current in range(3):
            for victim in ("alice", "bob", "carol"):
                state = three_player_session._copy_with(current_answerer=current)
                new_state = apply_event(state, Event.remove_player(victim)).new_state
                assert 0 <= new_state.current_answerer < len(new_state.players)


class TestSerialization:
    """GameSession stored form."""

    def test_camel_case_keys(self, three_player_session):
        """Stored form uses camelCase keys."""
        data = three_player_session._copy_with(current_answerer=1).to_dict()

        assert data == {
            "id": "test_game",
            "players": [
                {"id": "alice", "name": "Alice"},
                {"id": "bob", "name": "Bob"},
                {"id": "carol", "name": "Carol"},
            ],
            "currentAnswerer": 1,
            "level": 1,
            "cardNumber": 0,
        }

    def test_from_dict_defaults(self):
        """Level and cardNumber default when absent."""
        state = GameSession.from_dict({"id": "g", "players": [], "currentAnswerer": None})

        assert state.level == DEFAULT_LEVEL
        assert state.card_number == 0

    @pytest.mark.parametrize("data", [
        {"players": []},
        {"id": "g", "players": [{"id": "a"}]},
        {"id": "g", "players": [], "currentAnswerer": 0},
        {"id": "g", "players": [], "level": 9},
        {"id": "g", "players": [{"id": "a", "name": "A"}, {"id": "a", "name": "B"}]},
    ])
    def test_from_dict_rejects_malformed(self, data):
        """Malformed records raise ValueError."""
        with pytest.raises(ValueError):
            GameSession.from_dict(data)


def test_reducer_instance_matches_helper(three_player_session):
    """apply_event is Reducer().apply."""
    event = Event.draw_card()
    assert Reducer().apply(three_player_session, event) == apply_event(three_player_session, event)
