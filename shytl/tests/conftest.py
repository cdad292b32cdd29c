"""
Pytest fixtures for SHYTL tests.
"""

import itertools
import json

import pytest

from ..engine_core.state import GameSession, Player
from ..session import SessionOrchestrator, JoinResult
from ..storage import MemoryStore, GAMES, KEY_TO_PLAYER, PLAYER_TO_KEY


ALICE = Player(id="alice", name="Alice")
BOB = Player(id="bob", name="Bob")
CAROL = Player(id="carol", name="Carol")


@pytest.fixture
def empty_session() -> GameSession:
    """A session nobody has joined."""
    return GameSession.create("test_game")


@pytest.fixture
def three_player_session() -> GameSession:
    """Alice (host), Bob, Carol; no card drawn yet."""
    return GameSession(id="test_game", players=(ALICE, BOB, CAROL))


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def id_generator():
    """Deterministic ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def orchestrator(store, id_generator) -> SessionOrchestrator:
    return SessionOrchestrator(store, id_generator=id_generator)


@pytest.fixture
def alice_game(orchestrator) -> JoinResult:
    """A game created by Alice."""
    return orchestrator.create_game("Alice")


def assert_registry_consistent(store: MemoryStore) -> None:
    """
    Both key tables agree, and every bound player belongs to
    exactly one stored game.
    """
    key_to_player = store.snapshot(KEY_TO_PLAYER)
    player_to_key = store.snapshot(PLAYER_TO_KEY)

    assert len(key_to_player) == len(player_to_key)
    for key, player_id in key_to_player.items():
        assert player_to_key.get(player_id) == key

    games = [GameSession.from_dict(json.loads(raw)) for raw in store.snapshot(GAMES).values()]
    for player_id in player_to_key:
        memberships = [g for g in games if g.has_player(player_id)]
        assert len(memberships) == 1, f"{player_id} is in {len(memberships)} games"

    # Every member has a binding
    for game in games:
        for player in game.players:
            assert player.id in player_to_key
