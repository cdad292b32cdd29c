"""
Game State - The shared state of one party game session.

Design principles:
- Immutable: every transition returns a new GameSession
- Serializable: round-trips through the camelCase JSON stored in the backend
- Positional host: the player at index 0 is the host, there is no flag

Card content is not tracked. The session only knows how many cards have been
drawn (the card cursor) and which level the group is playing.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from typing import Any


LEVELS: tuple[int, ...] = (1, 2, 3, 4)
DEFAULT_LEVEL = LEVELS[0]


def is_valid_level(level: Any) -> bool:
    """Check that level is one of LEVELS (bools are not levels)."""
    return isinstance(level, int) and not isinstance(level, bool) and level in LEVELS


@dataclass(frozen=True)
class Player:
    """A player in a session. Created on join, never modified."""
    id: str
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Player:
        player_id = data.get("id")
        name = data.get("name")
        if not isinstance(player_id, str) or not isinstance(name, str):
            raise ValueError(f"Malformed player record: {data!r}")
        return cls(id=player_id, name=name)


@dataclass(frozen=True)
class GameSession:
    """
    Complete session state at a point in time.

    This is the canonical value the reducer operates on and the
    orchestrator persists. Players are kept in join order.
    """
    id: str
    players: tuple[Player, ...] = field(default_factory=tuple)

    # Index into players of whoever is answering, None before the first draw
    current_answerer: int | None = None

    level: int = DEFAULT_LEVEL

    # Number of cards drawn so far
    card_number: int = 0

    @classmethod
    def create(cls, game_id: str) -> GameSession:
        """A fresh session with no players."""
        return cls(id=game_id)

    @property
    def num_players(self) -> int:
        return len(self.players)

    @property
    def host(self) -> Player | None:
        """The host, or None if the session is empty."""
        return self.players[0] if self.players else None

    @property
    def answerer(self) -> Player | None:
        """The player whose turn it is, if any."""
        if self.current_answerer is None:
            return None
        if not 0 <= self.current_answerer < len(self.players):
            return None
        return self.players[self.current_answerer]

    def index_of(self, player_id: str) -> int | None:
        """Position of a player in join order."""
        for i, p in enumerate(self.players):
            if p.id == player_id:
                return i
        return None

    def get_player(self, player_id: str) -> Player | None:
        """Get player by ID."""
        idx = self.index_of(player_id)
        return self.players[idx] if idx is not None else None

    def has_player(self, player_id: str) -> bool:
        return self.index_of(player_id) is not None

    def is_host(self, player_id: str) -> bool:
        return self.host is not None and self.host.id == player_id

    def _copy_with(self, **kwargs) -> GameSession:
        """Create a copy with some fields replaced."""
        return replace(self, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "players": [p.to_dict() for p in self.players],
            "currentAnswerer": self.current_answerer,
            "level": self.level,
            "cardNumber": self.card_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> GameSession:
        """
        Rebuild a session from its stored form.

        Raises ValueError if the record is malformed; a stored record that
        cannot be parsed is a server fault, not a caller error.
        """
        if not isinstance(data, dict):
            raise ValueError(f"Malformed game record: {data!r}")

        game_id = data.get("id")
        if not isinstance(game_id, str):
            raise ValueError("Game record has no id")

        raw_players = data.get("players", [])
        if not isinstance(raw_players, list):
            raise ValueError(f"Game {game_id} has malformed players")
        players = tuple(Player.from_dict(p) for p in raw_players)
        if len({p.id for p in players}) != len(players):
            raise ValueError(f"Game {game_id} has duplicate player ids")

        current = data.get("currentAnswerer")
        if current is not None and (
            not isinstance(current, int)
            or isinstance(current, bool)
            or not 0 <= current < len(players)
        ):
            raise ValueError(f"Game {game_id} has invalid currentAnswerer {current!r}")

        level = data.get("level", DEFAULT_LEVEL)
        if not is_valid_level(level):
            raise ValueError(f"Game {game_id} has invalid level {level!r}")

        card_number = data.get("cardNumber", 0)
        if not isinstance(card_number, int) or card_number < 0:
            raise ValueError(f"Game {game_id} has invalid cardNumber {card_number!r}")

        return cls(
            id=game_id,
            players=players,
            current_answerer=current,
            level=level,
            card_number=card_number,
        )
