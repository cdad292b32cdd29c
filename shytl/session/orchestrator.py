"""
Session Orchestrator - Runs player requests against stored sessions.

Every request follows the same pipeline:
1. Load the GameSession by id                  (NotFoundError)
2. Resolve the caller's key to a member        (UnauthorizedError)
3. Authorize the command                       (ForbiddenError)
4. Apply the event via the reducer             (ConflictError)
5. Commit the session and any key binding
   changes in ONE atomic batch
6. Return the new session

Nothing is written unless every step succeeds.

CONCURRENCY:
- No in-process lock. Requests on the same game may interleave.
- The atomic batch makes each commit all-or-nothing, but two requests
  that load the same session both compute from it and the later
  commit overwrites the earlier one (lost update). Known limitation.
- A lost join still commits its key binding. That key then resolves to
  a player the stored game no longer lists, so it fails authentication
  with UnauthorizedError, and nothing ever removes the orphaned binding.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable
import json
import logging
import re
import uuid

from ..engine_core import (
    GameSession, Player, Event, Reducer, Command, authorize, LEVELS, is_valid_level,
)
from ..errors import (
    ValidationError, UnauthorizedError, ForbiddenError, NotFoundError, ConflictError,
)
from ..storage import KeyValueStore, Write, GAMES
from .registry import KeyRegistry

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 64
_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")


def new_id() -> str:
    """Default id generator."""
    return str(uuid.uuid4())


@dataclass(frozen=True)
class RequestContext:
    """The resolved game, caller and key for one authenticated request."""
    game: GameSession
    player: Player
    key: str


@dataclass(frozen=True)
class JoinResult:
    """A session plus the secret key minted for the joining player."""
    game: GameSession
    key: str


def validate_name(name: Any) -> str:
    """Display names: non-empty after stripping, bounded length."""
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("name", f"Invalid user name: {name!r}")
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError("name", f"Name longer than {MAX_NAME_LENGTH} characters")
    return name


def validate_id(field: str, value: Any) -> str:
    """Game ids, player ids and session keys share one format."""
    if not isinstance(value, str) or not _ID_PATTERN.match(value):
        raise ValidationError(field, f"Invalid {field}: {value!r}")
    return value


def validate_level(level: Any) -> int:
    """Accepts an int or a decimal string; must be one of LEVELS."""
    if isinstance(level, str):
        try:
            level = int(level.strip())
        except ValueError:
            raise ValidationError("level", f"Not a valid level: {level!r}") from None
    if not is_valid_level(level):
        raise ValidationError(
            "level",
            f"Not a valid level: {level!r} (expected one of {list(LEVELS)})",
        )
    return level


class SessionOrchestrator:
    """
    Sole writer of game records and key bindings.

    Usage:
        orchestrator = SessionOrchestrator(store)

        created = orchestrator.create_game("Alice")
        game = orchestrator.draw_card(created.game.id, created.key)
    """

    def __init__(
        self,
        store: KeyValueStore,
        id_generator: Callable[[], str] = new_id,
    ):
        self.store = store
        self.registry = KeyRegistry(store)
        self.reducer = Reducer()
        self._new_id = id_generator

    # =========================================================================
    # Operations
    # =========================================================================

    def create_game(self, name: Any) -> JoinResult:
        """Start a session with the caller as host."""
        name = validate_name(name)

        player = Player(id=self._new_id(), name=name)
        game = self._apply(GameSession.create(self._new_id()), Event.add_player(player))
        key = self._new_id()

        self._commit(game, self.registry.bind(key, player.id))
        logger.info("Game %s created by player %s", game.id, player.id)
        return JoinResult(game=game, key=key)

    def get_game(self, game_id: Any, key: Any) -> GameSession:
        ctx = self._authenticate(self._load_game(game_id), key)
        self._authorize(ctx, Command.VIEW)
        return ctx.game

    def join_game(self, game_id: Any, name: Any) -> JoinResult:
        """Add a new player to an existing session. No key required."""
        name = validate_name(name)
        game = self._load_game(game_id)

        player = Player(id=self._new_id(), name=name)
        updated = self._apply(game, Event.add_player(player))
        key = self._new_id()

        self._commit(updated, self.registry.bind(key, player.id))
        logger.info("Player %s joined game %s", player.id, updated.id)
        return JoinResult(game=updated, key=key)

    def leave_game(self, game_id: Any, key: Any) -> GameSession:
        ctx = self._authenticate(self._load_game(game_id), key)
        self._authorize(ctx, Command.LEAVE)

        updated = self._apply(ctx.game, Event.remove_player(ctx.player.id))
        self._commit(updated, self.registry.unbind(ctx.key, ctx.player.id))
        logger.info("Player %s left game %s", ctx.player.id, updated.id)
        return updated

    def kick_player(self, game_id: Any, key: Any, target_id: Any) -> GameSession:
        """
        Remove target_id from the game.

        Players may kick themselves; the host may kick anyone.
        A target who is not in the game is NotFound, not Forbidden.
        """
        target_id = validate_id("kickId", target_id)
        ctx = self._authenticate(self._load_game(game_id), key)
        self._authorize(ctx, Command.KICK, target_id=target_id)

        if not ctx.game.has_player(target_id):
            raise NotFoundError("The player you are trying to kick is not in the game.")
        target_key = self.registry.resolve_key(target_id)
        if target_key is None:
            raise NotFoundError("The player you are trying to kick is not in the game.")

        updated = self._apply(ctx.game, Event.remove_player(target_id))
        self._commit(updated, self.registry.unbind(target_key, target_id))
        logger.info("Player %s kicked %s from game %s", ctx.player.id, target_id, updated.id)
        return updated

    def draw_card(self, game_id: Any, key: Any) -> GameSession:
        return self._run(game_id, key, Command.DRAW, Event.draw_card())

    def skip_turn(self, game_id: Any, key: Any) -> GameSession:
        return self._run(game_id, key, Command.SKIP, Event.skip_turn())

    def jump_to_level(self, game_id: Any, key: Any, level: Any) -> GameSession:
        level = validate_level(level)
        updated = self._run(game_id, key, Command.JUMP_TO_LEVEL, Event.jump_to_level(level))
        logger.info("Game %s jumped to level %d", updated.id, level)
        return updated

    # =========================================================================
    # Pipeline steps
    # =========================================================================

    def _run(self, game_id: Any, key: Any, command: Command, event: Event) -> GameSession:
        """Authenticate, authorize, apply and commit a turn/level event."""
        ctx = self._authenticate(self._load_game(game_id), key)
        self._authorize(ctx, command)
        updated = self._apply(ctx.game, event)
        self._commit(updated)
        return updated

    def _load_game(self, game_id: Any) -> GameSession:
        game_id = validate_id("gameId", game_id)
        raw = self.store.get(GAMES, game_id)
        if raw is None:
            raise NotFoundError(f"No game with ID {game_id}")
        return GameSession.from_dict(json.loads(raw))

    def _authenticate(self, game: GameSession, key: Any) -> RequestContext:
        if not isinstance(key, str) or not _ID_PATTERN.match(key):
            raise UnauthorizedError("Invalid user key")

        player_id = self.registry.resolve_player(key)
        if player_id is None:
            raise UnauthorizedError("No user with that key")

        player = game.get_player(player_id)
        if player is None:
            raise UnauthorizedError("You are not a part of this game.")

        return RequestContext(game=game, player=player, key=key)

    def _authorize(
        self,
        ctx: RequestContext,
        command: Command,
        target_id: str | None = None,
    ) -> None:
        result = authorize(ctx.game, ctx.player.id, command, target_id=target_id)
        if not result.allowed:
            logger.info(
                "Player %s denied %s in game %s: %s",
                ctx.player.id, command.value, ctx.game.id, result.reason,
            )
            raise ForbiddenError(result.reason)

    def _apply(self, game: GameSession, event: Event) -> GameSession:
        result = self.reducer.apply(game, event)
        if not result.success:
            logger.info(
                "Event %s rejected for game %s: %s",
                event.event_type.value, game.id, result.error,
            )
            raise ConflictError(result.error, error_code=result.error_code)
        for change in result.state_changes:
            logger.debug("Game %s: %s", game.id, change)
        return result.new_state

    def _commit(self, game: GameSession, binding_writes: list[Write] | None = None) -> None:
        """Write the session and any binding changes as one batch."""
        writes = [Write.put(GAMES, game.id, json.dumps(game.to_dict()))]
        writes.extend(binding_writes or [])
        self.store.atomic(writes)
