"""
Authorization Guard - Who may do what, given the current session.

The guard is a pure check over a freshly loaded session:
- Turn order gates draw and skip
- Host privilege (position 0) gates level changes and kicking others
- Everyone may leave or look at a game they belong to

Target membership for kicks is NOT checked here; a missing target
is a not-found condition, distinct from a permission failure.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .state import GameSession


class Command(Enum):
    """Player commands that need authorization."""
    VIEW = "view"
    DRAW = "draw"
    SKIP = "skip"
    JUMP_TO_LEVEL = "jump_to_level"
    LEAVE = "leave"
    KICK = "kick"


@dataclass(frozen=True)
class AuthResult:
    """Outcome of an authorization check."""
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> AuthResult:
        return cls(allowed=True)

    @classmethod
    def forbid(cls, reason: str) -> AuthResult:
        return cls(allowed=False, reason=reason)


NOT_YOUR_TURN = "It's not your turn!"
HOST_ONLY_LEVEL = "Only the game host can change levels."
KICK_NOT_ALLOWED = "You do not have permission to kick that user."


def _holds_turn(session: GameSession, player_id: str) -> bool:
    answerer = session.answerer
    return answerer is not None and answerer.id == player_id


def authorize(
    session: GameSession,
    player_id: str,
    command: Command,
    target_id: str | None = None,
) -> AuthResult:
    """
    Decide whether player_id may run command against session.

    Args:
        session: The session as just loaded from storage
        player_id: The authenticated acting player
        command: What they want to do
        target_id: Player being kicked (KICK only)
    """
    if command in (Command.VIEW, Command.LEAVE):
        return AuthResult.allow()

    if command == Command.DRAW:
        # The host bootstraps the first draw
        if session.current_answerer is None:
            if session.is_host(player_id):
                return AuthResult.allow()
            return AuthResult.forbid(NOT_YOUR_TURN)
        if _holds_turn(session, player_id):
            return AuthResult.allow()
        return AuthResult.forbid(NOT_YOUR_TURN)

    if command == Command.SKIP:
        if _holds_turn(session, player_id):
            return AuthResult.allow()
        return AuthResult.forbid(NOT_YOUR_TURN)

    if command == Command.JUMP_TO_LEVEL:
        if session.is_host(player_id):
            return AuthResult.allow()
        return AuthResult.forbid(HOST_ONLY_LEVEL)

    if command == Command.KICK:
        if target_id == player_id or session.is_host(player_id):
            return AuthResult.allow()
        return AuthResult.forbid(KICK_NOT_ALLOWED)

    return AuthResult.forbid(f"Unknown command: {command}")
