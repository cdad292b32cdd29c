"""
Pydantic Schemas for API - Response models for OpenAPI.

These models define the exact contract between the game clients and
the server. Game bodies use camelCase on the wire (currentAnswerer,
cardNumber) as the web client expects.

Error Codes:
- VALIDATION_ERROR: Malformed input (bad id, name, or level)
- UNAUTHORIZED: Session key missing, unknown, or not in this game
- FORBIDDEN: Not your turn, or host-only action
- NOT_FOUND: Game or player does not exist
- CONFLICT: Game rules reject the action (e.g. no players to draw for)
- STORAGE_UNAVAILABLE: Backend down; safe to retry
"""

from typing import Optional, Any
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..engine_core import GameSession
from ..errors import ErrorCode


# =============================================================================
# Shared Models
# =============================================================================

class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class PlayerInfo(_CamelModel):
    """A player as clients see it."""
    id: str
    name: str


class GameInfo(_CamelModel):
    """Full game session state."""
    id: str
    players: list[PlayerInfo] = Field(default_factory=list)
    current_answerer: Optional[int] = Field(
        None, description="Index into players of whoever is answering"
    )
    level: int
    card_number: int = Field(0, description="Cards drawn so far")

    @classmethod
    def from_session(cls, session: GameSession) -> "GameInfo":
        return cls(
            id=session.id,
            players=[PlayerInfo(id=p.id, name=p.name) for p in session.players],
            current_answerer=session.current_answerer,
            level=session.level,
            card_number=session.card_number,
        )


# =============================================================================
# Response Models
# =============================================================================

class GameResponse(BaseModel):
    """Game state after a request."""
    game: GameInfo


class GameKeyResponse(BaseModel):
    """Game state plus the caller's new secret session key."""
    game: GameInfo
    key: str = Field(..., description="Keep secret; pass as ?key= on later requests")


class EmptyResponse(BaseModel):
    """Returned when the caller no longer has access to the game."""


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str = Field(..., description="Human-readable error message")
    error_code: ErrorCode = Field(..., description="Machine-readable error code")
    details: Optional[dict[str, Any]] = Field(None, description="Additional error context")
    api_version: str = Field("v1", description="API version")


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "shytl"
    version: str
    store: str
