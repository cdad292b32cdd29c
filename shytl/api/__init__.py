"""
API Module - HTTP interface for game clients.

Exposes the session orchestrator via a REST API:
1. Create a game (become host) or join one with a name
2. Receive a secret session key
3. Draw, skip, change level, leave or kick using that key

All game rules live below this layer.
"""

from .schemas import (
    PlayerInfo,
    GameInfo,
    GameResponse,
    GameKeyResponse,
    EmptyResponse,
    ErrorResponse,
    HealthResponse,
)
from .app import create_app

__all__ = [
    "PlayerInfo",
    "GameInfo",
    "GameResponse",
    "GameKeyResponse",
    "EmptyResponse",
    "ErrorResponse",
    "HealthResponse",
    "create_app",
]
