"""
Session Module - Runs player requests against persisted game sessions.

A session is one game that players join with a name and a secret key:
- Created by the first player, who becomes host
- Stored as a single record in the backend
- Changed only through the orchestrator, which commits each change
  together with any key binding changes in one atomic batch

The registry keeps the key <-> player id mapping consistent with
game membership.
"""

from .registry import KeyRegistry
from .orchestrator import (
    SessionOrchestrator,
    RequestContext,
    JoinResult,
    new_id,
    validate_id,
    validate_level,
    validate_name,
)

__all__ = [
    "KeyRegistry",
    "SessionOrchestrator",
    "RequestContext",
    "JoinResult",
    "new_id",
    "validate_id",
    "validate_level",
    "validate_name",
]
