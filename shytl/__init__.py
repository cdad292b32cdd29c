"""
SHYTL - Party card game session server.

A small, deterministic core for running multiplayer card game sessions:
- Immutable session state and an event reducer
- Turn order and host permission checks
- Secret session keys bound to players
- Atomic persistence of every change to a key-value store
"""

__version__ = "0.1.0"
