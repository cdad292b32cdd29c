"""
Configuration - Settings read from the environment.

A .env file in the working directory is loaded first, so local
overrides do not need to be exported.

    SHYTL_ENV               development | production
    SHYTL_STORE             redis | memory
    REDIS_URL               redis://localhost:2187
    REDIS_MAX_CONNECTIONS   50
    REDIS_SOCKET_TIMEOUT    5.0 (seconds)
    ALLOWED_ORIGINS         comma separated, * for any
    SHYTL_HOST / SHYTL_PORT bind address for `shytl serve`
    SHYTL_LOG_LEVEL         INFO
"""

from __future__ import annotations
from dataclasses import dataclass, field
from functools import lru_cache
import os

from dotenv import load_dotenv

from .storage import KeyValueStore, MemoryStore, RedisStore

STORE_BACKENDS = ("redis", "memory")


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    store: str = "redis"
    redis_url: str = "redis://localhost:2187"
    redis_max_connections: int = 50
    redis_socket_timeout: float = 5.0
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from os.environ. Raises ValueError on bad values."""
        load_dotenv()

        store = os.getenv("SHYTL_STORE", "redis").strip().lower()
        if store not in STORE_BACKENDS:
            raise ValueError(f"SHYTL_STORE must be one of {STORE_BACKENDS}, got {store!r}")

        return cls(
            env=os.getenv("SHYTL_ENV", "development"),
            store=store,
            redis_url=os.getenv("REDIS_URL", "redis://localhost:2187"),
            redis_max_connections=int(os.getenv("REDIS_MAX_CONNECTIONS", "50")),
            redis_socket_timeout=float(os.getenv("REDIS_SOCKET_TIMEOUT", "5.0")),
            allowed_origins=[
                o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()
            ],
            host=os.getenv("SHYTL_HOST", "0.0.0.0"),
            port=int(os.getenv("SHYTL_PORT", "8080")),
            log_level=os.getenv("SHYTL_LOG_LEVEL", "INFO").upper(),
        )

    def create_store(self) -> KeyValueStore:
        """Backend selected by SHYTL_STORE (not yet opened)."""
        if self.store == "memory":
            return MemoryStore()
        return RedisStore(
            url=self.redis_url,
            max_connections=self.redis_max_connections,
            socket_timeout=self.redis_socket_timeout,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()
