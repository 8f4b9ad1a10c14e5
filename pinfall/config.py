"""
Environment configuration.

    PINFALL_ENV              development | production (default development)
    ALLOWED_ORIGINS          comma separated CORS origins (default *)
    PINFALL_STRICT_PINS      reject throws above the standing pin count (default off)
    PINFALL_LOG_LEVEL        logging level name (default WARNING)
    PINFALL_SESSION_MAX_AGE  seconds before a finished game is cleaned up (default 3600)
    PINFALL_HOST             bind host for `pinfall serve` (default 127.0.0.1)
    PINFALL_PORT             bind port for `pinfall serve` (default 8000)
"""

from __future__ import annotations
from dataclasses import dataclass, field
import os


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    strict_pin_count: bool = False
    log_level: str = "WARNING"
    session_max_age: int = 3600
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_env(cls) -> Settings:
        return cls(
            env=os.getenv("PINFALL_ENV", "development"),
            allowed_origins=[
                origin.strip()
                for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
                if origin.strip()
            ],
            strict_pin_count=_env_flag("PINFALL_STRICT_PINS"),
            log_level=os.getenv("PINFALL_LOG_LEVEL", "WARNING").upper(),
            session_max_age=int(os.getenv("PINFALL_SESSION_MAX_AGE", "3600")),
            host=os.getenv("PINFALL_HOST", "127.0.0.1"),
            port=int(os.getenv("PINFALL_PORT", "8000")),
        )
