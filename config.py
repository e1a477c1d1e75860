import logging
import os
from dataclasses import dataclass, field
from typing import List


def _split_origins(raw: str) -> List[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def _as_bool(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    database_url: str
    cors_allowed_origins: List[str] = field(default_factory=list)
    cookie_max_age_days: int = 30
    cookie_secure: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise ValueError("DATABASE_URL environment variable is not set")

        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ValueError(f"LOG_LEVEL {log_level!r} is not a logging level")

        return cls(
            database_url=database_url,
            cors_allowed_origins=_split_origins(os.getenv("CORS_ALLOWED_ORIGINS", "")),
            cookie_max_age_days=int(os.getenv("VISITOR_COOKIE_MAX_AGE_DAYS", "30")),
            cookie_secure=_as_bool(os.getenv("VISITOR_COOKIE_SECURE", "true")),
            log_level=log_level,
        )
