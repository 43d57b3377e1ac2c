# app/core/config.py

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    """Runtime configuration, read from the environment (and .env) once."""

    database_url: str
    jwt_secret_key: str
    session_secret: str = ""
    environment: str = "development"
    log_level: str = "INFO"
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60
    cookie_name: str = "jwt"
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    redis_url: str = "redis://localhost:6379/0"
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise RuntimeError(
                "Environment variable DATABASE_URL is not set. "
                "Please add a .env file with:\n"
                "    DATABASE_URL=postgresql://<your_user>@localhost:5432/badgefinder"
            )

        jwt_secret_key = os.getenv("JWT_SECRET_KEY")
        if not jwt_secret_key:
            raise RuntimeError("Missing JWT_SECRET_KEY environment variable")

        return cls(
            database_url=database_url,
            jwt_secret_key=jwt_secret_key,
            session_secret=os.getenv("SESSION_SECRET", ""),
            environment=os.getenv("ENVIRONMENT", "development").lower(),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            algorithm=os.getenv("ALGORITHM", "HS256"),
            access_token_expire_minutes=int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60")),
            cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "")) or ["http://localhost:3000"],
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            rate_limit_requests=int(os.getenv("RATE_LIMIT_REQUESTS", "100")),
            rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", str(15 * 60))),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
