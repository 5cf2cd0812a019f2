import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List


def _env_bool(name: str, default: bool) -> bool:
    v = (os.environ.get(name) or "").strip().lower()
    if not v:
        return default
    return v in ("true", "1", "yes", "on")


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.environ.get(name)
    if not raw:
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


_DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
]


@dataclass
class Settings:
    """Application settings loaded from environment variables with safe defaults."""

    app_name: str = "League API"
    env: str = "dev"
    database_url: str = "sqlite+aiosqlite:///./league.db"
    log_level: str = "INFO"
    default_season: str = "2024"
    transfers_dir: str = "./public/data"
    max_upload_bytes: int = 5 * 1024 * 1024
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    cors_origins: List[str] = field(default_factory=lambda: list(_DEFAULT_CORS_ORIGINS))
    create_schema: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """Create Settings from environment variables."""
        return cls(
            app_name=os.getenv("APP_NAME", cls.app_name),
            env=os.getenv("ENV", cls.env),
            database_url=os.getenv("DATABASE_URL") or cls.database_url,
            log_level=os.getenv("LOG_LEVEL", cls.log_level),
            default_season=os.getenv("DEFAULT_SEASON", cls.default_season),
            transfers_dir=os.getenv("TRANSFERS_DIR", cls.transfers_dir),
            max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", str(cls.max_upload_bytes))),
            jwt_secret=os.getenv("JWT_SECRET", cls.jwt_secret),
            jwt_algorithm=os.getenv("JWT_ALGORITHM", cls.jwt_algorithm),
            cors_origins=_env_list("CORS_ORIGINS", _DEFAULT_CORS_ORIGINS),
            create_schema=_env_bool("CREATE_SCHEMA", True),
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings.from_env()
