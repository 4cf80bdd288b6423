"""Application settings loaded from the environment."""

import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables from .env file
load_dotenv()


def _env_bool(key: str, default: str) -> bool:
    return os.getenv(key, default).lower() == "true"


class Settings(BaseModel):
    """Runtime configuration for the chat service."""

    env: Optional[str] = None
    commit_hash: Optional[str] = None
    host: str = "0.0.0.0"
    port: int = 5000
    database_url: str
    sql_debug: bool = False
    log_level: str = "INFO"
    inactivity_threshold_seconds: float = 10.0
    reaper_interval_seconds: float = 15.0
    reaper_enabled: bool = True

    @property
    def is_prod(self) -> bool:
        return self.env == "prod"

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        env = os.getenv("ENV")
        commit_hash = os.getenv("COMMIT_HASH")
        if not commit_hash and env == "prod":
            raise ValueError("COMMIT_HASH is required for production environments")

        database_url = os.getenv("DATABASE_URL")
        if not database_url:
            raise ValueError("DATABASE_URL environment variable is required")

        return cls(
            env=env,
            commit_hash=commit_hash,
            host=os.getenv("HOST", "0.0.0.0"),  # nosec B104
            port=int(os.getenv("PORT", "5000")),
            database_url=database_url,
            sql_debug=_env_bool("SQL_DEBUG", "false"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            inactivity_threshold_seconds=float(
                os.getenv("INACTIVITY_THRESHOLD_SECONDS", "10")
            ),
            reaper_interval_seconds=float(os.getenv("REAPER_INTERVAL_SECONDS", "15")),
            reaper_enabled=_env_bool("REAPER_ENABLED", "true"),
        )
