"""Application configuration loaded from environment variables."""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent / "data"

DEFAULT_BUCKET = "media"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Which backend implements the data store, auth and object storage
    BACKEND: Literal["local", "supabase"] = "local"

    # Local backend
    DATA_DIR: Path = DATA_DIR

    # Hosted backend
    SUPABASE_URL: str = ""
    SUPABASE_KEY: str = ""
    SUPABASE_STORAGE_BUCKET: str = DEFAULT_BUCKET
    HTTP_TIMEOUT: float = 30.0

    # Sessions
    SESSION_COOKIE_NAME: str = "armadmin_session"
    SESSION_TTL_HOURS: int = 24 * 7

    LOG_LEVEL: str = "INFO"

    @property
    def storage_bucket(self) -> str:
        """Bucket used for media uploads when the caller names none."""
        return self.SUPABASE_STORAGE_BUCKET.strip() or DEFAULT_BUCKET

    @property
    def db_path(self) -> Path:
        return self.DATA_DIR / "armadmin.db"

    @property
    def storage_dir(self) -> Path:
        return self.DATA_DIR / "storage"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
