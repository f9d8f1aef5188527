from pydantic_settings import BaseSettings
from functools import lru_cache
from pathlib import Path
from typing import List


class Settings(BaseSettings):
    # Database
    # SQLite for development: sqlite+aiosqlite:///./data/verbdrill.db
    DATABASE_URL: str = "sqlite+aiosqlite:///./data/verbdrill.db"

    # Key under which the JSON stats map is stored
    STATS_KEY: str = "VERBS_STATS"

    # Directory holding the deck JSON files
    DATA_DIR: Path = Path(__file__).resolve().parent / "data"

    # Correct answers needed to finish a quiz session
    SESSION_TARGET: int = 10

    LOG_LEVEL: str = "INFO"

    # CORS - comma-separated list of allowed origins
    ALLOWED_ORIGINS: str = "http://localhost:8081,http://127.0.0.1:8081,http://localhost:19006"

    @property
    def cors_origins(self) -> List[str]:
        """Parse comma-separated origins into a list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    return Settings()
