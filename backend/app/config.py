# backend/app/config.py

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    database_url: str = "sqlite:///./data/sqlite/fields.db"
    redis_url: str = "redis://localhost:6379/0"
    log_level: str = "INFO"

    # Scheduling
    horizon_days: int = 90
    cancellation_threshold_hours: int = 24
    refund_threshold_hours: int = 24
    slots_cache_ttl_seconds: int = 86400
    default_timezone: str = "Europe/London"
    # reject, open or closed
    unconfigured_days_policy: str = "reject"

    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        extra="ignore",
    )

    @property
    def resolved_database_url(self) -> str:
        url = self.database_url
        if url.startswith("sqlite:///./"):
            # Relative sqlite path → absolute from project root
            relative_path = url.replace("sqlite:///./", "")
            absolute_path = BASE_DIR / relative_path
            return f"sqlite:///{absolute_path}"
        return url


settings = Settings()
