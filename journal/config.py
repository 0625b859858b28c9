"""Application configuration via environment variables."""

from pathlib import Path
from pydantic_settings import BaseSettings

PROJECT_ROOT = Path(__file__).resolve().parent.parent


class Settings(BaseSettings):
    database_url: str = "sqlite:///./journal.db"
    log_level: str = "INFO"
    cors_origins: list[str] = ["http://localhost:3000"]

    # Identity used when a request carries no X-Journal-User header
    default_user: str = "local"

    # IANA zone for calendar keys; empty means the host's local zone
    timezone: str = ""

    # Quiet period before the result auto-calculator recomputes
    result_debounce_ms: int = 300

    model_config = {"env_prefix": "JOURNAL_", "env_file": ".env"}


settings = Settings()
