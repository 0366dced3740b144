from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


def _find_env_file() -> str | None:
    cur = Path(__file__).resolve()
    for parent in [cur.parent, *cur.parents]:
        candidate = parent / ".env"
        if candidate.exists():
            return str(candidate)
    return None


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=_find_env_file() or ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # backend
    BACKEND_URL: str = "http://localhost:2008"
    HTTP_TIMEOUT_SEC: float = 8.0

    # session persistence
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    SESSION_MAX_AGE_SEC: int = 24 * 60 * 60

    # timings
    STATUS_INTERVAL_SEC: float = 30.0
    LOGIN_REDIRECT_DELAY_SEC: float = 1.5
    EXPIRED_LOGOUT_DELAY_SEC: float = 2.0

    # panel form
    DEFAULT_RAM: str = "1000"
    RAM_CHOICES: list[str] = [
        "1000", "2000", "3000", "4000", "5000",
        "6000", "7000", "8000", "9000", "10000", "0",
    ]

    LOG_LEVEL: str = "INFO"


settings = Settings()
