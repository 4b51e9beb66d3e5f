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

    # remote authority
    AUTH_BASE_URL: str = "https://loveconnect-backend-kvb9.onrender.com/loveconnect/api"
    HTTP_TIMEOUT_SEC: float = 8.0
    TOKEN_COOKIE_NAME: str = "loveconnect"
    # токен из прошлого запуска, кладётся в cookie jar при старте
    SESSION_TOKEN: str | None = None

    # snapshot cache
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    SNAPSHOT_KEY: str = "user"
    SNAPSHOT_TTL_SEC: int = 0

    LOG_LEVEL: str = "INFO"


settings = Settings()
