from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database settings
    DB_URL: Optional[str] = None  # Optional full DB URL
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_NAME: str = "monthly_ledger"
    CREATE_TABLES: bool = True

    # Session settings
    JWT_SECRET: Optional[str] = None
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    COOKIE_NAME: str = "token"
    COOKIE_SECURE: bool = False

    # API settings
    SERVICE_NAME: str = "Monthly Ledger"
    QUERY_TIMEOUT_SECONDS: float = 10.0
    LOG_LEVEL: str = "INFO"
    DEBUG: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        validate_default=True,
        extra="ignore",
    )

    @property
    def async_db_url(self) -> str:
        """Get asynchronous database URL."""
        if self.DB_URL:
            return self.DB_URL
        return f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def session_max_age(self) -> int:
        """Cookie lifetime in seconds, equal to the token lifetime."""
        return self.ACCESS_TOKEN_EXPIRE_MINUTES * 60


@lru_cache()
def get_settings() -> Settings:
    """
    Returns cached Settings instance to avoid reloading .env file on every access
    """
    return Settings()
