from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, SecretStr
from typing import List


class Settings(BaseSettings):
    PROJECT_NAME: str = "CampusMatch"
    # postgresql+asyncpg://... in production, sqlite+aiosqlite://... in tests
    DATABASE_URL: str
    SQL_ECHO: bool = False
    SECRET_KEY: SecretStr
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days
    API_PREFIX: str = "/api"
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # Discovery feed
    DISCOVERY_PAGE_SIZE: int = 10
    DISCOVERY_MAX_PAGE_SIZE: int = 50

    # Messaging
    MESSAGES_PAGE_SIZE: int = 50
    MESSAGE_MAX_LENGTH: int = Field(default=1000, description="Maximum characters in one chat message")

    # How many times a match transition is attempted when a concurrent
    # request for the same pair commits first
    MATCH_WRITE_ATTEMPTS: int = 2

    model_config = SettingsConfigDict(env_file='.env', extra='ignore')

settings = Settings()
