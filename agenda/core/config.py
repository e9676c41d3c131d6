from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AnyUrl, Field

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    ENV: str = Field(default="dev", description="dev|staging|prod")
    APP_NAME: str = "Agenda de Contatos API"
    APP_HOST: str = "0.0.0.0"
    PORT: int = 3000

    # DB
    DB_URL: AnyUrl | str = "sqlite+aiosqlite:///./agenda.db"

    # CORS (aberto, como no servidor original)
    CORS_ORIGINS: list[str] = ["*"]

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

@lru_cache
def get_settings() -> Settings:
    return Settings()
