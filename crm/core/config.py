# crm/core/config.py

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
import os

# Project root directory
BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


class Settings(BaseSettings):
    """
    Pydantic BaseSettings model holding every application setting.
    Values are loaded from environment variables and the .env file.
    """

    # --- Pydantic Settings ---
    model_config = SettingsConfigDict(
        env_file=os.path.join(BASE_DIR, '.env'),  # .env at the project root
        env_file_encoding='utf-8',
        extra='ignore',                      # variables unknown to the model are ignored
        case_sensitive=True
    )

    # --- Application ---
    APP_NAME: str = "Partner CRM API"
    APP_VERSION: str = "0.1.0"
    APP_DESCRIPTION: str = "Partner CRM API for natural persons, legal entities and their relationships"
    APP_ENV: str = Field("development", description="Application environment (e.g., development, production, testing)")
    DEBUG_MODE: bool = Field(False, description="Enable debug mode for SQL echo and detailed errors")

    # --- Logging ---
    LOG_LEVEL: str = Field("INFO", description="Root log level of the API process")
    CLIENT_LOG_LEVEL: str = Field("INFO", description="Log level handed to browser clients via /public/config")

    # --- Database ---
    DATABASE_URL: SecretStr = Field(
        SecretStr("sqlite+aiosqlite:///./crm.db"),
        description="Async database connection URL (postgresql+asyncpg://... in production)"
    )

    # --- arq / Redis ---
    REDIS_HOST: str = Field("localhost", description="Redis host used by the arq worker")
    REDIS_PORT: int = Field(6379, description="Redis port used by the arq worker")

    # --- Partner domain ---
    DEFAULT_COUNTRY: str = Field("CH", description="Country preselected for new addresses")
    BUILD_TIMESTAMP: str = Field("unknown", description="Build timestamp reported by /public/config")
    PARTNER_EXPORT_PATH: str = Field("/tmp/partners.txt", description="Target file of the partner export task")


settings = Settings()
