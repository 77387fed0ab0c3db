# vapi_dialer/config.py
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    ENV: str = "dev"
    APP_NAME: str = "Vapi Bulk Dialer"
    LOG_LEVEL: str = "INFO"

    # Vapi gateway config
    VAPI_PRIVATE_KEY: Optional[str] = None
    VAPI_PHONE_NUMBER_ID: Optional[str] = None  # our outbound caller ID at Vapi
    VAPI_BASE_URL: str = "https://api.vapi.ai"
    # None means no explicit timeout (transport default)
    VAPI_TIMEOUT_SECONDS: Optional[float] = None

    DEFAULT_CALL_DELAY_MS: int = 2000

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

_settings: Optional[Settings] = None

def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
