# phone_auth/core/config.py
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_DING_API_URL = "https://api.ding.live/v1"


@dataclass(frozen=True)
class DingConfig:
    """Static credentials for the Ding API, fixed for the process lifetime."""
    api_key: str
    customer_uuid: str
    api_url: str = DEFAULT_DING_API_URL
    timeout_seconds: float = 10.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Application Settings
    APP_NAME: str = "Phone Auth API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    DOCS_ENABLED: bool = True

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Ding Settings
    DING_API_KEY: str = ""
    DING_CUSTOMER_UUID: str = ""
    DING_API_URL: str = DEFAULT_DING_API_URL
    DING_TIMEOUT_SECONDS: float = 10.0

    # Firebase Settings
    SA_FILE_PATH: Optional[str] = None
    FIREBASE_PROJECT_ID: str = ""
    FIREBASE_PRIVATE_KEY: str = ""
    FIREBASE_CLIENT_EMAIL: str = ""

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def firebase_private_key(self) -> str:
        # Keys pasted into env files usually carry escaped newlines
        return self.FIREBASE_PRIVATE_KEY.replace("\\n", "\n")

    def ding_config(self) -> DingConfig:
        return DingConfig(
            api_key=self.DING_API_KEY,
            customer_uuid=self.DING_CUSTOMER_UUID,
            api_url=self.DING_API_URL.rstrip("/"),
            timeout_seconds=self.DING_TIMEOUT_SECONDS,
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
