from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from hotel_inventory.core.constants import DEFAULT_API_URL, DEFAULT_PAGE_SIZE


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ==============================
    # Application
    # ==============================
    APP_NAME: str = "Hotel Inventory Client"
    ENVIRONMENT: str = "local"

    # ==============================
    # Logging
    # ==============================
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # ==============================
    # Inventory API
    # ==============================
    INVENTORY_API_URL: str = DEFAULT_API_URL
    INVENTORY_API_TOKEN: Optional[str] = None
    INVENTORY_API_TIMEOUT_SECONDS: float = 15
    INVENTORY_PAGE_SIZE: int = DEFAULT_PAGE_SIZE


@lru_cache
def get_settings() -> Settings:
    """Cached settings loader (once per process)."""
    return Settings()


__all__ = ["Settings", "get_settings"]
