# storefront/core/config.py

import os
from functools import lru_cache
from typing import Optional
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Application settings.
    Loads values from environment variables (.env file)
    """
    # Content store (Sanity)
    SANITY_PROJECT_ID: str = ""
    SANITY_DATASET: str = "production"
    SANITY_API_VERSION: str = "2024-01-01"
    SANITY_API_TOKEN: Optional[str] = None
    SANITY_USE_CDN: bool = True

    # Webhook
    SANITY_REVALIDATE_SECRET: str = ""

    # Site
    SITE_URL: str = "https://devanshicultureshop.nl"
    SITE_NAME: str = "Devanshi Culture Shop"
    WHATSAPP_NUMBER: str = "+31618264718"

    # Caching (seconds)
    PAGE_CACHE_TTL_SECONDS: int = 3600
    CONTENT_CACHE_TTL_SECONDS: int = 60
    CONTENT_CACHE_MAX_ENTRIES: int = 256

    # Search
    SEARCH_DEBOUNCE_MS: int = 300
    SEARCH_DROPDOWN_LIMIT: int = 4
    SEARCH_MIN_LENGTH: int = 2

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    model_config = ConfigDict(
        env_file=os.environ.get('ENV_FILE', '.env') if os.path.exists('.env') else None,
        case_sensitive=True,
        extra="ignore"
    )


@lru_cache()
def get_settings():
    """Cached settings to avoid loading .env file for every request"""
    return Settings()

def clear_settings_cache():
    """Clear the settings cache - useful when switching between environments"""
    get_settings.cache_clear()

def get_revalidate_secret():
    """Get the webhook secret for signature verification"""
    return get_settings().SANITY_REVALIDATE_SECRET
