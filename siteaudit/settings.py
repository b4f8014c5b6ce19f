# siteaudit/settings.py
import logging
from functools import lru_cache
from typing import List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """
    Application settings for the website audit service.
    Automatically loaded from environment variables and .env.
    """

    APP_NAME: str = "Website Performance Analyzer"

    # API Keys
    GOOGLE_PAGESPEED_API_KEY: str = Field(default="")
    OPENROUTER_API_KEY: str = Field(default="")

    # Text generation
    OPENROUTER_MODEL: str = Field(default="deepseek/deepseek-r1")
    OPENROUTER_APP_TITLE: str = Field(default="Website Audit Assistant")

    # PageSpeed Insights request shape
    PSI_STRATEGY: str = Field(default="desktop")
    PSI_LOCALE: str = Field(default="en")

    # Outbound timeouts (seconds). PSI runs a full Lighthouse pass, so it is slow.
    PSI_TIMEOUT: float = Field(default=90.0, gt=0)
    LLM_TIMEOUT: float = Field(default=60.0, gt=0)

    LOG_LEVEL: str = Field(default="INFO")
    CORS_ORIGINS: List[str] = Field(default_factory=lambda: ["*"])

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("GOOGLE_PAGESPEED_API_KEY", "OPENROUTER_API_KEY", mode="before")
    @classmethod
    def strip_secret(cls, v):
        """
        Railway-style variables sometimes arrive quoted; drop quotes and whitespace.
        """
        if isinstance(v, str):
            return v.strip().strip('"').strip("'")
        return v

    @property
    def has_pagespeed_key(self) -> bool:
        return bool(self.GOOGLE_PAGESPEED_API_KEY)

    @property
    def has_openrouter_key(self) -> bool:
        return bool(self.OPENROUTER_API_KEY)


# Cached singleton to avoid repeated instantiation
@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    if not settings.has_pagespeed_key:
        logger.warning("GOOGLE_PAGESPEED_API_KEY is not set; audits will fail until it is configured.")
    if not settings.has_openrouter_key:
        logger.warning("OPENROUTER_API_KEY is not set; suggestions will use the offline generator.")
    return settings
