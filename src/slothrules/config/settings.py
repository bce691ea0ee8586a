"""
Application settings using Pydantic.

Provides environment-based configuration loading with SLOTHRULES_ prefix.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings."""

    # Generated file header
    generator_name: str = "Sloth"
    version: str = "dev"
    project_url: str = "https://github.com/slok/sloth"

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json, console

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        env_prefix = "SLOTHRULES_"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
