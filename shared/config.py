"""
Shared configuration management for the Books Service.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="ACCESS_",
        env_file=".env",
        case_sensitive=False,
        extra="allow"
    )

    # Environment
    env: str = "local"
    log_level: str = "info"

    # External services
    redis_url: str = "redis://localhost:6379/0"
    postgres_dsn: str = "postgres://localhost:5432/library"

    # Collaborator selection
    store_backend: Literal["postgres", "memory"] = "postgres"
    cache_backend: Literal["redis", "memory"] = "redis"

    # Caching
    cache_key_namespace: str = ""
    cache_timeout_seconds: float = Field(default=2.0, gt=0)

    # Persistence
    store_timeout_seconds: float = Field(default=30.0, gt=0)
    store_pool_min_size: int = 2
    store_pool_max_size: int = 10
    seed_on_startup: bool = True


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = "0.0.0.0"


def get_config(service_name: str, port: int) -> ServiceConfig:
    """Get configuration for a specific service."""
    return ServiceConfig(service_name=service_name, port=port)
