"""Configuration management using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="STOREFRONT_",
    )

    # Storefront backend
    api_base_url: str = Field(
        default="http://localhost:3000",
        description="Base URL of the storefront backend (product listing and stock routes)",
    )
    http_timeout: float = Field(
        default=10.0,
        description="Timeout in seconds for backend HTTP calls",
    )
    catalog_file: str | None = Field(
        default=None,
        description="JSON file with the products served by the API (list or {\"products\": [...]})",
    )

    # Catalog
    catalog_page_size: int = Field(
        default=12,
        ge=1,
        description="Products per catalog page",
    )
    expiring_soon_days: int = Field(
        default=7,
        ge=0,
        description="Window in days for the expiring-soon flower filter",
    )
    suggestion_limit: int = Field(
        default=5,
        ge=0,
        description="Maximum number of search suggestions",
    )
    suggestion_min_length: int = Field(
        default=2,
        ge=0,
        description="Minimum search term length before suggestions are produced",
    )

    # Stock reconciliation
    stock_sync_interval: float = Field(
        default=30.0,
        ge=0,
        description="Seconds between periodic cart stock reconciliation passes",
    )
    stock_sync_jitter: float = Field(
        default=0.0,
        ge=0,
        description="Maximum random delay in seconds added to each periodic pass",
    )
    stock_sync_throttle: float = Field(
        default=5.0,
        ge=0,
        description="Minimum seconds between two reconciliation attempts",
    )
    stock_keep_grace_period: float = Field(
        default=60.0,
        ge=0,
        description="Seconds a 'keep' decision suppresses re-flagging of the same stock level",
    )
    stock_auto_resolve: bool = Field(
        default=True,
        description="Automatically remove or clamp cart items after each reconciliation pass",
    )
    sync_on_mount: bool = Field(default=True, description="Reconcile when the scheduler starts")
    sync_on_focus: bool = Field(default=True, description="Reconcile when the window regains focus")
    sync_on_visible: bool = Field(default=True, description="Reconcile when the page becomes visible")

    # Observability
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )
    log_json: bool = Field(
        default=True,
        description="Enable JSON structured logging",
    )
    service_name: str = Field(
        default="storefront-core",
        description="Service name reported by the health endpoint and logs",
    )
    service_version: str = Field(
        default="0.1.0",
        description="Service version",
    )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
