"""
Centralized configuration for the Planet Calm backend.

All settings are loaded from environment variables with sensible defaults.
Feature-specific settings are namespaced (e.g., MAPBOX_*, CRM_*, WEBHOOK_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Planet Calm API"
    app_version: str = "1.0.0"
    debug: bool = False
    log_level: str = "info"

    # Server
    host: str = "0.0.0.0"
    port: int = 5000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["GET", "POST", "OPTIONS"]
    cors_allow_headers: list[str] = ["Content-Type", "Authorization", "X-Webhook-Secret"]

    # Frontend URL (CORS origin for the map client)
    frontend_url: str = "http://localhost:3000"

    # Supabase
    supabase_url: str = ""
    supabase_service_role_key: str = ""
    supabase_db_url: str = ""  # direct Postgres URI, migrations only

    # Geocoding (Mapbox)
    mapbox_access_token: str = ""
    mapbox_geocoding_url: str = "https://api.mapbox.com/geocoding/v5/mapbox.places"
    geocoding_timeout_seconds: float = 5.0
    geocoding_types: str = "place,locality,region"

    # Jitter, in degrees
    coordinate_jitter_radius: float = 0.005
    geocoded_jitter_radius: float = 0.008
    fallback_spread_degrees: float = 5.0

    # Webhooks
    webhook_secret: str = ""
    trusted_webhook_ips: list[str] = []

    # Reverse proxies whose X-Forwarded-For header is believed
    trusted_proxies: list[str] = []

    # CRM forwarding (GoHighLevel inbound webhook)
    crm_webhook_url: str = ""
    crm_timeout_seconds: float = 10.0

    # Live updates
    live_queue_size: int = 100

    # Rate limiting (requests per window, window in seconds)
    rate_limit_enabled: bool = True
    rate_limit_read_requests: int = 100
    rate_limit_read_window: int = 15 * 60
    rate_limit_form_requests: int = 10
    rate_limit_form_window: int = 60 * 60
    rate_limit_webhook_requests: int = 30
    rate_limit_webhook_window: int = 60
    rate_limit_strict_requests: int = 5
    rate_limit_strict_window: int = 60 * 60


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
