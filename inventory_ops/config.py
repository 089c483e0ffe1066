"""
Configuration management.
Simple .env based config, one shop per deployment.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 8080

    # Webhooks
    shopify_api_secret: str = ""  # HMAC secret shared with Shopify

    # Admin API
    shop_domain: str = ""  # e.g., "mystore.myshopify.com"
    shopify_access_token: str = ""
    shopify_api_version: str = "2025-01"

    # Operations API
    admin_api_token: str = ""  # empty disables /api/operations
    archive_vendor: str = ""

    # Database
    database_path: str = "./data/app.db"

    # Logging
    log_level: str = "INFO"


# Global settings instance
settings = Settings()
