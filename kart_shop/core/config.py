"""Shop Service Configuration"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment"""

    model_config = SettingsConfigDict(
        env_file="config/.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Kuching ART Shop"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3000

    # Shop
    currency: str = "MYR"
    low_stock_threshold: int = 10
    seed_demo_catalog: bool = True

    # Mock identity
    secret_key: str = "kart-shop-development-secret-key-change-me"
    token_algorithm: str = "HS256"
    token_ttl_minutes: int = 60
    min_password_length: int = 8
    session_max_age_hours: int = 24
    # Accounts with these emails may manage the catalog and orders
    admin_emails: list[str] = ["admin@kuchingart.my"]


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()


settings = get_settings()
