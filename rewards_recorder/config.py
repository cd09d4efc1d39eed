"""Configuration management using Pydantic Settings"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_prefix="REWARDS_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Storage (single key-value row holding the award JSON array)
    database_url: str = "sqlite:///./rewards.db"
    storage_key: str = "macau-spending-rewards-awards"

    # Award rules
    expiry_policy: Literal["next_sunday", "fixed_window"] = "next_sunday"
    expiry_window_days: int = 30  # Only used by the fixed_window policy
    reject_past_draw_dates: bool = False
    bank_catalog_version: str = "v2"
    timezone: str = "Asia/Macau"

    # Export metadata
    app_name: str = "澳門消費獎賞記錄器"
    export_version: str = "1.0"

    # Service
    service_name: str = "rewards-recorder"
    log_level: str = "INFO"


settings = Settings()
