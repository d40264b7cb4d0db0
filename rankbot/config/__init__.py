"""
Application Settings
Load from environment variables
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """Application settings from environment"""

    # ======================
    # Telegram
    # ======================
    TELEGRAM_BOT_TOKEN: Optional[str] = None

    # ======================
    # Logging
    # ======================
    LOG_LEVEL: str = "INFO"

    # ======================
    # Refresh cadence
    # ======================
    MARKET_REFRESH_INTERVAL_SECONDS: int = 300
    GAS_CACHE_TTL_SECONDS: int = 60

    # ======================
    # Upstream HTTP
    # ======================
    HTTP_TIMEOUT_SECONDS: float = 10.0
    COINGECKO_BASE_URL: str = "https://api.coingecko.com/api/v3"
    USER_AGENT: str = "scroll-rank-bot/1.0"

    # ======================
    # Exchange fallback
    # ======================
    MARKET_FALLBACK_ENABLED: bool = False
    SUPPLY_TTL_SECONDS: int = 86_400
    VOLUME_TTL_SECONDS: int = 1_800

    # ======================
    # Reports
    # ======================
    # Off keeps the historical output: local wall clock labeled "UTC".
    REPORT_TIMESTAMP_TRUE_UTC: bool = False

    # ======================
    # Tracking config
    # ======================
    TRACKING_CONFIG_DIR: Optional[str] = None
    SYMBOLS_FILE: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="forbid",
    )


settings = Settings()
