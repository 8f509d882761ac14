"""
Configuration Management Module

Provides centralized configuration using pydantic-settings for environment-based configuration.
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class LedgerConfig(BaseSettings):
    """Savings ledger configuration"""

    model_config = SettingsConfigDict(
        env_prefix="SAVINGS_LEDGER_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Ledger parameters (initial values; changed at runtime via the administrator)
    annual_rate_bps: int = 500
    lock_period_seconds: int = 30 * 24 * 60 * 60  # 30 days

    # Keep principal debited when an outbound transfer fails
    legacy_withdraw_debit: bool = False

    # Storage configuration
    storage_backend: str = "memory"  # memory or sqlite
    database_path: str = "savings_ledger.db"

    # API configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8090
    admin_token: str = "change-me-in-production"

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "json"  # json or text
    log_file: Optional[str] = None  # If None, logs to stdout


# Global configuration instance
config = LedgerConfig()


def get_config() -> LedgerConfig:
    """Get global configuration instance"""
    return config


def reload_config() -> LedgerConfig:
    """Reload configuration from environment"""
    global config
    config = LedgerConfig()
    return config
