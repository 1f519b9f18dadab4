"""
Configuration management for the billing core.
"""

from decimal import Decimal
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class CareLedgerConfig(BaseSettings):
    """Configuration settings for the billing core."""

    # Application Configuration
    environment: str = Field(default="development", alias="ENVIRONMENT")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Billing Configuration
    gst_rate: Decimal = Field(default=Decimal("0.10"), alias="GST_RATE")
    invoice_due_days: int = Field(default=14, ge=0, alias="INVOICE_DUE_DAYS")

    # Organization Configuration
    default_timezone: str = Field(
        default="Australia/Sydney", alias="DEFAULT_TIMEZONE"
    )
    fy_start_month: int = Field(default=7, ge=1, le=12, alias="FY_START_MONTH")
    fy_start_day: int = Field(default=1, ge=1, le=31, alias="FY_START_DAY")

    # Timeline Configuration
    timeline_page_size: int = Field(default=100, ge=1, alias="TIMELINE_PAGE_SIZE")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    @field_validator("gst_rate")
    @classmethod
    def validate_gst_rate(cls, v):
        """Ensure the GST rate is a fraction between 0 and 1."""
        if not Decimal("0") <= v < Decimal("1"):
            raise ValueError(f"GST rate must be a fraction between 0 and 1, got {v}")
        return v

    @field_validator("default_timezone")
    @classmethod
    def validate_timezone(cls, v):
        """Ensure the timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (KeyError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of: {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Ensure environment is valid."""
        valid_envs = ["development", "testing", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"Environment must be one of: {valid_envs}")
        return v.lower()


def load_config(env_file: Optional[str] = None) -> CareLedgerConfig:
    """Load configuration from environment variables and .env file."""
    if env_file:
        load_dotenv(env_file)
    else:
        load_dotenv()

    return CareLedgerConfig()


# Global configuration instance
_config: Optional[CareLedgerConfig] = None


def get_config() -> CareLedgerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(env_file: Optional[str] = None) -> CareLedgerConfig:
    """Reload configuration (useful for testing)."""
    global _config
    _config = load_config(env_file)
    return _config
