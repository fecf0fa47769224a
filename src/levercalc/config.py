"""Configuration system using pydantic-settings with environment variable loading."""

from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """Binance USD-M futures API credentials."""

    model_config = SettingsConfigDict(env_prefix="BINANCE_")

    api_key: SecretStr = SecretStr("")
    api_secret: SecretStr = SecretStr("")

    @property
    def has_credentials(self) -> bool:
        """True when both key and secret are configured."""
        return bool(
            self.api_key.get_secret_value() and self.api_secret.get_secret_value()
        )


class FeeSettings(BaseSettings):
    """Fallback commission rates used when account rates cannot be fetched."""

    model_config = SettingsConfigDict(env_prefix="FEES_")

    maker: float = 0.0002  # 0.02%
    taker: float = 0.0004  # 0.04%


class RateSettings(BaseSettings):
    """Calculator rate defaults.

    Mirrors RateDefaults so the defaults can be overridden per deployment
    through RATES_ environment variables.
    """

    model_config = SettingsConfigDict(env_prefix="RATES_")

    maintenance_rate: float = 0.005  # 0.5%
    open_fee_rate: float = 0.0002  # 0.02%
    close_fee_rate: float = 0.0002  # 0.02%
    funding_rate: float = 0.0
    funding_period_hours: float = 8.0


class CacheSettings(BaseSettings):
    """Market data cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    ttl_seconds: float = 60.0


class ApiSettings(BaseSettings):
    """HTTP API server configuration."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8080


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    log_format: Literal["console", "json"] = "console"
    exchange: ExchangeSettings = ExchangeSettings()
    fees: FeeSettings = FeeSettings()
    rates: RateSettings = RateSettings()
    cache: CacheSettings = CacheSettings()
    api: ApiSettings = ApiSettings()
