"""
PULSE SIGNAL — Central Configuration
All settings are loaded from environment variables with sensible defaults.
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from typing import List, Optional


class DataSourceSettings(BaseSettings):
    """Upstream price API endpoints."""
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    gemini_base_url: str = "https://api.gemini.com/v1"

    # None keeps upstream calls unbounded
    poll_timeout_seconds: Optional[float] = None
    history_days: int = 1

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class SignalSettings(BaseSettings):
    """Signal engine period and level multipliers."""
    sma_period: int = 14

    bullish_entry_mult: float = 1.005
    bullish_stop_mult: float = 0.98
    bullish_target_mult: float = 1.03

    bearish_entry_mult: float = 0.995
    bearish_stop_mult: float = 1.02
    bearish_target_mult: float = 0.97

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class AuthSettings(BaseSettings):
    """Telegram login and email token verification."""
    bot_token: str = ""
    auth_max_age_seconds: int = 86400
    verification_token_ttl_seconds: int = 900
    verification_token_bytes: int = 16  # 128 bits
    token_store_maxsize: int = 10000

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class EmailSettings(BaseSettings):
    """Outbound SMTP credentials and link base."""
    smtp_host: str = "smtp.gmail.com"
    smtp_port: int = 587
    smtp_user: str = ""
    smtp_password: str = ""
    smtp_sender: str = ""
    smtp_starttls: bool = True
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


class AppSettings(BaseSettings):
    """Top-level application settings."""
    app_name: str = "PULSE SIGNAL"
    version: str = "1.0.0"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: List[str] = ["*"]

    data: DataSourceSettings = Field(default_factory=DataSourceSettings)
    signals: SignalSettings = Field(default_factory=SignalSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    email: EmailSettings = Field(default_factory=EmailSettings)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


# Singleton
_settings: Optional[AppSettings] = None


def get_settings() -> AppSettings:
    global _settings
    if _settings is None:
        _settings = AppSettings()
    return _settings
