"""
Application configuration via pydantic-settings.

All settings are loaded from environment variables (and .env file).

The WhatsApp delivery fallback (simulate success when CallMeBot is
unreachable) is a development convenience; AppSettings refuses to load when
it is switched on in a production environment.
"""

from __future__ import annotations

from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DatabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    mongodb_uri: str
    db_name: str = "account-recovery"


class SupabaseSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    supabase_url: str = ""
    supabase_service_role_key: str = ""


class CaptchaSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    recaptcha_secret: str = ""
    # Self-hosters without a reCAPTCHA key can switch the challenge off
    captcha_required: bool = True


class EmailSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    resend_api_key: str = ""
    resend_from_email: str = "onboarding@resend.dev"
    resend_from_name: str = "MTI Account Recovery"


class WhatsAppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    callmebot_api_key: str = ""
    whatsapp_simulate_on_unreachable: bool = False


class RecoverySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    verification_token_ttl_hours: int = 24
    session_ttl_seconds: int = 1800
    seed_security_questions: bool = True


class LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    log_level: str = "INFO"
    log_format: str = "console"  # "json" in production


class SentrySettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    sentry_dsn: str = ""
    sentry_send_pii: bool = False
    sentry_traces_sample_rate: float = 0.1


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Core
    env: str = "development"
    app_url: str = "http://localhost:5173"
    app_name: str = "MTI Account Recovery"

    cors_origins: list[str] = ["*"]

    # OpenAPI docs URL (None disables the docs UI in production)
    docs_url: Optional[str] = "/docs"

    # Sub-configs (composed via model_validator below)
    db: Optional[DatabaseSettings] = None
    supabase: Optional[SupabaseSettings] = None
    captcha: Optional[CaptchaSettings] = None
    email: Optional[EmailSettings] = None
    whatsapp: Optional[WhatsAppSettings] = None
    recovery: Optional[RecoverySettings] = None
    logging: Optional[LoggingSettings] = None
    sentry: Optional[SentrySettings] = None

    @model_validator(mode="after")
    def _populate_sub_configs(self) -> "AppSettings":
        if self.db is None:
            self.db = DatabaseSettings()
        if self.supabase is None:
            self.supabase = SupabaseSettings()
        if self.captcha is None:
            self.captcha = CaptchaSettings()
        if self.email is None:
            self.email = EmailSettings()
        if self.whatsapp is None:
            self.whatsapp = WhatsAppSettings()
        if self.recovery is None:
            self.recovery = RecoverySettings()
        if self.logging is None:
            self.logging = LoggingSettings()
        if self.sentry is None:
            self.sentry = SentrySettings()

        if self.is_production and self.whatsapp.whatsapp_simulate_on_unreachable:
            raise ValueError(
                "WHATSAPP_SIMULATE_ON_UNREACHABLE must not be enabled in production"
            )

        return self

    @property
    def is_production(self) -> bool:
        return self.env == "production"
