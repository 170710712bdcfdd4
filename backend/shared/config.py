"""
Centralized configuration for the Conversation Tutor backend.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings should be namespaced (e.g., STRIPE_*, SUPABASE_*, OPENAI_*).
"""

from functools import lru_cache
from typing import Literal, Optional
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
    app_name: str = "Conversation Tutor API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""  # Direct Postgres URL, used by run_migrations.py

    # OpenAI (speech-to-text, scoring, text-to-speech)
    openai_api_key: str = ""
    openai_base_url: Optional[str] = None
    openai_chat_model: str = "gpt-4o-mini"
    openai_stt_model: str = "whisper-1"
    openai_tts_model: str = "tts-1"
    openai_tts_voice: str = "onyx"
    openai_timeout: float = 60.0
    coach_backend: Literal["auto", "openai", "fallback"] = "auto"

    # Stripe
    stripe_secret_key: str = ""
    stripe_webhook_secret: str = ""
    stripe_price_id_monthly: str = ""
    stripe_price_id_annual: str = ""

    # Frontend URLs (for redirects)
    frontend_url: str = "http://localhost:3000"

    # Quotas
    free_weekly_simulations: int = 3
    history_limit_free: int = 10
    history_limit_paid: int = 100

    @property
    def supabase_configured(self) -> bool:
        """Whether the service-role Supabase client can be built."""
        return bool(self.supabase_url and self.supabase_service_role_key)

    @property
    def stripe_configured(self) -> bool:
        return bool(self.stripe_secret_key)

    @property
    def stripe_price_ids(self) -> list[str]:
        """Configured price IDs accepted by checkout."""
        return [
            price_id
            for price_id in (self.stripe_price_id_monthly, self.stripe_price_id_annual)
            if price_id
        ]


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
