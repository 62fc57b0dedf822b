"""Application settings and configuration."""
import json
import secrets
from functools import lru_cache
from typing import Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

def _generate_dev_secret() -> str:
    """Generate a random secret for development use.

    Tokens issued with this key won't survive server restarts, which is
    acceptable in development.  Production **must** set explicit secrets
    via environment variables; the startup validator enforces this.
    """
    return secrets.token_urlsafe(32)


def _split_csv(value: str) -> list[str]:
    v = value.strip()
    if v.startswith("["):
        try:
            return [str(item).strip() for item in json.loads(v) if str(item).strip()]
        except json.JSONDecodeError:
            pass
    return [item.strip().strip("'\"") for item in v.split(",") if item.strip()]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "AI Directory Engine"
    app_version: str = "1.0.0"
    site_name: str = "VETORRE"
    debug: bool = False
    environment: str = "development"  # development, staging, production

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Database (unset = local fallback mode)
    database_url: Optional[str] = None
    database_echo: bool = False
    db_pool_size: int = 10
    db_max_overflow: int = 20

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_url(cls, v: Optional[str]) -> Optional[str]:
        """Auto-convert postgresql:// and postgres:// to postgresql+asyncpg://."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                return None
            if v.startswith("postgresql://"):
                return v.replace("postgresql://", "postgresql+asyncpg://", 1)
            if v.startswith("postgres://"):
                return v.replace("postgres://", "postgresql+asyncpg://", 1)
        return v

    # Rate limit storage (memory:// when unset)
    redis_url: Optional[str] = None

    # Authentication / JWT
    jwt_secret_key: str = ""

    @field_validator("jwt_secret_key", mode="before")
    @classmethod
    def fill_empty_secret(cls, v: str) -> str:
        """Generate a random secret when no value is provided."""
        if not v:
            return _generate_dev_secret()
        return v

    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 60 * 24

    # Comma-separated addresses that are granted the admin role on registration
    bootstrap_admin_emails: str = ""

    @property
    def bootstrap_admin_emails_list(self) -> list[str]:
        return [email.lower() for email in _split_csv(self.bootstrap_admin_emails)]

    # CORS - stored as str to prevent pydantic-settings auto-JSON-parse failures.
    # The same allow-list gates the checkout endpoint.
    cors_origins: str = "https://www.vetorre.com,http://localhost:5173,http://localhost:3000"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list, stripping trailing slashes."""
        return [origin.rstrip("/") for origin in _split_csv(self.cors_origins)]

    # Anthropic (text generation)
    anthropic_api_key: Optional[str] = None
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_max_tokens: int = 8192
    anthropic_timeout: int = 300
    anthropic_web_search: bool = True

    # Replicate (image generation)
    replicate_api_token: Optional[str] = None
    replicate_model: str = "google/nano-banana-pro"

    # Stripe (one-time checkout)
    stripe_secret_key: Optional[str] = None
    stripe_publishable_key: Optional[str] = None
    stripe_webhook_secret: Optional[str] = None
    stripe_currency: str = "eur"

    # RSS import
    rss_proxy_url: Optional[str] = "https://api.allorigins.win/get"
    rss_default_url: str = "https://feeds.feedburner.com/TechCrunch/"
    rss_timeout: int = 20

    # Query cache windows (seconds)
    cache_stale_seconds: int = 5 * 60
    cache_retention_seconds: int = 10 * 60

    # Sentry (optional)
    sentry_dsn: Optional[str] = None

    # Public site, also the fallback origin for checkout redirects
    frontend_url: str = "https://www.vetorre.com"

    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development."""
        return self.environment == "development"

    @property
    def is_database_configured(self) -> bool:
        return bool(self.database_url)

    @property
    def is_ai_configured(self) -> bool:
        return bool(self.anthropic_api_key)

    @property
    def is_stripe_configured(self) -> bool:
        return bool(self.stripe_secret_key)

    def validate_production_secrets(self) -> None:
        """Validate that production secrets are configured.

        Missing database, AI or Stripe keys are recognised degraded modes and
        never block startup; a weak JWT secret does.
        """
        if self.environment in ("production", "staging"):
            if len(self.jwt_secret_key) < 32:
                raise ValueError("JWT_SECRET_KEY must be set to at least 32 characters in production!")

        if self.environment == "production" and self.database_echo:
            raise ValueError(
                "DATABASE_ECHO must be False in production to prevent SQL queries in logs"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Automatically validates that production/staging deployments have
    proper secrets configured; the app will refuse to start otherwise.
    """
    s = Settings()
    s.validate_production_secrets()
    return s


# Global settings instance
settings = get_settings()
