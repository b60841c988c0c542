from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SECRET_KEY = "change-this-secret-key-in-production"


class Settings(BaseSettings):
    """Application settings."""

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./petits_moulins.db"

    # Application
    ENV: str = "production"
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    APP_NAME: str = "Les Petits Moulins API"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"

    # Resend API
    RESEND_API_KEY: str = ""
    RESEND_FROM_EMAIL: str = "noreply@example.com"

    # One-time verification codes
    CODE_TTL_MINUTES: int = 10
    CODE_HASH_ROUNDS: int = Field(default=12, ge=4, le=31)

    # Session tokens
    SESSION_TTL_MINUTES: int = 2 * 60

    # Security
    RATE_LIMIT_MAX: int = 5
    RATE_LIMIT_WINDOW_SECONDS: int = 15 * 60

    # Pydantic v2 compatible settings: read .env and ignore extra env vars
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("ENV", mode="before")
    @classmethod
    def normalize_env(cls, value: str) -> str:
        return (value or "").strip().lower() or "production"

    @property
    def is_development(self) -> bool:
        return self.ENV == "development"


def validate_security(current: Settings) -> None:
    """Fail fast when running production with insecure defaults."""
    if current.ENV != "production":
        return

    secret = current.SECRET_KEY
    if not secret or secret == DEFAULT_SECRET_KEY or len(secret) < 32:
        raise ValueError("SECRET_KEY must be set to a strong value in production.")

    if current.DATABASE_URL.startswith("sqlite"):
        raise ValueError("Use PostgreSQL in production; sqlite is only for local/dev.")


settings = Settings()


validate_security(settings)
