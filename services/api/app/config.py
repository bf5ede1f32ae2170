from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    app_env: str = "production"

    # Database - can use either DATABASE_URL or separate params
    database_url: str | None = None

    # Separate DB params (for passwords with special characters)
    db_host: str | None = None
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str | None = None
    db_name: str = "postgres"
    db_sslmode: str = "disable"

    # Google OAuth
    google_client_id: str = ""
    google_client_secret: str = ""
    google_redirect_uri: str = "http://localhost:8080/auth/google/callback"
    oauth_timeout_seconds: float = 10.0

    # Server-side sessions
    session_cookie_name: str = "session_id"
    session_expiration_seconds: int = 60 * 60 * 24  # 24 hours of inactivity
    session_gc_interval_seconds: float = 10.0  # 0 disables the sweeper
    session_cookie_secure: bool = False

    @property
    def is_development(self) -> bool:
        """Check if running in the development environment."""
        return self.app_env == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
