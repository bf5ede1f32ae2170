from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import URL

from app.config import Settings, get_settings

SQLITE_FALLBACK_URL = "sqlite:///./local.db"


def database_url(settings: Settings) -> URL | str:
    """Resolve the database URL: DB_* params, then DATABASE_URL, then local SQLite."""
    # Separate params handle special chars in the password
    if settings.db_host:
        return URL.create(
            drivername="postgresql",
            username=settings.db_user,
            password=settings.db_password,
            host=settings.db_host,
            port=settings.db_port,
            database=settings.db_name,
            query={"sslmode": settings.db_sslmode},
        )
    return settings.database_url or SQLITE_FALLBACK_URL


@lru_cache
def get_engine() -> Engine:
    """Create and cache the database engine."""
    settings = get_settings()
    url = database_url(settings)
    # Log SQL while developing locally
    echo = settings.is_development

    if str(url).startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            echo=echo,
        )

    # PostgreSQL settings
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        echo=echo,
    )


# Default engine instance
engine = get_engine()
