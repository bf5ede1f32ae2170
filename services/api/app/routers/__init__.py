"""API routers."""

from app.routers import auth, health, users

__all__ = [
    "auth",
    "health",
    "users",
]
