from .base import Base
from .engine import engine, get_engine
from .session import SessionLocal, get_db

__all__ = [
    "Base",
    "engine",
    "get_engine",
    "SessionLocal",
    "get_db",
]
