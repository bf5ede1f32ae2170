"""Pydantic schemas for API request/response validation."""

from app.schemas.auth import (
    CallbackResponse,
    ErrorResponse,
    LogoutResponse,
    ProtectedResponse,
)
from app.schemas.user import UserResponse

__all__ = [
    # User
    "UserResponse",
    # Auth
    "CallbackResponse",
    "ProtectedResponse",
    "LogoutResponse",
    "ErrorResponse",
]
