"""Response schemas for the login flow endpoints."""

from pydantic import BaseModel

from app.schemas.user import UserResponse


class CallbackResponse(BaseModel):
    """Result of a completed Google callback."""

    code: str
    access_token: str
    data: UserResponse


class ProtectedResponse(BaseModel):
    message: str
    user_id: int


class LogoutResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    """Body of every error response."""

    error: str
