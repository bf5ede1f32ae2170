"""Errors raised by the login flow and its stores.

Each error carries the HTTP status and the message rendered into the
``{"error": ...}`` response body by the handler in ``app.main``.
"""

from fastapi import status


class AuthError(Exception):
    """Base class for login flow errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingCodeError(AuthError):
    """The callback was hit without an authorization code."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Missing code"


class TokenExchangeError(AuthError):
    """Google rejected the code or returned an unreadable token response."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Failed to get access token"


class ProfileFetchError(AuthError):
    """Google's userinfo endpoint failed or returned an unreadable profile."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = "Failed to fetch user info"


class StoreError(AuthError):
    """A user or session store read/write failed."""

    default_message = "Failed to access store"


class SessionPersistError(StoreError):
    default_message = "Failed to save session"


class UnauthorizedError(AuthError):
    """The session carries no authenticated user."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"
