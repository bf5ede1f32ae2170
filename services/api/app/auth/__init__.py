"""Google login: OAuth client, server-side sessions and their errors."""

from app.auth.errors import (
    AuthError,
    MissingCodeError,
    ProfileFetchError,
    SessionPersistError,
    StoreError,
    TokenExchangeError,
    UnauthorizedError,
)
from app.auth.google import GoogleOAuthClient
from app.auth.sessions import SessionState, SessionStore

__all__ = [
    "AuthError",
    "MissingCodeError",
    "TokenExchangeError",
    "ProfileFetchError",
    "StoreError",
    "SessionPersistError",
    "UnauthorizedError",
    "GoogleOAuthClient",
    "SessionState",
    "SessionStore",
]
