"""FastAPI dependencies that assemble the login flow for a request."""

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from app.auth.google import GoogleOAuthClient
from app.auth.sessions import SessionState, SessionStore
from app.config import Settings, get_settings
from app.database.session import get_db
from app.services.auth_flow import AuthFlow
from app.services.user_store import UserStore


def get_google_client(settings: Settings = Depends(get_settings)) -> GoogleOAuthClient:
    """Google OAuth client built from settings. Tests override this."""
    return GoogleOAuthClient.from_settings(settings)


def get_session_store(
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> SessionStore:
    return SessionStore.from_settings(db, settings)


def get_user_store(db: Session = Depends(get_db)) -> UserStore:
    return UserStore(db)


def get_auth_flow(
    users: UserStore = Depends(get_user_store),
    sessions: SessionStore = Depends(get_session_store),
    google: GoogleOAuthClient = Depends(get_google_client),
) -> AuthFlow:
    """
    Login flow wired to the request's stores.

    Usage:
        @router.get("/protected")
        def protected(
            session: SessionState = Depends(get_session),
            flow: AuthFlow = Depends(get_auth_flow),
        ):
            ...
    """
    return AuthFlow(users=users, sessions=sessions, google=google)


def get_session(
    request: Request,
    sessions: SessionStore = Depends(get_session_store),
) -> SessionState:
    """Current browser session (created lazily, unsaved until the flow saves it)."""
    return sessions.get(request)
