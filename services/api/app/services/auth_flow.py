"""Google login flow over server-side sessions.

Per browser session the flow moves Anonymous -> Authenticated -> Anonymous.
A session only becomes authenticated through a completed callback:

    code -> access token -> Google profile -> user (find or create) -> session

Every step either completes or raises an ``AuthError``; a failed step
leaves the session exactly as it was.
"""

import logging
from dataclasses import dataclass

from app.auth.errors import MissingCodeError, UnauthorizedError
from app.auth.google import GoogleOAuthClient
from app.auth.schemas import GoogleProfile
from app.auth.sessions import (
    USER_ID_KEY,
    SessionState,
    SessionStore,
    new_session_id,
)
from app.models.user import User
from app.services.user_store import UserStore

logger = logging.getLogger(__name__)

PROTECTED_PATH = "/protected"


@dataclass
class LoginStart:
    """What the login page should do: redirect, or render the Google link."""

    redirect_to: str | None = None
    client_id: str | None = None
    authorization_url: str | None = None


@dataclass
class CallbackResult:
    code: str
    access_token: str
    user: User


class AuthFlow:
    """Login, callback, protected access and logout over injected stores."""

    def __init__(
        self,
        users: UserStore,
        sessions: SessionStore,
        google: GoogleOAuthClient,
    ):
        self.users = users
        self.sessions = sessions
        self.google = google

    def start_login(self, session: SessionState) -> LoginStart:
        if session.is_authenticated:
            return LoginStart(redirect_to=PROTECTED_PATH)
        return LoginStart(
            client_id=self.google.client_id,
            authorization_url=self.google.authorization_url(),
        )

    def handle_callback(self, session: SessionState, code: str | None) -> CallbackResult:
        """
        Complete a Google login and mark ``session`` as authenticated.

        Raises:
            MissingCodeError: ``code`` is empty
            TokenExchangeError: the code could not be exchanged
            ProfileFetchError: the profile could not be fetched
            StoreError: the user lookup or insert failed
            SessionPersistError: the session could not be saved
        """
        if not code:
            raise MissingCodeError()

        token = self.google.exchange_code(code)
        profile = self.google.fetch_profile(token.access_token)
        user = self.resolve_user(profile)

        # Signing in always moves the session to a new id
        self._save_with(session, user_id=user.id, rotate=True)
        logger.info("User %s signed in (session %s...)", user.id, session.id[:8])

        return CallbackResult(code=code, access_token=token.access_token, user=user)

    def resolve_user(self, profile: GoogleProfile) -> User:
        """Return the user for the profile's email, creating it on first login."""
        # A failed lookup raises StoreError rather than falling through to create
        existing = self.users.find_by_email(profile.email)
        if existing is not None:
            return existing
        return self.users.create(name=profile.name, email=profile.email)

    def check_protected(self, session: SessionState) -> int:
        if not session.is_authenticated:
            raise UnauthorizedError()
        return session.user_id

    def logout(self, session: SessionState) -> None:
        if not session.is_authenticated:
            raise UnauthorizedError()
        user_id = session.user_id
        self._save_with(session, user_id=None)
        logger.info("User %s logged out", user_id)

    def _save_with(
        self,
        session: SessionState,
        user_id: int | None,
        rotate: bool = False,
    ) -> None:
        """Set (or clear, for None) the session user and persist it.

        With ``rotate`` the session gets a new id and the old row is dropped.
        The in-memory session is restored if the save fails.
        """
        previous_id = session.id
        previous_data = dict(session.data)
        if rotate:
            session.id = new_session_id()
        if user_id is None:
            session.delete(USER_ID_KEY)
        else:
            session.set(USER_ID_KEY, user_id)

        try:
            self.sessions.save(session, replaces=previous_id if rotate else None)
        except Exception:
            session.id = previous_id
            session.data = previous_data
            raise
