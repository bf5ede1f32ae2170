"""Server-side sessions keyed by an opaque cookie.

A browser without a (live) session cookie gets a fresh, unsaved
``SessionState``. Nothing is written until ``SessionStore.save`` is called,
which also slides the expiry forward. Expired rows are treated as absent
and deleted by ``run_session_gc_loop``.
"""

import asyncio
import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any

from fastapi import Request, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.errors import SessionPersistError, StoreError
from app.config import Settings
from app.database.base import utc_now
from app.models.http_session import HttpSession

logger = logging.getLogger(__name__)

USER_ID_KEY = "user_id"


def new_session_id() -> str:
    """Generate an opaque, unguessable session id."""
    return secrets.token_urlsafe(32)


@dataclass
class SessionState:
    """In-memory view of one browser session's attributes."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)
    fresh: bool = True

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    @property
    def user_id(self) -> int | None:
        return self.data.get(USER_ID_KEY)

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


class SessionStore:
    """Database-backed session storage for a single request."""

    def __init__(
        self,
        db: Session,
        cookie_name: str = "session_id",
        expiration_seconds: int = 60 * 60 * 24,
        cookie_secure: bool = False,
    ):
        self.db = db
        self.cookie_name = cookie_name
        self.expiration_seconds = expiration_seconds
        self.cookie_secure = cookie_secure

    @classmethod
    def from_settings(cls, db: Session, settings: Settings) -> "SessionStore":
        return cls(
            db,
            cookie_name=settings.session_cookie_name,
            expiration_seconds=settings.session_expiration_seconds,
            cookie_secure=settings.session_cookie_secure,
        )

    def get(self, request: Request) -> SessionState:
        """
        Load the session named by the request cookie, or start a new one.

        Unknown and expired ids are not reused; the browser gets a new id
        once the session is saved.

        Raises:
            StoreError: if the session table cannot be read
        """
        session_id = request.cookies.get(self.cookie_name)
        if not session_id:
            return SessionState(id=new_session_id())

        try:
            record = (
                self.db.query(HttpSession)
                .filter(
                    HttpSession.id == session_id,
                    HttpSession.expires_at > utc_now(),
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to load session: %s", e)
            raise StoreError("Failed to get session") from e

        if record is None:
            return SessionState(id=new_session_id())

        return SessionState(id=record.id, data=dict(record.data or {}), fresh=False)

    def save(self, state: SessionState, replaces: str | None = None) -> None:
        """
        Persist the session attributes and push the expiry forward.

        ``replaces`` names a previous id of the same session whose row is
        deleted in the same transaction.

        Raises:
            SessionPersistError: if the write fails (the transaction is rolled back)
        """
        expires_at = utc_now() + timedelta(seconds=self.expiration_seconds)
        try:
            if replaces and replaces != state.id:
                self.db.query(HttpSession).filter(HttpSession.id == replaces).delete(
                    synchronize_session=False
                )
            record = self.db.get(HttpSession, state.id)
            if record is None:
                record = HttpSession(
                    id=state.id,
                    data=dict(state.data),
                    expires_at=expires_at,
                )
                self.db.add(record)
            else:
                # Reassign so the JSON column is flagged dirty
                record.data = dict(state.data)
                record.expires_at = expires_at
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to save session: %s", e)
            raise SessionPersistError() from e

        state.fresh = False

    def write_cookie(self, response: Response, state: SessionState) -> None:
        """Point the browser at ``state``; call after a successful save."""
        response.set_cookie(
            key=self.cookie_name,
            value=state.id,
            max_age=self.expiration_seconds,
            httponly=True,
            samesite="lax",
            secure=self.cookie_secure,
            path="/",
        )

    def purge_expired(self) -> int:
        """Delete expired sessions. Returns the number of rows removed."""
        removed = (
            self.db.query(HttpSession)
            .filter(HttpSession.expires_at <= utc_now())
            .delete(synchronize_session=False)
        )
        self.db.commit()
        return removed


def _sweep(session_factory: Callable[[], Session]) -> int:
    db = session_factory()
    try:
        return SessionStore(db).purge_expired()
    finally:
        db.close()


async def run_session_gc_loop(
    session_factory: Callable[[], Session],
    interval_seconds: float = 10.0,
) -> None:
    """Background loop that deletes expired sessions every ``interval_seconds``."""
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            removed = await asyncio.to_thread(_sweep, session_factory)
        except Exception:
            logger.exception("Session sweep failed")
            continue
        if removed:
            logger.info("Removed %d expired sessions", removed)
