import os

# Settings are cached on first use, so configure them before importing the app
os.environ["SESSION_GC_INTERVAL_SECONDS"] = "0"
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("GOOGLE_CLIENT_ID", "test-client-id")
os.environ.setdefault("GOOGLE_CLIENT_SECRET", "test-client-secret")

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from starlette.requests import Request

from app.auth.google import GoogleOAuthClient
from app.auth.sessions import SessionStore
from app.database.base import Base
from app.models import HttpSession, User
from app.services.auth_flow import AuthFlow
from app.services.user_store import UserStore

# Ensure all models are imported so they're registered with Base.metadata
__all__ = ["HttpSession", "User"]

TEST_REDIRECT_URI = "http://localhost:8080/auth/google/callback"


class FakeGoogle:
    """Programmable stand-in for Google's token and userinfo endpoints.

    Bodies may be dicts (sent as JSON) or strings (sent verbatim, for
    malformed-response cases).
    """

    def __init__(self):
        self.token_status = 200
        self.token_body: dict | str = {
            "access_token": "tok1",
            "token_type": "Bearer",
            "expires_in": 3599,
            "scope": "openid email profile",
        }
        self.profile_status = 200
        self.profile_body: dict | str = {
            "id": "10001",
            "email": "a@b.com",
            "name": "A",
            "given_name": "A",
            "family_name": "B",
            "picture": "https://example.com/a.png",
        }
        self.requests: list[httpx.Request] = []

    @property
    def token_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "oauth2.googleapis.com"]

    @property
    def profile_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.host == "www.googleapis.com"]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.host == "oauth2.googleapis.com":
            return self._respond(self.token_status, self.token_body)
        if request.url.host == "www.googleapis.com":
            return self._respond(self.profile_status, self.profile_body)
        return httpx.Response(404, text="unexpected host")

    @staticmethod
    def _respond(status: int, body: dict | str) -> httpx.Response:
        if isinstance(body, str):
            return httpx.Response(status, content=body.encode("utf-8"))
        return httpx.Response(status, json=body)


def _build_request(session_id: str | None = None, cookie_name: str = "session_id") -> Request:
    headers = []
    if session_id:
        headers.append((b"cookie", f"{cookie_name}={session_id}".encode("latin-1")))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing.

    Uses StaticPool to ensure all connections share the same in-memory database.
    Without this, each connection would get a fresh database without tables.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(
        bind=engine,
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
    )


@pytest.fixture
def session(session_factory) -> Session:
    """Create a test database session."""
    session = session_factory()
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def google() -> FakeGoogle:
    return FakeGoogle()


@pytest.fixture
def google_client(google: FakeGoogle) -> GoogleOAuthClient:
    """Google client whose HTTP calls are answered by ``google``."""
    return GoogleOAuthClient(
        client_id="test-client-id",
        client_secret="test-client-secret",
        redirect_uri=TEST_REDIRECT_URI,
        timeout=5.0,
        transport=httpx.MockTransport(google.handler),
    )


@pytest.fixture
def user_store(session: Session) -> UserStore:
    return UserStore(session)


@pytest.fixture
def session_store(session: Session) -> SessionStore:
    return SessionStore(session)


@pytest.fixture
def flow(user_store, session_store, google_client) -> AuthFlow:
    return AuthFlow(users=user_store, sessions=session_store, google=google_client)


@pytest.fixture
def sample_user(session: Session) -> User:
    """Create an existing user for testing."""
    user = User(name="Existing Person", email="existing@example.com", phone=628123456789)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture
def client(session_factory, google_client) -> TestClient:
    """
    Create a FastAPI test client with in-memory database.

    Google is replaced by the ``google`` fake.
    """
    from app.auth import dependencies as auth_deps
    from app.database import session as session_module
    from app.main import app

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    # Override the dependencies that routers use
    app.dependency_overrides[session_module.get_db] = override_get_db
    app.dependency_overrides[auth_deps.get_google_client] = lambda: google_client

    with TestClient(app) as client:
        yield client

    # Clear overrides after test
    app.dependency_overrides.clear()


@pytest.fixture
def make_request():
    """Factory for bare Starlette requests, optionally carrying a session cookie."""
    return _build_request
