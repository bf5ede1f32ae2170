"""Google login endpoints: login page, OAuth callback, protected check, logout."""

from pathlib import Path

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from app.auth.dependencies import get_auth_flow, get_session, get_session_store
from app.auth.sessions import SessionState, SessionStore
from app.schemas.auth import (
    CallbackResponse,
    ErrorResponse,
    LogoutResponse,
    ProtectedResponse,
)
from app.schemas.user import UserResponse
from app.services.auth_flow import AuthFlow

router = APIRouter(tags=["auth"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))


@router.get("/login", response_class=HTMLResponse)
def login_page(
    request: Request,
    session: SessionState = Depends(get_session),
    flow: AuthFlow = Depends(get_auth_flow),
):
    """Render the Google sign-in page, or redirect if already signed in."""
    start = flow.start_login(session)
    if start.redirect_to:
        return RedirectResponse(start.redirect_to, status_code=302)

    return templates.TemplateResponse(
        request,
        "login.html",
        {
            "title": "Sign in",
            "google_client_id": start.client_id,
            "authorization_url": start.authorization_url,
        },
    )


@router.get(
    "/auth/google/callback",
    response_model=CallbackResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
def google_callback(
    response: Response,
    code: str | None = None,
    session: SessionState = Depends(get_session),
    sessions: SessionStore = Depends(get_session_store),
    flow: AuthFlow = Depends(get_auth_flow),
) -> CallbackResponse:
    """Finish the Google login started from /login."""
    result = flow.handle_callback(session, code)
    sessions.write_cookie(response, session)

    return CallbackResponse(
        code=result.code,
        access_token=result.access_token,
        data=UserResponse.model_validate(result.user),
    )


@router.get(
    "/protected",
    response_model=ProtectedResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def protected(
    session: SessionState = Depends(get_session),
    flow: AuthFlow = Depends(get_auth_flow),
) -> ProtectedResponse:
    user_id = flow.check_protected(session)
    return ProtectedResponse(message="Welcome to the protected route!", user_id=user_id)


@router.get(
    "/logout",
    response_model=LogoutResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def logout(
    response: Response,
    session: SessionState = Depends(get_session),
    sessions: SessionStore = Depends(get_session_store),
    flow: AuthFlow = Depends(get_auth_flow),
) -> LogoutResponse:
    flow.logout(session)
    sessions.write_cookie(response, session)
    return LogoutResponse(message="Logged out successfully")
