"""Google OAuth payload schemas."""

from pydantic import BaseModel, Field


class GoogleTokenResponse(BaseModel):
    """Token endpoint response. Only ``access_token`` is required."""

    access_token: str = Field(..., min_length=1)
    token_type: str | None = None
    expires_in: int | None = None
    scope: str | None = None
    id_token: str | None = None
    refresh_token: str | None = None


class GoogleProfile(BaseModel):
    """Userinfo (v1) response."""

    id: str | None = None
    email: str = Field(..., min_length=1)
    name: str = ""
    picture: str | None = None
    family_name: str | None = None
    given_name: str | None = None
