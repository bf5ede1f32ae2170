"""Google OAuth2 authorization-code exchange.

Two sequential, single-attempt calls per login:
1. POST the authorization code to the token endpoint for an access token
2. GET the userinfo endpoint with that access token

Each call opens its own short-lived ``httpx.Client``. Failure bodies are
logged for diagnostics and never handed back to the caller.
"""

import logging
from urllib.parse import urlencode

import httpx
from pydantic import ValidationError

from app.auth.errors import ProfileFetchError, TokenExchangeError
from app.auth.schemas import GoogleProfile, GoogleTokenResponse
from app.config import Settings

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v1/userinfo"

DEFAULT_SCOPES = ("openid", "email", "profile")

# Upstream error bodies are cut to this many characters in logs
LOG_BODY_LIMIT = 500


def _body_preview(response: httpx.Response) -> str:
    return response.text[:LOG_BODY_LIMIT]


class GoogleOAuthClient:
    """Stateless client for Google's token and userinfo endpoints."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        timeout: float = 10.0,
        transport: httpx.BaseTransport | None = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
    ) -> "GoogleOAuthClient":
        return cls(
            client_id=settings.google_client_id,
            client_secret=settings.google_client_secret,
            redirect_uri=settings.google_redirect_uri,
            timeout=settings.oauth_timeout_seconds,
            transport=transport,
        )

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def authorization_url(self) -> str:
        """Build the consent screen URL the login page links to."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(DEFAULT_SCOPES),
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> GoogleTokenResponse:
        """
        Exchange an authorization code for an access token.

        Raises:
            TokenExchangeError: on transport failure, non-200 status,
                or a body without a usable ``access_token``
        """
        form = {
            "grant_type": "authorization_code",
            "code": code,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
        }

        try:
            with self._client() as client:
                response = client.post(
                    GOOGLE_TOKEN_URL,
                    data=form,
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error("Token request to Google failed: %s", e)
            raise TokenExchangeError() from e

        if response.status_code != httpx.codes.OK:
            logger.error(
                "Token error (HTTP %s): %s",
                response.status_code,
                _body_preview(response),
            )
            raise TokenExchangeError()

        try:
            return GoogleTokenResponse.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(
                "Unreadable token response (%d errors): %s",
                e.error_count(),
                _body_preview(response),
            )
            raise TokenExchangeError() from e

    def fetch_profile(self, access_token: str) -> GoogleProfile:
        """
        Fetch the signed-in user's profile.

        Raises:
            ProfileFetchError: on transport failure, non-200 status,
                or a body without an ``email``
        """
        try:
            with self._client() as client:
                response = client.get(
                    GOOGLE_USERINFO_URL,
                    params={"access_token": access_token},
                    headers={"Accept": "application/json"},
                )
        except httpx.HTTPError as e:
            logger.error("Userinfo request to Google failed: %s", e)
            raise ProfileFetchError() from e

        if response.status_code != httpx.codes.OK:
            logger.error(
                "User info error (HTTP %s): %s",
                response.status_code,
                _body_preview(response),
            )
            raise ProfileFetchError()

        try:
            return GoogleProfile.model_validate_json(response.content)
        except ValidationError as e:
            logger.error(
                "Unreadable userinfo response (%d errors): %s",
                e.error_count(),
                _body_preview(response),
            )
            raise ProfileFetchError() from e
