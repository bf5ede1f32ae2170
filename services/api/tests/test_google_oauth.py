"""Tests for the Google OAuth client."""

from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.auth.errors import ProfileFetchError, TokenExchangeError
from app.auth.google import GoogleOAuthClient
from app.config import Settings


class TestAuthorizationUrl:
    """Test the consent screen URL."""

    def test_contains_client_and_redirect(self, google_client: GoogleOAuthClient):
        url = urlparse(google_client.authorization_url())
        params = parse_qs(url.query)

        assert url.netloc == "accounts.google.com"
        assert params["client_id"] == ["test-client-id"]
        assert params["redirect_uri"] == ["http://localhost:8080/auth/google/callback"]
        assert params["response_type"] == ["code"]
        assert params["scope"] == ["openid email profile"]

    def test_from_settings(self):
        settings = Settings(
            google_client_id="cid",
            google_client_secret="secret",
            oauth_timeout_seconds=3.0,
        )
        client = GoogleOAuthClient.from_settings(settings)

        assert client.client_id == "cid"
        assert client.client_secret == "secret"
        assert client.redirect_uri == "http://localhost:8080/auth/google/callback"
        assert client.timeout == 3.0


class TestExchangeCode:
    """Test authorization code -> access token."""

    def test_success(self, google_client, google):
        token = google_client.exchange_code("abc123")

        assert token.access_token == "tok1"
        assert token.token_type == "Bearer"
        assert token.expires_in == 3599

    def test_posts_form_encoded_grant(self, google_client, google):
        google_client.exchange_code("abc123")

        assert len(google.token_requests) == 1
        request = google.token_requests[0]
        assert request.method == "POST"
        assert request.headers["content-type"] == "application/x-www-form-urlencoded"
        form = parse_qs(request.content.decode())
        assert form == {
            "grant_type": ["authorization_code"],
            "code": ["abc123"],
            "client_id": ["test-client-id"],
            "client_secret": ["test-client-secret"],
            "redirect_uri": ["http://localhost:8080/auth/google/callback"],
        }

    @pytest.mark.parametrize("status_code", [400, 401, 500])
    def test_non_200_status(self, google_client, google, status_code):
        google.token_status = status_code
        google.token_body = {"error": "invalid_grant"}

        with pytest.raises(TokenExchangeError) as exc:
            google_client.exchange_code("bad-code")

        # Upstream body is logged, never surfaced
        assert "invalid_grant" not in exc.value.message

    def test_malformed_json(self, google_client, google):
        google.token_body = "<html>not json</html>"

        with pytest.raises(TokenExchangeError):
            google_client.exchange_code("abc123")

    def test_missing_access_token(self, google_client, google):
        google.token_body = {"token_type": "Bearer"}

        with pytest.raises(TokenExchangeError):
            google_client.exchange_code("abc123")

    def test_transport_error(self):
        def fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        client = GoogleOAuthClient(
            "cid", "secret", "http://localhost/cb", transport=httpx.MockTransport(fail)
        )

        with pytest.raises(TokenExchangeError):
            client.exchange_code("abc123")

    def test_logs_upstream_body(self, google_client, google, caplog):
        google.token_status = 400
        google.token_body = {"error": "invalid_grant"}

        with pytest.raises(TokenExchangeError):
            google_client.exchange_code("bad-code")

        assert "invalid_grant" in caplog.text


class TestFetchProfile:
    """Test access token -> profile."""

    def test_success(self, google_client, google):
        profile = google_client.fetch_profile("tok1")

        assert profile.email == "a@b.com"
        assert profile.name == "A"
        assert profile.id == "10001"
        assert profile.given_name == "A"

    def test_sends_access_token_as_query_param(self, google_client, google):
        google_client.fetch_profile("tok1")

        request = google.profile_requests[0]
        assert request.method == "GET"
        assert request.url.path == "/oauth2/v1/userinfo"
        assert request.url.params["access_token"] == "tok1"
        assert request.headers["accept"] == "application/json"

    def test_non_200_status(self, google_client, google):
        google.profile_status = 401

        with pytest.raises(ProfileFetchError):
            google_client.fetch_profile("expired")

    def test_malformed_json(self, google_client, google):
        google.profile_body = "{not json"

        with pytest.raises(ProfileFetchError):
            google_client.fetch_profile("tok1")

    def test_missing_email(self, google_client, google):
        google.profile_body = {"id": "1", "name": "No Email"}

        with pytest.raises(ProfileFetchError):
            google_client.fetch_profile("tok1")

    def test_missing_name_defaults_to_empty(self, google_client, google):
        google.profile_body = {"email": "quiet@example.com"}

        profile = google_client.fetch_profile("tok1")

        assert profile.name == ""
