"""Tests for the OAuth2 authorization client."""

from urllib.parse import parse_qs

import pytest
import responses

from monzo_client.auth import AUTH_URL, AuthorizationClient
from monzo_client.errors import InvalidArgumentError, MonzoApiError

from conftest import BASE_URL, CLIENT_ID, CLIENT_SECRET

TOKEN_URL = f"{BASE_URL}/oauth2/token"

TOKEN_RESPONSE = {
    "access_token": "testAccessToken",
    "client_id": "client_id",
    "expires_in": 21600,
    "refresh_token": "testRefreshToken",
    "token_type": "Bearer",
    "user_id": "testUserId",
}


def sent_form() -> dict[str, str]:
    """Return the form fields of the last request."""
    body = responses.calls[-1].request.body
    return {key: values[0] for key, values in parse_qs(body, keep_blank_values=True).items()}


@pytest.fixture
def auth() -> AuthorizationClient:
    """Return an authorization client pointed at the test API."""
    return AuthorizationClient(CLIENT_ID, CLIENT_SECRET, base_url=BASE_URL)


class TestInit:
    """Tests for client construction."""

    def test_requires_client_id(self) -> None:
        """Test a blank client id is rejected."""
        with pytest.raises(InvalidArgumentError):
            AuthorizationClient("", CLIENT_SECRET)

    def test_requires_client_secret(self) -> None:
        """Test a missing client secret is rejected."""
        with pytest.raises(InvalidArgumentError):
            AuthorizationClient(CLIENT_ID, None)  # type: ignore[arg-type]


class TestBuildAuthorizeUrl:
    """Tests for the authorization redirect URL."""

    def test_state_and_redirect(self, auth: AuthorizationClient) -> None:
        """Test the URL with state and redirect URI."""
        url = auth.build_authorize_url("testState", "testRedirectUri")
        assert url == (
            f"{AUTH_URL}/?response_type=code&client_id=testClientId"
            "&state=testState&redirect_uri=testRedirectUri"
        )

    def test_minimal(self, auth: AuthorizationClient) -> None:
        """Test state and redirect are omitted when not given."""
        assert auth.build_authorize_url() == f"{AUTH_URL}/?response_type=code&client_id=testClientId"

    def test_redirect_is_encoded(self, auth: AuthorizationClient) -> None:
        """Test the redirect URI is percent-encoded."""
        url = auth.build_authorize_url(redirect_uri="https://example.com/cb?x=1")
        assert url.endswith("&redirect_uri=https%3A%2F%2Fexample.com%2Fcb%3Fx%3D1")

    def test_state_is_verbatim(self, auth: AuthorizationClient) -> None:
        """Test state is inserted without encoding."""
        url = auth.build_authorize_url(state="a b/c")
        assert url.endswith("&state=a b/c")

    def test_custom_auth_url(self) -> None:
        """Test a custom login host is used."""
        auth = AuthorizationClient(CLIENT_ID, CLIENT_SECRET, auth_url="https://auth.example.com/")
        assert auth.build_authorize_url().startswith("https://auth.example.com/?response_type=code")


class TestTokenGrants:
    """Tests for the token endpoint grants."""

    @responses.activate
    def test_authorization_code(self, auth: AuthorizationClient) -> None:
        """Test exchanging an authorization code."""
        responses.add(responses.POST, TOKEN_URL, json=TOKEN_RESPONSE, status=200)

        token = auth.exchange_authorization_code("testCode", "testRedirectUri")

        assert sent_form() == {
            "grant_type": "authorization_code",
            "client_id": "testClientId",
            "client_secret": "testClientSecret",
            "code": "testCode",
            "redirect_uri": "testRedirectUri",
        }
        assert token.value == "testAccessToken"
        assert token.refresh_token == "testRefreshToken"
        assert token.user_id == "testUserId"
        assert token.expires_in == 21600
        assert token.expires_at is not None

    @responses.activate
    def test_password(self, auth: AuthorizationClient) -> None:
        """Test the password grant."""
        responses.add(responses.POST, TOKEN_URL, json=TOKEN_RESPONSE, status=200)

        token = auth.authenticate_with_password("testUsername", "testPassword")

        assert sent_form() == {
            "grant_type": "password",
            "client_id": "testClientId",
            "client_secret": "testClientSecret",
            "username": "testUsername",
            "password": "testPassword",
        }
        assert token.value == "testAccessToken"
        assert token.user_id == "testUserId"

    @responses.activate
    def test_refresh(self, auth: AuthorizationClient) -> None:
        """Test the refresh token grant."""
        responses.add(
            responses.POST,
            TOKEN_URL,
            json={**TOKEN_RESPONSE, "access_token": "testAccessToken2", "refresh_token": "testRefreshToken2"},
            status=200,
        )

        token = auth.refresh_access_token("testRefreshToken1")

        assert sent_form() == {
            "grant_type": "refresh_token",
            "client_id": "testClientId",
            "client_secret": "testClientSecret",
            "refresh_token": "testRefreshToken1",
        }
        assert token.value == "testAccessToken2"
        assert token.refresh_token == "testRefreshToken2"

    @responses.activate
    def test_password_requires_credentials(self, auth: AuthorizationClient) -> None:
        """Test missing username or password fails before any request."""
        with pytest.raises(InvalidArgumentError):
            auth.authenticate_with_password("", "testPassword")
        with pytest.raises(InvalidArgumentError):
            auth.authenticate_with_password("testUsername", None)  # type: ignore[arg-type]

        assert len(responses.calls) == 0

    @responses.activate
    def test_error_response(self, auth: AuthorizationClient) -> None:
        """Test a rejected grant raises MonzoApiError."""
        responses.add(
            responses.POST,
            TOKEN_URL,
            json={
                "code": "unauthorized.bad_access_token",
                "error": "invalid_grant",
                "error_description": "Invalid credentials",
                "message": "Invalid credentials",
            },
            status=401,
        )

        with pytest.raises(MonzoApiError) as exc_info:
            auth.authenticate_with_password("testUsername", "wrong")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Invalid credentials"
        assert exc_info.value.response is not None
        assert exc_info.value.response.error == "invalid_grant"

    def test_does_not_retain_tokens(self, auth: AuthorizationClient) -> None:
        """Test the client has no token state."""
        assert not hasattr(auth, "access_token")
        assert not hasattr(auth, "token")
