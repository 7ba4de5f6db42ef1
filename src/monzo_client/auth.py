"""OAuth2 authorization client for the Monzo API."""

import logging
from typing import Any
from urllib.parse import quote_plus

import requests

from monzo_client.errors import ResponseDecodeError, error_from_response
from monzo_client.models import AccessToken
from monzo_client.utils import require

logger = logging.getLogger(__name__)

API_URL = "https://api.monzo.com"
AUTH_URL = "https://auth.monzo.com"
DEFAULT_TIMEOUT = 30


class AuthorizationClient:
    """
    Client for acquiring and refreshing OAuth2 access tokens.

    Supports:
    - Building the authorization redirect URL
    - Authorization code grant
    - Password grant
    - Refresh token grant

    The client does not keep the tokens it issues.
    """

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        base_url: str = API_URL,
        auth_url: str = AUTH_URL,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the authorization client.

        Args:
            client_id: Your OAuth client ID
            client_secret: Your OAuth client secret
            base_url: API URL hosting the token endpoint
            auth_url: URL of the login page users are redirected to
            session: Optional session to send requests with
            timeout: Request timeout in seconds
        """
        self.client_id = require("client_id", client_id)
        self.client_secret = require("client_secret", client_secret)
        self.base_url = base_url.rstrip("/")
        self.auth_url = auth_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session or requests.Session()

    def build_authorize_url(self, state: str | None = None, redirect_uri: str | None = None) -> str:
        """
        Build the URL to send a user to for authorizing this client.

        Args:
            state: Opaque value passed back to you; inserted as given
            redirect_uri: Where to send the user afterwards; URL-encoded

        Returns:
            The authorization URL
        """
        url = f"{self.auth_url}/?response_type=code&client_id={self.client_id}"

        if state and state.strip():
            url += f"&state={state}"

        if redirect_uri and redirect_uri.strip():
            url += f"&redirect_uri={quote_plus(redirect_uri)}"

        return url

    def exchange_authorization_code(self, code: str, redirect_uri: str) -> AccessToken:
        """Exchange an authorization code for an access token."""
        return self._request_token(
            {
                "grant_type": "authorization_code",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": require("code", code),
                "redirect_uri": require("redirect_uri", redirect_uri),
            }
        )

    def authenticate_with_password(self, username: str, password: str) -> AccessToken:
        """
        Acquire an access token with the user's Monzo credentials.

        Args:
            username: The user's email address
            password: The user's password

        Returns:
            AccessToken tied to this client and the user

        Raises:
            InvalidArgumentError: If username or password is missing
            MonzoApiError: If the token endpoint rejects the request
        """
        require("username", username)
        require("password", password)

        return self._request_token(
            {
                "grant_type": "password",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "username": username,
                "password": password,
            }
        )

    def refresh_access_token(self, refresh_token: str) -> AccessToken:
        """Exchange a refresh token for a new access and refresh token pair."""
        return self._request_token(
            {
                "grant_type": "refresh_token",
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "refresh_token": require("refresh_token", refresh_token),
            }
        )

    def _request_token(self, form: dict[str, Any]) -> AccessToken:
        """POST a grant to the token endpoint and parse the issued token."""
        url = f"{self.base_url}/oauth2/token"

        logger.debug("Token request: POST %s (grant_type=%s)", url, form["grant_type"])
        response = self._session.post(url, data=form, timeout=self.timeout)
        logger.debug("Response status: %s", response.status_code)

        if not response.ok:
            raise error_from_response(response)

        try:
            data = response.json()
        except ValueError as err:
            raise ResponseDecodeError(f"Token response is not JSON: {response.text}") from err
        if not isinstance(data, dict):
            raise ResponseDecodeError(f"Unexpected token response: {data!r}")

        token = AccessToken.from_dict(data)
        logger.info("Access token issued via %s grant", form["grant_type"])
        return token

    def close(self) -> None:
        """Close the underlying session if this client created it."""
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "AuthorizationClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
