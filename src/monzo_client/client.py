"""Authenticated Monzo API client."""

import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from typing import IO, Any
from urllib.parse import quote

import requests

from monzo_client.auth import API_URL, DEFAULT_TIMEOUT, AuthorizationClient
from monzo_client.credentials import TokenCell
from monzo_client.errors import (
    InvalidArgumentError,
    ResponseDecodeError,
    UploadFailedError,
    error_from_response,
)
from monzo_client.models import (
    AccessToken,
    Account,
    Attachment,
    AttachmentUpload,
    Balance,
    Transaction,
    Webhook,
)
from monzo_client.pagination import PaginationOptions
from monzo_client.utils import require, require_mapping

logger = logging.getLogger(__name__)


def _quote(value: str) -> str:
    return quote(value, safe="")


class MonzoClient:
    """
    Client for the authenticated Monzo API.

    Holds the current access token and exposes every resource operation.
    Tokens are never refreshed automatically: when a call fails with 401 or
    ``is_token_expired()`` reports True, call ``refresh_access_token()`` and
    retry.
    """

    def __init__(
        self,
        access_token: str | AccessToken | None = None,
        client_id: str | None = None,
        client_secret: str | None = None,
        base_url: str = API_URL,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """
        Initialize the client.

        Args:
            access_token: Token to use, or None to authenticate later
            client_id: OAuth client ID, needed for authenticate/refresh
            client_secret: OAuth client secret, needed for authenticate/refresh
            base_url: URL of the Monzo API, defaults to production
            session: Optional session to send requests with
            timeout: Request timeout in seconds
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._tokens = TokenCell()

        if access_token is not None:
            self.set_access_token(access_token)

    # Token state

    @property
    def token(self) -> AccessToken | None:
        """The current access token, or None when unauthenticated."""
        return self._tokens.get()

    @property
    def access_token(self) -> str | None:
        token = self._tokens.get()
        return token.value if token else None

    @property
    def refresh_token(self) -> str | None:
        token = self._tokens.get()
        return token.refresh_token if token else None

    @property
    def user_id(self) -> str | None:
        token = self._tokens.get()
        return token.user_id if token else None

    @property
    def access_token_expires_at(self) -> datetime | None:
        token = self._tokens.get()
        return token.expires_at if token else None

    @property
    def is_authenticated(self) -> bool:
        return self._tokens.get() is not None

    def is_token_expired(self) -> bool:
        """Return True if the current token's expiry time has passed."""
        token = self._tokens.get()
        return token.is_expired() if token else False

    def set_access_token(self, token: str | AccessToken) -> None:
        """Use an access token obtained elsewhere."""
        if isinstance(token, str):
            token = AccessToken(value=require("access_token", token))
        self._tokens.swap(token)

    def authenticate(self, username: str, password: str) -> AccessToken:
        """
        Acquire an access token with the password grant and start using it.

        Args:
            username: The user's email address
            password: The user's password

        Returns:
            The new AccessToken
        """
        token = self._authorization_client().authenticate_with_password(username, password)
        self._tokens.swap(token)
        return token

    def refresh_access_token(self) -> AccessToken:
        """
        Replace the current token using its refresh token.

        The previous access and refresh tokens are invalidated server-side.
        Requests already in flight on other threads may still carry the old
        token and fail with 401.

        Returns:
            The new AccessToken
        """
        current = self._tokens.get()
        if current is None or not current.refresh_token:
            raise InvalidArgumentError("refresh_token", "No refresh token available")

        issued = self._authorization_client().refresh_access_token(current.refresh_token)
        token = replace(
            issued,
            user_id=current.user_id or issued.user_id,
            client_id=issued.client_id or current.client_id,
        )
        self._tokens.swap(token)
        return token

    def _authorization_client(self) -> AuthorizationClient:
        if not self.client_id or not self.client_secret:
            raise InvalidArgumentError(
                "client_id", "client_id and client_secret are required to request tokens"
            )
        return AuthorizationClient(
            self.client_id,
            self.client_secret,
            base_url=self.base_url,
            session=self._session,
            timeout=self.timeout,
        )

    # Transport

    def _request(
        self,
        method: str,
        endpoint: str,
        data: dict[str, str] | None = None,
    ) -> requests.Response:
        """Make an authenticated API request, raising on non-success status."""
        token = self._tokens.get()
        if token is None:
            raise InvalidArgumentError("access_token", "Client is not authenticated")

        url = f"{self.base_url}/{endpoint}"
        logger.debug("API request: %s %s", method, url)

        response = self._session.request(
            method,
            url,
            data=data,
            headers={"Authorization": f"Bearer {token.value}"},
            timeout=self.timeout,
        )
        logger.debug("Response status: %s", response.status_code)

        if not response.ok:
            raise error_from_response(response)

        return response

    def _request_json(
        self,
        method: str,
        endpoint: str,
        key: str | None = None,
        data: dict[str, str] | None = None,
    ) -> Any:
        """Make an API request and return the JSON body, or one field of it."""
        response = self._request(method, endpoint, data=data)

        try:
            payload = response.json()
        except ValueError as err:
            raise ResponseDecodeError(f"Response is not JSON: {response.text}") from err

        if not isinstance(payload, dict):
            raise ResponseDecodeError(f"Unexpected response: {payload!r}")
        if key is None:
            return payload
        if key not in payload:
            raise ResponseDecodeError(f"Missing field in response: {key}")
        return payload[key]

    def _request_list(self, endpoint: str, key: str) -> list[dict[str, Any]]:
        """GET a list envelope and return its items. A null list is empty."""
        items = self._request_json("GET", endpoint, key)
        if items is None:
            return []
        if not isinstance(items, list):
            raise ResponseDecodeError(f"Expected list for {key}, got {type(items).__name__}")
        for item in items:
            if not isinstance(item, dict):
                raise ResponseDecodeError(f"Unexpected item in {key}: {item!r}")
        return items

    # Accounts and balance

    def list_accounts(self) -> list[Account]:
        """Return the accounts owned by the authorised user."""
        accounts = self._request_list("accounts", "accounts")
        return [Account.from_dict(acc) for acc in accounts]

    def get_balance(self, account_id: str) -> Balance:
        """Return balance information for an account."""
        require("account_id", account_id)
        data = self._request_json("GET", f"balance?account_id={_quote(account_id)}")
        return Balance.from_dict(data)

    # Transactions

    def get_transaction(self, transaction_id: str, expand: str | None = None) -> Transaction:
        """
        Return a single transaction.

        Args:
            transaction_id: The transaction id
            expand: Related object to expand inline; only "merchant" is supported

        Returns:
            The Transaction
        """
        require("transaction_id", transaction_id)
        endpoint = f"transactions/{_quote(transaction_id)}?expand[]={_quote(expand or '')}"
        data = self._request_json("GET", endpoint, "transaction")
        return Transaction.from_dict(data)

    def list_transactions(
        self,
        account_id: str,
        expand: str | None = None,
        pagination: PaginationOptions | None = None,
    ) -> list[Transaction]:
        """
        Return transactions on an account.

        Args:
            account_id: The account to list transactions for
            expand: Related object to expand inline; only "merchant" is supported
            pagination: Optional limit/since/before filters

        Returns:
            List of Transaction objects
        """
        require("account_id", account_id)

        endpoint = f"transactions?account_id={_quote(account_id)}"
        if expand:
            endpoint += f"&expand[]={_quote(expand)}"
        if pagination is not None:
            endpoint += pagination.to_query()

        transactions = self._request_list(endpoint, "transactions")
        return [Transaction.from_dict(tx) for tx in transactions]

    def annotate_transaction(self, transaction_id: str, metadata: Mapping[str, str]) -> Transaction:
        """
        Store key-value annotations in a transaction's metadata.

        Metadata is private to your application. Include each key to modify;
        an empty string value deletes the key.

        Returns:
            The updated Transaction
        """
        require("transaction_id", transaction_id)
        require_mapping("metadata", metadata)

        form = {f"metadata[{key}]": value for key, value in metadata.items()}
        data = self._request_json(
            "PATCH", f"transactions/{_quote(transaction_id)}", "transaction", data=form
        )
        return Transaction.from_dict(data)

    # Feed

    def create_feed_item(
        self,
        account_id: str,
        params: Mapping[str, str],
        type: str = "basic",
        url: str | None = None,
    ) -> None:
        """
        Create an item on the user's feed.

        Args:
            account_id: The account to create the feed item for
            params: Parameters for the item type, e.g. title and image_url
            type: Feed item type; currently only "basic"
            url: Optional URL opened when the item is tapped
        """
        require("account_id", account_id)
        require("type", type)
        require_mapping("params", params)

        form = {"account_id": account_id, "type": type}
        if url and url.strip():
            form["url"] = url
        for key, value in params.items():
            form[f"params[{key}]"] = value

        self._request("POST", "feed", data=form)

    # Webhooks

    def register_webhook(self, account_id: str, url: str) -> Webhook:
        """Register a URL to receive a POST for each event on the account."""
        require("account_id", account_id)
        require("url", url)

        data = self._request_json(
            "POST", "webhooks", "webhook", data={"account_id": account_id, "url": url}
        )
        return Webhook.from_dict(data)

    def list_webhooks(self, account_id: str) -> list[Webhook]:
        """Return the webhooks registered on an account."""
        require("account_id", account_id)
        webhooks = self._request_list(f"webhooks?account_id={_quote(account_id)}", "webhooks")
        return [Webhook.from_dict(hook) for hook in webhooks]

    def delete_webhook(self, webhook_id: str) -> None:
        """Delete a webhook; no further notifications are sent to it."""
        require("webhook_id", webhook_id)
        self._request("DELETE", f"webhooks/{_quote(webhook_id)}")

    # Attachments

    def request_upload_url(self, file_name: str, file_type: str) -> AttachmentUpload:
        """Obtain a temporary URL to upload an attachment to."""
        require("file_name", file_name)
        require("file_type", file_type)

        data = self._request_json(
            "POST",
            "attachment/upload",
            data={"file_name": file_name, "file_type": file_type},
        )
        return AttachmentUpload.from_dict(data)

    def register_attachment(self, external_id: str, file_url: str, file_type: str) -> Attachment:
        """
        Register a hosted file against a transaction.

        Args:
            external_id: The id of the transaction to attach the file to
            file_url: URL of the uploaded or remotely hosted file
            file_type: Content type of the file

        Returns:
            The registered Attachment
        """
        require("external_id", external_id)
        require("file_url", file_url)
        require("file_type", file_type)

        data = self._request_json(
            "POST",
            "attachment/register",
            "attachment",
            data={"external_id": external_id, "file_type": file_type, "file_url": file_url},
        )
        return Attachment.from_dict(data)

    def upload_attachment(
        self,
        file_name: str,
        file_type: str,
        external_id: str,
        content: bytes | IO[bytes],
    ) -> Attachment:
        """
        Upload a file and attach it to a transaction.

        Runs three requests in order: obtain an upload URL, PUT the content
        to it, then register the resulting file URL. The first failure is
        raised. If registration fails the uploaded file is left in storage.

        Args:
            file_name: Name of the file
            file_type: Content type of the file
            external_id: The id of the transaction to attach the file to
            content: File content as bytes or a binary file object

        Returns:
            The registered Attachment
        """
        require("file_name", file_name)
        require("file_type", file_type)
        require("external_id", external_id)
        if content is None:
            raise InvalidArgumentError("content")

        upload = self.request_upload_url(file_name, file_type)
        self._put_file(upload.upload_url, file_type, content)
        return self.register_attachment(external_id, upload.file_url, file_type)

    def _put_file(self, upload_url: str, file_type: str, content: bytes | IO[bytes]) -> None:
        """PUT content to a pre-signed storage URL, without API credentials."""
        logger.debug("Uploading %s to storage", file_type)
        response = requests.put(
            upload_url,
            data=content,
            headers={"Content-Type": file_type},
            timeout=self.timeout,
        )
        logger.debug("Upload status: %s", response.status_code)

        if not response.ok:
            raise UploadFailedError(response.status_code, response.text)

    def delete_attachment(self, attachment_id: str) -> None:
        """Deregister an attachment by its id."""
        require("attachment_id", attachment_id)
        self._request("POST", "attachment/deregister", data={"id": attachment_id})

    # Lifecycle

    def close(self) -> None:
        """Forget the access token and close the session if this client created it."""
        self._tokens.clear()
        if self._owns_session:
            self._session.close()

    def __enter__(self) -> "MonzoClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
