"""Exceptions raised by the Monzo clients and the API error translator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import requests

    from monzo_client.models import ErrorResponse

logger = logging.getLogger(__name__)


class MonzoError(Exception):
    """Base exception for Monzo client errors."""

    pass


class InvalidArgumentError(MonzoError, ValueError):
    """A required argument was missing or blank; no request was sent."""

    def __init__(self, argument: str, message: str | None = None):
        self.argument = argument
        super().__init__(message or f"Parameter is required: {argument}")


class MonzoApiError(MonzoError):
    """The API returned a non-success status code."""

    def __init__(
        self,
        status_code: int,
        message: str,
        response: ErrorResponse | None = None,
        body: str | None = None,
    ):
        self.status_code = status_code
        self.message = message
        self.response = response
        self.body = body
        super().__init__(f"Monzo API error {status_code}: {message}")


class UploadFailedError(MonzoError):
    """The direct upload to attachment storage returned a non-success status."""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Error uploading file ({status_code}): {body}")


class ResponseDecodeError(MonzoError, ValueError):
    """A success response did not have the expected shape."""

    pass


def error_from_response(response: requests.Response) -> MonzoApiError:
    """Build a MonzoApiError from a non-success API response.

    The body is parsed as an error object on a best-effort basis. When it is
    not JSON, or not a JSON object, the raw body text becomes the message and
    no ErrorResponse is attached. The status code is always preserved.
    """
    from monzo_client.models import ErrorResponse

    body = response.text
    error_response = None
    message = body

    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error_response = ErrorResponse.from_dict(data)
        message = error_response.message or error_response.error_description or body

    logger.warning("API error %s: %s", response.status_code, message)

    return MonzoApiError(
        status_code=response.status_code,
        message=message,
        response=error_response,
        body=body,
    )
