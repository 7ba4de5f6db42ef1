"""Explicit success/error results for client calls."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

import requests

from monzo_client.errors import (
    InvalidArgumentError,
    MonzoApiError,
    MonzoError,
    ResponseDecodeError,
    UploadFailedError,
)

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Outcome of a client call: a value, or the error that prevented it."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        """Return True if the call succeeded."""
        return self.error is None

    @property
    def kind(self) -> str | None:
        """Error category, or None on success."""
        if self.error is None:
            return None
        if isinstance(self.error, InvalidArgumentError):
            return "invalid_argument"
        if isinstance(self.error, MonzoApiError):
            return "api"
        if isinstance(self.error, UploadFailedError):
            return "upload"
        if isinstance(self.error, ResponseDecodeError):
            return "decode"
        if isinstance(self.error, requests.RequestException):
            return "transport"
        return "error"

    @property
    def status_code(self) -> int | None:
        """HTTP status of an API or upload error."""
        return getattr(self.error, "status_code", None)

    def unwrap(self) -> T:
        """Return the value, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


def attempt(func: Callable[..., T], *args: Any, **kwargs: Any) -> Result[T]:
    """
    Call a client operation and capture its outcome.

    Client and transport errors are returned instead of raised, so callers
    can branch on ``result.kind``, e.g. refresh and retry on an "api" error
    with status 401.

    Args:
        func: Bound client method, e.g. ``client.list_accounts``
        *args: Positional arguments for func
        **kwargs: Keyword arguments for func

    Returns:
        Result holding the return value or the error
    """
    try:
        return Result(value=func(*args, **kwargs))
    except (MonzoError, requests.RequestException) as err:
        return Result(error=err)
