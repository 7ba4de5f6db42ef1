"""monzo-client - Typed client for the Monzo banking API."""

from monzo_client.auth import AuthorizationClient
from monzo_client.client import MonzoClient
from monzo_client.errors import (
    InvalidArgumentError,
    MonzoApiError,
    MonzoError,
    ResponseDecodeError,
    UploadFailedError,
)
from monzo_client.models import (
    AccessToken,
    Account,
    Attachment,
    AttachmentUpload,
    Balance,
    ErrorResponse,
    Merchant,
    MerchantAddress,
    Transaction,
    Webhook,
)
from monzo_client.pagination import PaginationOptions
from monzo_client.results import Result, attempt

__version__ = "0.1.0"
__all__ = [
    "AccessToken",
    "Account",
    "Attachment",
    "AttachmentUpload",
    "AuthorizationClient",
    "Balance",
    "ErrorResponse",
    "InvalidArgumentError",
    "Merchant",
    "MerchantAddress",
    "MonzoApiError",
    "MonzoClient",
    "MonzoError",
    "PaginationOptions",
    "ResponseDecodeError",
    "Result",
    "Transaction",
    "UploadFailedError",
    "Webhook",
    "attempt",
]
