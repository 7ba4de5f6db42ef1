"""Data models for Monzo API resources."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from monzo_client.errors import ResponseDecodeError
from monzo_client.utils.parsing import (
    format_timestamp,
    parse_optional_timestamp,
    parse_timestamp,
)

DECLINE_REASONS = (
    "INSUFFICIENT_FUNDS",
    "CARD_INACTIVE",
    "CARD_BLOCKED",
    "OTHER",
)

# Top-ups carry the provider's own "mondo" category
CATEGORIES = (
    "general",
    "eating_out",
    "expenses",
    "transport",
    "cash",
    "bills",
    "entertainment",
    "shopping",
    "holidays",
    "groceries",
    "mondo",
)


def _field(data: dict[str, Any], key: str) -> Any:
    """Return a required key from a payload."""
    try:
        return data[key]
    except KeyError as err:
        raise ResponseDecodeError(f"Missing field in response: {key}") from err


def _string_map(value: Any) -> dict[str, str]:
    """Decode a JSON object of string values, treating null as empty."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ResponseDecodeError(f"Expected object, got {type(value).__name__}")
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


@dataclass(frozen=True)
class Account:
    """An account owned by the authorised user."""

    id: str
    description: str
    created: datetime

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Account":
        return cls(
            id=_field(data, "id"),
            description=data.get("description", ""),
            created=parse_timestamp(_field(data, "created")),
        )


@dataclass(frozen=True)
class Balance:
    """Balance snapshot for an account, in minor currency units."""

    balance: int
    currency: str
    spend_today: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Balance":
        return cls(
            balance=_field(data, "balance"),
            currency=_field(data, "currency"),
            spend_today=data.get("spend_today", 0),
        )


@dataclass(frozen=True)
class MerchantAddress:
    """Postal address and coordinates of a merchant."""

    address: str | None = None
    city: str | None = None
    country: str | None = None
    postcode: str | None = None
    region: str | None = None
    latitude: float | None = None
    longitude: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MerchantAddress":
        return cls(
            address=data.get("address"),
            city=data.get("city"),
            country=data.get("country"),
            postcode=data.get("postcode"),
            region=data.get("region"),
            latitude=data.get("latitude"),
            longitude=data.get("longitude"),
        )


@dataclass(frozen=True)
class Merchant:
    """A merchant attached to a transaction.

    Transactions carry the merchant either as a bare id or, when the request
    asked for ``expand[]=merchant``, as the full object. An id-only merchant
    has every field except ``id`` set to None.
    """

    id: str
    address: MerchantAddress | None = None
    created: datetime | None = None
    group_id: str | None = None
    logo: str | None = None
    emoji: str | None = None
    name: str | None = None
    category: str | None = None

    @property
    def is_id_only(self) -> bool:
        """Return True if only the merchant id is known."""
        return all(
            value is None
            for value in (
                self.address,
                self.created,
                self.group_id,
                self.logo,
                self.emoji,
                self.name,
                self.category,
            )
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Merchant":
        address = data.get("address")
        return cls(
            id=_field(data, "id"),
            address=MerchantAddress.from_dict(address) if address else None,
            created=parse_optional_timestamp(data.get("created")),
            group_id=data.get("group_id"),
            logo=data.get("logo"),
            emoji=data.get("emoji"),
            name=data.get("name"),
            category=data.get("category"),
        )


def decode_merchant(value: Any) -> Merchant | None:
    """
    Decode the polymorphic ``merchant`` field of a transaction.

    Args:
        value: The raw JSON value (object, string, or null)

    Returns:
        A fully populated Merchant for an object, an id-only Merchant for a
        string, or None for null

    Raises:
        ResponseDecodeError: For any other JSON kind
    """
    if value is None:
        return None
    if isinstance(value, dict):
        return Merchant.from_dict(value)
    if isinstance(value, str):
        return Merchant(id=value)
    raise ResponseDecodeError(f"Unexpected merchant value: {value!r}")


def _decode_settled(value: Any) -> bool | None:
    """Decode ``settled`` strictly as a boolean."""
    if value is None or isinstance(value, bool):
        return value
    raise ResponseDecodeError(f"Expected boolean for settled, got {value!r}")


@dataclass(frozen=True)
class Transaction:
    """A transaction on a Monzo account. Amounts are in minor units."""

    id: str
    account_balance: int
    amount: int
    currency: str
    description: str
    created: datetime
    merchant: Merchant | None = None
    metadata: dict[str, str] = field(default_factory=dict, hash=False)
    notes: str = ""
    is_load: bool = False
    settled: bool | None = None
    category: str | None = None
    decline_reason: str | None = None

    @property
    def is_declined(self) -> bool:
        """Return True if the transaction was declined."""
        return self.decline_reason is not None

    @property
    def is_debit(self) -> bool:
        """Return True if money left the account."""
        return self.amount < 0

    @property
    def is_credit(self) -> bool:
        """Return True for refunds, incoming payments and top-ups."""
        return self.amount > 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            id=_field(data, "id"),
            account_balance=data.get("account_balance", 0),
            amount=_field(data, "amount"),
            currency=_field(data, "currency"),
            description=data.get("description") or "",
            created=parse_timestamp(_field(data, "created")),
            merchant=decode_merchant(data.get("merchant")),
            metadata=_string_map(data.get("metadata")),
            notes=data.get("notes") or "",
            is_load=bool(data.get("is_load", False)),
            settled=_decode_settled(data.get("settled")),
            category=data.get("category"),
            decline_reason=data.get("decline_reason"),
        )


@dataclass(frozen=True)
class Webhook:
    """A webhook registered against an account."""

    id: str
    account_id: str
    url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Webhook":
        return cls(
            id=_field(data, "id"),
            account_id=_field(data, "account_id"),
            url=_field(data, "url"),
        )


@dataclass(frozen=True)
class Attachment:
    """A file registered against a transaction."""

    id: str
    user_id: str
    external_id: str
    file_url: str
    file_type: str
    created: datetime | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Attachment":
        return cls(
            id=_field(data, "id"),
            user_id=data.get("user_id", ""),
            external_id=_field(data, "external_id"),
            file_url=_field(data, "file_url"),
            file_type=_field(data, "file_type"),
            created=parse_optional_timestamp(data.get("created")),
        )


@dataclass(frozen=True)
class AttachmentUpload:
    """Temporary upload target returned by the attachment upload endpoint."""

    file_url: str
    upload_url: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AttachmentUpload":
        return cls(
            file_url=_field(data, "file_url"),
            upload_url=_field(data, "upload_url"),
        )


@dataclass(frozen=True)
class AccessToken:
    """OAuth2 bearer token issued by the token endpoint.

    ``expires_at`` is computed once, when the token is received, from the
    relative ``expires_in`` duration.
    """

    value: str = field(repr=False)
    refresh_token: str | None = field(default=None, repr=False)
    user_id: str | None = None
    client_id: str | None = None
    token_type: str = "Bearer"
    expires_in: int | None = None
    expires_at: datetime | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Return True if the expiry time has passed. Unknown expiry never expires."""
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at

    @classmethod
    def from_dict(cls, data: dict[str, Any], now: datetime | None = None) -> "AccessToken":
        """Build a token from a token endpoint response or a stored config entry."""
        expires_in = data.get("expires_in")
        expires_at = parse_optional_timestamp(data.get("expires_at"))
        if expires_at is None and expires_in is not None:
            now = now or datetime.now(timezone.utc)
            expires_at = now + timedelta(seconds=int(expires_in))

        return cls(
            value=_field(data, "access_token"),
            refresh_token=data.get("refresh_token"),
            user_id=data.get("user_id"),
            client_id=data.get("client_id"),
            token_type=data.get("token_type") or "Bearer",
            expires_in=int(expires_in) if expires_in is not None else None,
            expires_at=expires_at,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for storing in the config file."""
        return {
            "access_token": self.value,
            "refresh_token": self.refresh_token,
            "user_id": self.user_id,
            "client_id": self.client_id,
            "token_type": self.token_type,
            "expires_in": self.expires_in,
            "expires_at": format_timestamp(self.expires_at) if self.expires_at else None,
        }


@dataclass(frozen=True)
class ErrorResponse:
    """Error body returned with non-success responses."""

    code: str | None = None
    error: str | None = None
    error_description: str | None = None
    message: str | None = None
    params: dict[str, str] = field(default_factory=dict, hash=False)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ErrorResponse":
        params = data.get("params")
        return cls(
            code=data.get("code"),
            error=data.get("error"),
            error_description=data.get("error_description"),
            message=data.get("message"),
            params=(
                {str(k): "" if v is None else str(v) for k, v in params.items()}
                if isinstance(params, dict)
                else {}
            ),
        )
