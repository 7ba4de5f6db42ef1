"""Parsing and validation helpers shared by the Monzo clients."""

import re
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from monzo_client.errors import InvalidArgumentError, ResponseDecodeError

# Wire format for timestamps in query strings (second precision, UTC)
RFC3339_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_FRACTION_RE = re.compile(r"\.(\d+)(?=[+-]\d\d:\d\d$|$)")


def format_timestamp(value: datetime) -> str:
    """
    Format a datetime as an RFC 3339 UTC timestamp.

    Naive datetimes are taken to be UTC already. Sub-second precision is
    dropped.

    Args:
        value: Datetime to format

    Returns:
        Timestamp string such as 2015-04-05T18:01:32Z
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime(RFC3339_FORMAT)


def parse_timestamp(value: Any) -> datetime:
    """
    Parse an RFC 3339 timestamp from an API payload.

    Supported forms:
    - 2015-11-13T12:17:42Z
    - 2015-08-22T12:20:18.409Z (any number of fraction digits)
    - 2015-08-22T13:20:18+01:00

    Args:
        value: Timestamp string from the JSON body

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        ResponseDecodeError: If value is not a valid timestamp string
    """
    if not isinstance(value, str) or not value.strip():
        raise ResponseDecodeError(f"Expected RFC 3339 timestamp, got {value!r}")

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only takes 3 or 6 fraction digits
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as err:
        raise ResponseDecodeError(f"Invalid RFC 3339 timestamp: {value!r}") from err

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def parse_optional_timestamp(value: Any) -> datetime | None:
    """Parse a timestamp that may be null or absent."""
    if value is None:
        return None
    return parse_timestamp(value)


def require(name: str, value: str | None) -> str:
    """Return value, or raise InvalidArgumentError if it is None or blank."""
    if value is None or not str(value).strip():
        raise InvalidArgumentError(name)
    return value


def require_mapping(name: str, value: Mapping[str, str] | None) -> Mapping[str, str]:
    """Return value, or raise InvalidArgumentError if it is None."""
    if value is None:
        raise InvalidArgumentError(name)
    return value
