"""Time- and cursor-based pagination for list endpoints."""

from dataclasses import dataclass
from datetime import datetime

from monzo_client.errors import InvalidArgumentError
from monzo_client.utils.parsing import format_timestamp


@dataclass(frozen=True)
class PaginationOptions:
    """Pagination filters appended to a list request's query string.

    ``since`` is either a timestamp or an object id; when both are given the
    timestamp wins.
    """

    limit: int | None = None
    since_time: datetime | None = None
    since_id: str | None = None
    before_time: datetime | None = None

    def __post_init__(self) -> None:
        """Validate the page size."""
        if self.limit is not None and (
            isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1
        ):
            raise InvalidArgumentError("limit", f"limit must be a positive integer, got {self.limit!r}")

    @property
    def since(self) -> str:
        """The value sent as ``since``, or an empty string."""
        if self.since_time is not None:
            return format_timestamp(self.since_time)
        return self.since_id or ""

    @property
    def before(self) -> str:
        """The value sent as ``before``, or an empty string."""
        if self.before_time is not None:
            return format_timestamp(self.before_time)
        return ""

    def to_query(self) -> str:
        """Format as a query string fragment.

        All three keys are always present, with empty values for unset
        filters, e.g. ``&limit=&since=&before=``.
        """
        limit = "" if self.limit is None else str(self.limit)
        return f"&limit={limit}&since={self.since}&before={self.before}"

    def __str__(self) -> str:
        return self.to_query()
