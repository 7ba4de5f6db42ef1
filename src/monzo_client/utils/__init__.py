"""Utility functions for monzo-client."""

from monzo_client.utils.parsing import (
    format_timestamp,
    parse_optional_timestamp,
    parse_timestamp,
    require,
    require_mapping,
)

__all__ = [
    "format_timestamp",
    "parse_timestamp",
    "parse_optional_timestamp",
    "require",
    "require_mapping",
]
