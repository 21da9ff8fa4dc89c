"""
Common utilities for the Snow Oracle SDK.

Tolerant parsing helpers shared by the REST parsers and the trade feed.
API payloads are loosely typed: numbers may arrive as strings, timestamps
as ISO strings or epoch values, and fields may be missing entirely.
"""

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any


def utc_now() -> datetime:
    """Current time as a UTC timezone-aware datetime."""
    return datetime.now(timezone.utc)


def parse_datetime(value: Any) -> datetime | None:
    """
    Parse various datetime formats to UTC timezone-aware datetime.

    Supported formats:
    - datetime object (with or without timezone)
    - ISO 8601 string: "2026-01-12T17:00:00Z", "2026-01-12T17:00:00+00:00"
    - Date string: "2026-01-12"
    - Unix timestamp in seconds or milliseconds

    Returns:
        UTC timezone-aware datetime or None if parsing fails

    Example:
        >>> parse_datetime("2026-01-12T17:00:00Z")
        datetime(2026, 1, 12, 17, 0, 0, tzinfo=timezone.utc)
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, (int, float)):
        return _from_timestamp(float(value))

    value_str = str(value).strip()
    if not value_str:
        return None

    try:
        dt = datetime.fromisoformat(value_str.replace("Z", "+00:00"))
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except ValueError:
        pass

    try:
        return _from_timestamp(float(value_str))
    except ValueError:
        return None


def _from_timestamp(ts: float) -> datetime | None:
    # Values this large are milliseconds
    if ts > 1e12:
        ts = ts / 1000
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_decimal(value: Any) -> Decimal | None:
    """
    Parse various numeric formats to Decimal.

    Args:
        value: Value to parse (string, int, float, Decimal)

    Returns:
        Decimal or None if parsing fails
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, Decimal):
        return value if value.is_finite() else None

    try:
        # Handle string with commas (e.g., "1,234.56")
        if isinstance(value, str):
            value = value.replace(",", "").strip()
        result = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None

    return result if result.is_finite() else None


def decimal_or_zero(value: Any) -> Decimal:
    """Parse a Decimal, falling back to zero for missing or invalid input."""
    result = parse_decimal(value)
    return result if result is not None else Decimal(0)


def parse_int(value: Any, default: int = 0) -> int:
    """Parse an integer, falling back to ``default`` for missing or invalid input."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(value)
    except (ValueError, TypeError):
        return default
