"""Timestamp parsing helpers.

The prediction process stores ISO-8601 strings, usually without an offset
(local WIB time). Parsing never raises: callers decide what an unparseable
value means for them.
"""

from datetime import datetime, timezone, tzinfo
from typing import Any, Optional


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any, default_tz: tzinfo = timezone.utc) -> Optional[datetime]:
    """
    Parse a stored timestamp into an aware datetime.

    Args:
        value: ISO-8601 string or datetime
        default_tz: Timezone assumed for naive values

    Returns:
        Aware datetime, or None if the value cannot be interpreted
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed


def isoformat_utc(value: datetime) -> str:
    """Format an aware datetime as an ISO string in UTC with a `Z` suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def minutes_between(earlier: datetime, later: datetime) -> float:
    """Elapsed minutes from `earlier` to `later` (negative if reversed)."""
    return (later - earlier).total_seconds() / 60.0


def ensure_aware(value: datetime, default_tz: tzinfo = timezone.utc) -> datetime:
    """Attach `default_tz` to a naive datetime; aware values pass through."""
    if value.tzinfo is None:
        return value.replace(tzinfo=default_tz)
    return value
