"""Lenient coercion of stored document values.

Documents are written by another process; a malformed field becomes None
instead of rejecting the whole document.
"""

import math
from datetime import datetime
from typing import Any, Optional


def as_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any) -> Optional[int]:
    number = as_float(value)
    if number is None:
        return None
    return int(number)


def as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def as_bool(value: Any) -> Optional[bool]:
    return value if isinstance(value, bool) else None
