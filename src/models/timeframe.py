"""
Timeframe categories and labels.

Timeframes are prediction horizons in minutes. Each one belongs to exactly
one of four categories, grouped by trading style.
"""

from enum import Enum
from typing import Dict, List, Optional, Tuple


class TimeframeCategory(str, Enum):
    """Timeframe category, in ascending horizon order."""

    ULTRA_SHORT = "ultra_short"
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"


TIMEFRAME_CATEGORIES: Dict[TimeframeCategory, Tuple[int, ...]] = {
    TimeframeCategory.ULTRA_SHORT: (1, 2, 3, 5),
    TimeframeCategory.SHORT: (10, 15, 20, 30, 45, 60),
    TimeframeCategory.MEDIUM: (120, 180, 240, 360, 480, 720),
    TimeframeCategory.LONG: (1440, 2880, 4320, 5760, 7200, 10080),
}

# Timeframes that get their own row in the statistics
ACTIVE_TIMEFRAMES: Tuple[int, ...] = (5, 10, 15, 30, 60, 120, 240, 480, 720, 1440)

TIMEFRAME_LABELS: Dict[int, str] = {
    1: "1min",
    2: "2min",
    3: "3min",
    5: "5min",
    10: "10min",
    15: "15min",
    20: "20min",
    30: "30min",
    45: "45min",
    60: "1h",
    120: "2h",
    180: "3h",
    240: "4h",
    360: "6h",
    480: "8h",
    720: "12h",
    1440: "24h",
    2880: "2d",
    4320: "3d",
    5760: "4d",
    7200: "5d",
    10080: "7d",
}

CATEGORY_LABELS: Dict[TimeframeCategory, str] = {
    TimeframeCategory.ULTRA_SHORT: "Ultra Short (Scalping)",
    TimeframeCategory.SHORT: "Short Term (Day Trading)",
    TimeframeCategory.MEDIUM: "Medium Term (Swing Trading)",
    TimeframeCategory.LONG: "Long Term (Position Trading)",
}

CATEGORY_ICONS: Dict[TimeframeCategory, str] = {
    TimeframeCategory.ULTRA_SHORT: "⚡",
    TimeframeCategory.SHORT: "📊",
    TimeframeCategory.MEDIUM: "📈",
    TimeframeCategory.LONG: "🎯",
}

# Inclusive upper bound of each category
_CATEGORY_UPPER_BOUNDS: List[Tuple[int, TimeframeCategory]] = [
    (5, TimeframeCategory.ULTRA_SHORT),
    (60, TimeframeCategory.SHORT),
    (720, TimeframeCategory.MEDIUM),
]


def get_timeframe_category(minutes: int) -> TimeframeCategory:
    """
    Classify a timeframe into its category.

    Ranges are ≤5, ≤60, ≤720, otherwise long, so every member of
    TIMEFRAME_CATEGORIES maps to the category that lists it.
    """
    for upper_bound, category in _CATEGORY_UPPER_BOUNDS:
        if minutes <= upper_bound:
            return category
    return TimeframeCategory.LONG


def get_category_timeframes(category: TimeframeCategory) -> List[int]:
    """Timeframe members of a category, ascending."""
    return list(TIMEFRAME_CATEGORIES[TimeframeCategory(category)])


def get_timeframe_label(minutes: Optional[int]) -> str:
    """Human label for a timeframe (`60` -> `1h`), falling back to `{n}min`."""
    if minutes is None:
        return "unknown"
    return TIMEFRAME_LABELS.get(minutes, f"{minutes}min")


def get_category_label(category: TimeframeCategory) -> str:
    return CATEGORY_LABELS[TimeframeCategory(category)]


def get_category_icon(category: TimeframeCategory) -> str:
    return CATEGORY_ICONS[TimeframeCategory(category)]
