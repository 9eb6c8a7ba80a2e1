"""
Dashboard view model.

Turns a dashboard snapshot into display-ready values: status badge, labels,
win-rate tiers and the "no data yet" state. Rendering itself belongs to the
front end.
"""

from datetime import datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel

from ..models.dashboard import DashboardData
from ..models.statistics import Statistics
from ..models.timeframe import get_category_icon, get_category_label, get_timeframe_label
from .status_resolver import DISPLAY_LABELS, DisplayState, StatusResolver


class WinRateTier(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


def win_rate_tier(win_rate: float) -> WinRateTier:
    """Tier used to colour a win rate: ≥70 excellent, ≥60 good, ≥50 fair."""
    if win_rate >= 70:
        return WinRateTier.EXCELLENT
    if win_rate >= 60:
        return WinRateTier.GOOD
    if win_rate >= 50:
        return WinRateTier.FAIR
    return WinRateTier.POOR


class StatusBadge(BaseModel):
    state: DisplayState
    label: str
    message: str
    show_metrics: bool


class CategoryCard(BaseModel):
    category: str
    label: str
    icon: str
    timeframes: List[str]
    has_data: bool
    total_predictions: int
    win_rate: float
    tier: Optional[WinRateTier]


class TimeframeRow(BaseModel):
    timeframe_minutes: int
    label: str
    has_data: bool
    total_predictions: int
    win_rate: float
    tier: Optional[WinRateTier]


class DashboardView(BaseModel):
    status: StatusBadge
    has_data: bool
    empty_message: Optional[str]
    overall_tier: Optional[WinRateTier]
    categories: List[CategoryCard]
    timeframes: List[TimeframeRow]
    pending_count: int
    last_update: Optional[str]


NO_DATA_MESSAGE = "No validated predictions yet"


def _tier(stats_total: int, win_rate: float) -> Optional[WinRateTier]:
    return win_rate_tier(win_rate) if stats_total > 0 else None


def build_dashboard_view(
    snapshot: Optional[DashboardData],
    resolver: StatusResolver,
    now: datetime,
) -> DashboardView:
    """
    Build the view model for a snapshot.

    Args:
        snapshot: Latest dashboard document, or None before the first successful refresh
        resolver: Resolver carrying the shared heartbeat thresholds
        now: Current time

    Returns:
        DashboardView
    """
    system_status = snapshot.system_status if snapshot else None
    state = resolver.display_state(system_status, now)
    badge = StatusBadge(
        state=state,
        label=DISPLAY_LABELS[state],
        message=resolver.display_message(state, system_status, now),
        show_metrics=state == DisplayState.ONLINE,
    )

    overall: Optional[Statistics] = snapshot.overall_stats if snapshot else None
    has_data = bool(overall and overall.total_predictions > 0)

    categories = []
    timeframes = []
    if snapshot:
        categories = [
            CategoryCard(
                category=stats.category.value,
                label=get_category_label(stats.category),
                icon=get_category_icon(stats.category),
                timeframes=[get_timeframe_label(tf) for tf in stats.timeframes],
                has_data=stats.total_predictions > 0,
                total_predictions=stats.total_predictions,
                win_rate=round(stats.win_rate, 1),
                tier=_tier(stats.total_predictions, stats.win_rate),
            )
            for stats in snapshot.category_stats
        ]
        timeframes = [
            TimeframeRow(
                timeframe_minutes=stats.timeframe_minutes,
                label=get_timeframe_label(stats.timeframe_minutes),
                has_data=stats.total_predictions > 0,
                total_predictions=stats.total_predictions,
                win_rate=round(stats.win_rate, 1),
                tier=_tier(stats.total_predictions, stats.win_rate),
            )
            for stats in snapshot.timeframe_stats
            if stats.timeframe_minutes is not None
        ]

    return DashboardView(
        status=badge,
        has_data=has_data,
        empty_message=None if has_data else NO_DATA_MESSAGE,
        overall_tier=_tier(overall.total_predictions, overall.win_rate) if overall else None,
        categories=categories,
        timeframes=timeframes,
        pending_count=len(snapshot.pending_predictions) if snapshot else 0,
        last_update=snapshot.last_update if snapshot else None,
    )
