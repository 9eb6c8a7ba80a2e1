"""
Statistics aggregate models.

Aggregates are derived on every request and never stored.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .timeframe import TimeframeCategory


class GroupTotals(BaseModel):
    """Counts and error means of one group of predictions."""

    total_predictions: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    win_rate: float = Field(default=0.0, ge=0.0, le=100.0, description="Percentage of wins over total")
    avg_error: float = Field(default=0.0, description="Mean absolute price error")
    avg_error_pct: float = Field(default=0.0, description="Mean price error in percent")

    model_config = ConfigDict(frozen=True)


class Statistics(GroupTotals):
    """Overall or per-timeframe statistics over the trailing window."""

    timeframe_minutes: Optional[int] = Field(default=None, description="Set on per-timeframe statistics")
    period_days: int = Field(description="Trailing window length")
    last_updated: str = Field(description="ISO timestamp the aggregate was computed at")


class CategoryStatistics(GroupTotals):
    """Statistics of one timeframe category."""

    category: TimeframeCategory
    timeframes: List[int]


class AggregatedStatistics(BaseModel):
    """Everything the aggregator produces for one window of predictions."""

    overall: Statistics
    timeframes: List[Statistics]
    categories: List[CategoryStatistics]

    model_config = ConfigDict(frozen=True)
