"""
Prediction history models: hourly timeline groups and daily heatmap cells.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .prediction import Prediction


class TimelineWindow(str, Enum):
    """How far back the timeline reaches."""

    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"


class OutcomeFilter(str, Enum):
    """Which predictions the timeline shows."""

    ALL = "all"
    WIN = "win"
    LOSE = "lose"
    PENDING = "pending"


class OutcomeCounts(BaseModel):
    total: int = 0
    wins: int = 0
    losses: int = 0
    pending: int = 0
    win_rate: float = Field(default=0.0, description="Wins over validated predictions, in percent")


class TimelineGroup(OutcomeCounts):
    """Predictions made within one hour."""

    hour: str = Field(description="Start of the hour, ISO format in the store timezone")
    predictions: List[Prediction] = Field(default_factory=list)


class DailyPerformance(BaseModel):
    """One heatmap cell."""

    date: str = Field(description="Calendar date, YYYY-MM-DD")
    total: int = 0
    wins: int = 0
    losses: int = 0
    win_rate: float = 0.0
    avg_confidence: Optional[float] = None


class MonthlyHeatmap(BaseModel):
    year: int
    month: int
    days: List[DailyPerformance]
