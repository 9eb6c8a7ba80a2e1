"""
Statistics aggregator.

Groups validated predictions from the trailing window by timeframe and by
timeframe category and computes win/loss counts, win rate and mean errors.
Pure: the same predictions and `now` always give the same result.
"""

from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List, Optional, Sequence

from ..config.logging import get_logger
from ..models.prediction import Prediction, ValidationResult
from ..models.statistics import AggregatedStatistics, CategoryStatistics, GroupTotals, Statistics
from ..models.timeframe import ACTIVE_TIMEFRAMES, TIMEFRAME_CATEGORIES, TimeframeCategory
from ..utils.timestamps import ensure_aware, isoformat_utc

logger = get_logger(__name__)


def compute_group_totals(predictions: Sequence[Prediction]) -> GroupTotals:
    """
    Compute counts and error means for one group.

    Missing error values count as zero. An empty group yields all zeros.

    Args:
        predictions: Predictions in the group

    Returns:
        GroupTotals
    """
    total = len(predictions)
    wins = sum(1 for p in predictions if p.validation_result == ValidationResult.WIN)
    losses = sum(1 for p in predictions if p.validation_result == ValidationResult.LOSE)

    if total == 0:
        return GroupTotals()

    total_error = sum(p.price_error or 0.0 for p in predictions)
    total_error_pct = sum(p.price_error_pct or 0.0 for p in predictions)

    return GroupTotals(
        total_predictions=total,
        wins=wins,
        losses=losses,
        win_rate=wins / total * 100,
        avg_error=total_error / total,
        avg_error_pct=total_error_pct / total,
    )


class StatisticsAggregator:
    """Builds overall, per-timeframe and per-category statistics."""

    def __init__(
        self,
        window_days: int = 7,
        active_timeframes: Iterable[int] = ACTIVE_TIMEFRAMES,
        categories: Optional[Dict[TimeframeCategory, Iterable[int]]] = None,
        default_tz: tzinfo = timezone.utc,
    ):
        """
        Initialize aggregator.

        Args:
            window_days: Trailing window, in days, of predictions to include
            active_timeframes: Timeframes that get their own statistics row
            categories: Category -> member timeframes table
            default_tz: Timezone assumed for naive stored timestamps
        """
        self.window_days = window_days
        self.active_timeframes = tuple(active_timeframes)
        self.categories = {
            TimeframeCategory(category): tuple(members)
            for category, members in (categories or TIMEFRAME_CATEGORIES).items()
        }
        self.default_tz = default_tz

    def select_window(self, predictions: Iterable[Prediction], now: datetime) -> List[Prediction]:
        """
        Keep validated predictions whose `prediction_time` is inside the window.

        Predictions with a missing or malformed `prediction_time` are dropped.
        """
        now = ensure_aware(now)
        cutoff = now - timedelta(days=self.window_days)
        selected = []
        skipped_unparseable = 0
        for prediction in predictions:
            if not prediction.validated:
                continue
            prediction_time = prediction.prediction_datetime(self.default_tz)
            if prediction_time is None:
                skipped_unparseable += 1
                continue
            if prediction_time >= cutoff:
                selected.append(prediction)

        if skipped_unparseable:
            logger.warning("predictions_skipped_unparseable_time", count=skipped_unparseable)
        return selected

    def aggregate(self, predictions: Iterable[Prediction], now: datetime) -> AggregatedStatistics:
        """
        Aggregate predictions into overall, timeframe and category statistics.

        Args:
            predictions: Candidate predictions (any order, validated or not)
            now: Reference time for the window and `last_updated`

        Returns:
            AggregatedStatistics
        """
        now = ensure_aware(now)
        window = self.select_window(predictions, now)
        last_updated = isoformat_utc(now)

        overall_totals = compute_group_totals(window)
        self._check_data_quality("overall", overall_totals)
        overall = Statistics(
            period_days=self.window_days,
            last_updated=last_updated,
            **overall_totals.model_dump(),
        )

        timeframe_stats = []
        for timeframe in self.active_timeframes:
            group = [p for p in window if p.timeframe_minutes == timeframe]
            totals = compute_group_totals(group)
            timeframe_stats.append(
                Statistics(
                    timeframe_minutes=timeframe,
                    period_days=self.window_days,
                    last_updated=last_updated,
                    **totals.model_dump(),
                )
            )

        category_stats = []
        for category, members in self.categories.items():
            group = [p for p in window if p.timeframe_minutes in members]
            totals = compute_group_totals(group)
            self._check_data_quality(category.value, totals)
            category_stats.append(
                CategoryStatistics(
                    category=category,
                    timeframes=list(members),
                    **totals.model_dump(),
                )
            )

        logger.debug(
            "statistics_aggregated",
            window_days=self.window_days,
            total_predictions=overall.total_predictions,
            wins=overall.wins,
            losses=overall.losses,
        )

        return AggregatedStatistics(overall=overall, timeframes=timeframe_stats, categories=category_stats)

    @staticmethod
    def _check_data_quality(scope: str, totals: GroupTotals) -> None:
        # Validated predictions without a WIN/LOSE outcome
        missing = totals.total_predictions - totals.wins - totals.losses
        if missing > 0:
            logger.warning("validated_predictions_missing_result", scope=scope, count=missing)
