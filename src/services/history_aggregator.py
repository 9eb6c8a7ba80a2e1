"""
History aggregator.

Hourly trade-history timeline and monthly daily-performance heatmap over a
list of predictions. Hours and days are taken in the store timezone, which is
the local time of the prediction process.
"""

import calendar
from collections import defaultdict
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Dict, Iterable, List

from ..models.history import (
    DailyPerformance,
    MonthlyHeatmap,
    OutcomeCounts,
    OutcomeFilter,
    TimelineGroup,
    TimelineWindow,
)
from ..models.prediction import Prediction, ValidationResult
from ..utils.timestamps import ensure_aware

WINDOW_DURATIONS: Dict[TimelineWindow, timedelta] = {
    TimelineWindow.DAY: timedelta(hours=24),
    TimelineWindow.WEEK: timedelta(days=7),
    TimelineWindow.MONTH: timedelta(days=30),
}


def count_outcomes(predictions: List[Prediction]) -> OutcomeCounts:
    """Counts for one group. Validated non-wins count as losses."""
    validated = [p for p in predictions if p.validated]
    wins = sum(1 for p in validated if p.validation_result == ValidationResult.WIN)
    return OutcomeCounts(
        total=len(predictions),
        wins=wins,
        losses=len(validated) - wins,
        pending=len(predictions) - len(validated),
        win_rate=wins / len(validated) * 100 if validated else 0.0,
    )


def _matches(prediction: Prediction, outcome: OutcomeFilter) -> bool:
    if outcome == OutcomeFilter.ALL:
        return True
    if outcome == OutcomeFilter.PENDING:
        return not prediction.validated
    if outcome == OutcomeFilter.WIN:
        return prediction.validation_result == ValidationResult.WIN
    return prediction.validation_result == ValidationResult.LOSE


def build_timeline(
    predictions: Iterable[Prediction],
    now: datetime,
    window: TimelineWindow = TimelineWindow.DAY,
    outcome: OutcomeFilter = OutcomeFilter.ALL,
    tz: tzinfo = timezone.utc,
) -> List[TimelineGroup]:
    """
    Group predictions made after `now - window` by hour, newest hour first.

    Args:
        predictions: Candidate predictions
        now: Reference time
        window: Lookback window
        outcome: Outcome filter
        tz: Timezone for hour buckets and naive timestamps

    Returns:
        Timeline groups, each with its predictions newest first
    """
    cutoff = ensure_aware(now) - WINDOW_DURATIONS[TimelineWindow(window)]
    buckets: Dict[datetime, List[tuple]] = defaultdict(list)

    for prediction in predictions:
        prediction_time = prediction.prediction_datetime(tz)
        if prediction_time is None or prediction_time <= cutoff:
            continue
        if not _matches(prediction, outcome):
            continue
        local = prediction_time.astimezone(tz)
        hour = local.replace(minute=0, second=0, microsecond=0)
        buckets[hour].append((local, prediction))

    groups = []
    for hour in sorted(buckets, reverse=True):
        entries = sorted(buckets[hour], key=lambda entry: entry[0], reverse=True)
        members = [prediction for _, prediction in entries]
        groups.append(
            TimelineGroup(hour=hour.isoformat(), predictions=members, **count_outcomes(members).model_dump())
        )
    return groups


def build_monthly_heatmap(
    predictions: Iterable[Prediction],
    year: int,
    month: int,
    tz: tzinfo = timezone.utc,
) -> MonthlyHeatmap:
    """
    Daily statistics for every day of a calendar month.

    Win rate is over validated predictions of the day; average confidence is
    over every prediction of the day that reports one.
    """
    if not 1 <= month <= 12:
        raise ValueError(f"Invalid month: {month}")

    totals: Dict[int, Dict[str, float]] = defaultdict(
        lambda: {"total": 0, "wins": 0, "losses": 0, "confidence_sum": 0.0, "confidence_count": 0}
    )
    for prediction in predictions:
        prediction_time = prediction.prediction_datetime(tz)
        if prediction_time is None:
            continue
        local = prediction_time.astimezone(tz)
        if local.year != year or local.month != month:
            continue

        day = totals[local.day]
        day["total"] += 1
        if prediction.confidence is not None:
            day["confidence_sum"] += prediction.confidence
            day["confidence_count"] += 1
        if prediction.validated:
            if prediction.validation_result == ValidationResult.WIN:
                day["wins"] += 1
            else:
                day["losses"] += 1

    days = []
    for day_number in range(1, calendar.monthrange(year, month)[1] + 1):
        date = f"{year:04d}-{month:02d}-{day_number:02d}"
        if day_number not in totals:
            days.append(DailyPerformance(date=date))
            continue
        day = totals[day_number]
        validated = day["wins"] + day["losses"]
        days.append(
            DailyPerformance(
                date=date,
                total=int(day["total"]),
                wins=int(day["wins"]),
                losses=int(day["losses"]),
                win_rate=day["wins"] / validated * 100 if validated else 0.0,
                avg_confidence=(
                    day["confidence_sum"] / day["confidence_count"] if day["confidence_count"] else None
                ),
            )
        )
    return MonthlyHeatmap(year=year, month=month, days=days)
