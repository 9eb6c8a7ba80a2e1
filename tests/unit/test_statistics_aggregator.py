"""
Unit tests for the statistics aggregator.
"""

import pytest
from datetime import timedelta
from src.models.timeframe import ACTIVE_TIMEFRAMES, TimeframeCategory
from src.services.statistics_aggregator import StatisticsAggregator, compute_group_totals


def _by_timeframe(result):
    return {s.timeframe_minutes: s for s in result.timeframes}


def _by_category(result):
    return {s.category: s for s in result.categories}


def test_six_wins_four_losses(now, prediction_factory):
    """Test counts and win rate for a single timeframe."""
    predictions = [prediction_factory(f"w{i}", result="WIN") for i in range(6)]
    predictions += [prediction_factory(f"l{i}", result="LOSE") for i in range(4)]

    result = StatisticsAggregator().aggregate(predictions, now)

    assert result.overall.total_predictions == 10
    assert result.overall.wins == 6
    assert result.overall.losses == 4
    assert result.overall.win_rate == pytest.approx(60.0)
    assert result.overall.period_days == 7

    fifteen = _by_timeframe(result)[15]
    assert fifteen.total_predictions == 10
    assert fifteen.win_rate == pytest.approx(60.0)

    categories = _by_category(result)
    assert categories[TimeframeCategory.SHORT].total_predictions == 10
    assert categories[TimeframeCategory.LONG].total_predictions == 0


def test_empty_input_yields_zero_groups(now):
    """Test that every row exists and is zero when nothing is validated."""
    result = StatisticsAggregator().aggregate([], now)

    assert result.overall.total_predictions == 0
    assert result.overall.win_rate == 0.0
    assert result.overall.avg_error == 0.0
    assert [s.timeframe_minutes for s in result.timeframes] == list(ACTIVE_TIMEFRAMES)
    assert all(s.total_predictions == 0 and s.win_rate == 0.0 for s in result.timeframes)
    assert len(result.categories) == 4
    assert all(s.total_predictions == 0 for s in result.categories)


def test_window_excludes_old_predictions(now, prediction_factory):
    """Test that only predictions from the trailing window count."""
    predictions = [
        prediction_factory("old", result="WIN", age=timedelta(days=8)),
        prediction_factory("recent", result="LOSE", age=timedelta(days=6)),
        prediction_factory("edge", result="WIN", age=timedelta(days=7)),
    ]

    result = StatisticsAggregator(window_days=7).aggregate(predictions, now)

    assert result.overall.total_predictions == 2
    assert result.overall.wins == 1
    assert result.overall.losses == 1


def test_unvalidated_and_unparseable_predictions_are_ignored(now, prediction_factory):
    """Test that pending and malformed predictions never reach the statistics."""
    predictions = [
        prediction_factory("pending"),
        prediction_factory("garbled", result="WIN", prediction_time="not a date"),
        prediction_factory("missing", result="WIN", prediction_time=None),
        prediction_factory("ok", result="WIN"),
    ]

    result = StatisticsAggregator().aggregate(predictions, now)

    assert result.overall.total_predictions == 1
    assert result.overall.win_rate == pytest.approx(100.0)


def test_mean_errors_treat_missing_values_as_zero(now, prediction_factory):
    """Test error means over the whole group."""
    predictions = [
        prediction_factory("a", result="WIN", price_error=10.0, price_error_pct=0.2),
        prediction_factory("b", result="LOSE", price_error=20.0, price_error_pct=0.4),
        prediction_factory("c", result="LOSE", price_error=None, price_error_pct=None),
    ]

    result = StatisticsAggregator().aggregate(predictions, now)

    assert result.overall.avg_error == pytest.approx(10.0)
    assert result.overall.avg_error_pct == pytest.approx(0.2)


def test_category_totals_sum_to_overall(now, prediction_factory):
    """Test that categories partition the categorised timeframes."""
    predictions = [
        prediction_factory("u", timeframe=5, result="WIN"),
        prediction_factory("s", timeframe=30, result="LOSE"),
        prediction_factory("m", timeframe=240, result="WIN"),
        prediction_factory("l", timeframe=1440, result="WIN", age=timedelta(days=2)),
    ]

    result = StatisticsAggregator().aggregate(predictions, now)

    assert sum(s.total_predictions for s in result.categories) == result.overall.total_predictions
    assert all(s.total_predictions == 1 for s in result.categories)


def test_uncategorised_timeframe_counts_only_overall(now, prediction_factory):
    """Test that a timeframe outside every category still counts overall."""
    result = StatisticsAggregator().aggregate([prediction_factory("odd", timeframe=7, result="WIN")], now)

    assert result.overall.total_predictions == 1
    assert sum(s.total_predictions for s in result.categories) == 0
    assert sum(s.total_predictions for s in result.timeframes) == 0


def test_aggregate_is_deterministic(now, prediction_factory):
    """Test that the same input and time give the same output."""
    predictions = [prediction_factory(f"p{i}", result="WIN" if i % 3 else "LOSE") for i in range(9)]
    aggregator = StatisticsAggregator()

    assert aggregator.aggregate(predictions, now) == aggregator.aggregate(list(reversed(predictions)), now)


def test_last_updated_is_reference_time(now):
    """Test that the aggregate is stamped with the reference time."""
    result = StatisticsAggregator().aggregate([], now)

    assert result.overall.last_updated == "2025-01-15T12:00:00Z"
    assert all(s.last_updated == "2025-01-15T12:00:00Z" for s in result.timeframes)


def test_group_totals_with_missing_result(prediction_factory):
    """Test that validated predictions without an outcome count in total only."""
    totals = compute_group_totals(
        [
            prediction_factory("a", result="WIN"),
            prediction_factory("b", result="DRAW"),
        ]
    )

    assert totals.total_predictions == 2
    assert totals.wins == 1
    assert totals.losses == 0
    assert totals.win_rate == pytest.approx(50.0)
