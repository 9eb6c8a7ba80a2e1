"""
Unit tests for the model performance document model.
"""

import pytest
from src.models.model_performance import ModelPerformance


def test_well_formed_document():
    """Test reading metrics of every ensemble member."""
    performance = ModelPerformance.from_document(
        "eval-1",
        {
            "timestamp": "2025-01-15T00:00:00",
            "metrics": {
                "lstm": {"mae": 120.5, "rmse": "180.25"},
                "rf": {"accuracy": 0.61, "f1": 0.58},
                "gb": {"mae": 98.0},
            },
        },
    )

    assert performance.timestamp == "2025-01-15T00:00:00"
    assert performance.metrics.lstm.rmse == pytest.approx(180.25)
    assert performance.metrics.rf.accuracy == pytest.approx(0.61)
    assert performance.metrics.rf.model_dump()["f1"] == pytest.approx(0.58)
    assert performance.metrics.gb.rmse is None


def test_malformed_metric_values_become_none():
    """Test that a non-numeric metric does not reject the document."""
    performance = ModelPerformance.from_document("eval-1", {"metrics": {"lstm": {"mae": "n/a", "rmse": 180.0}}})

    assert performance.metrics.lstm.mae is None
    assert performance.metrics.lstm.rmse == pytest.approx(180.0)


def test_malformed_member_is_dropped():
    """Test that a member whose metrics are not an object becomes None."""
    performance = ModelPerformance.from_document(
        "eval-1", {"metrics": {"rf": "broken", "gb": [1, 2], "lstm": {"mae": 1.0}}}
    )

    assert performance.metrics.rf is None
    assert performance.metrics.gb is None
    assert performance.metrics.lstm.mae == pytest.approx(1.0)


@pytest.mark.parametrize("metrics", [None, "broken", [1, 2, 3]])
def test_missing_or_malformed_metrics_object(metrics):
    """Test documents without a usable metrics object."""
    performance = ModelPerformance.from_document("eval-1", {"metrics": metrics})

    assert performance.metrics.lstm is None
    assert performance.metrics.rf is None
    assert performance.metrics.gb is None


def test_non_finite_metric_is_serialisable():
    """Test that a non-finite metric is dropped so the wire document stays valid JSON."""
    performance = ModelPerformance.from_document("eval-1", {"metrics": {"gb": {"mae": float("inf")}}})

    assert performance.metrics.gb.mae is None
    assert performance.model_dump(mode="json", exclude_none=True) == {"id": "eval-1", "metrics": {"gb": {}}}
