"""
Test fixtures for prediction and heartbeat documents.
"""
import pytest
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from src.models.prediction import Prediction

REFERENCE_NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference time so window and threshold checks are deterministic."""
    return REFERENCE_NOW


@pytest.fixture
def prediction_factory(now):
    """Build predictions from stored-document fields, relative to `now`."""

    def _make(
        doc_id: str = "pred-1",
        timeframe: int = 15,
        age: timedelta = timedelta(hours=1),
        result: Optional[str] = None,
        price_error: Optional[float] = 25.0,
        price_error_pct: Optional[float] = 0.05,
        confidence: Optional[float] = 70.0,
        **overrides: Any,
    ) -> Prediction:
        prediction_time = now - age
        data: Dict[str, Any] = {
            "timestamp": prediction_time.isoformat(),
            "prediction_time": prediction_time.isoformat(),
            "target_time": (prediction_time + timedelta(minutes=timeframe)).isoformat(),
            "timeframe_minutes": timeframe,
            "current_price": 50000.0,
            "predicted_price": 50100.0,
            "price_change": 100.0,
            "price_change_pct": 0.2,
            "trend": "bullish",
            "confidence": confidence,
            "method": "ensemble",
            "validated": result is not None,
        }
        if result is not None:
            data["validation_result"] = result
            data["actual_price"] = 50050.0
            data["validation_time"] = (prediction_time + timedelta(minutes=timeframe)).isoformat()
            if price_error is not None:
                data["price_error"] = price_error
            if price_error_pct is not None:
                data["price_error_pct"] = price_error_pct
        data.update(overrides)
        return Prediction.from_document(doc_id, data)

    return _make


@pytest.fixture
def heartbeat_factory(now):
    """Build heartbeat document bodies aged relative to `now`."""

    def _make(minutes_ago: float = 1.0, status: Optional[str] = None, **fields: Any) -> Dict[str, Any]:
        data: Dict[str, Any] = {"timestamp": (now - timedelta(minutes=minutes_ago)).isoformat()}
        if status is not None:
            data["status"] = status
        data.update(fields)
        return data

    return _make
