"""
Prediction record model.

Represents one price prediction written by the prediction process and,
once its target time has passed, validated against the observed price.
"""

from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config.logging import get_logger
from ..utils.coercion import as_bool, as_float, as_int, as_text
from ..utils.timestamps import parse_timestamp

logger = get_logger(__name__)


class ValidationResult(str, Enum):
    """Outcome of a validated prediction."""

    WIN = "WIN"
    LOSE = "LOSE"


class PredictionValidation(BaseModel):
    """Fields attached by the external validator. Present only on validated predictions."""

    result: Optional[ValidationResult] = Field(default=None, description="WIN or LOSE")
    validation_time: Optional[str] = Field(default=None, description="When the outcome was recorded")
    actual_price: Optional[float] = Field(default=None, description="Observed price at target time")
    price_error: Optional[float] = Field(default=None, description="Absolute price error")
    price_error_pct: Optional[float] = Field(default=None, description="Price error in percent")
    direction_correct: Optional[bool] = Field(default=None, description="Whether the trend call was right")

    model_config = ConfigDict(frozen=True)


class SubModelPredictions(BaseModel):
    """Per-model outputs behind an ensemble prediction."""

    model_agreement: Optional[float] = None
    lstm_prediction: Optional[float] = None
    gb_prediction: Optional[float] = None
    rf_direction: Optional[str] = None
    rf_confidence: Optional[float] = None

    model_config = ConfigDict(frozen=True)


class Prediction(BaseModel):
    """Prediction record model."""

    id: str = Field(description="Document ID")
    timestamp: Optional[str] = Field(default=None, description="Creation timestamp")
    prediction_time: Optional[str] = Field(default=None, description="Nominal prediction time")
    target_time: Optional[str] = Field(default=None, description="Time the prediction resolves")
    timeframe_minutes: Optional[int] = Field(default=None, description="Prediction horizon in minutes")
    current_price: Optional[float] = None
    predicted_price: Optional[float] = None
    price_change: Optional[float] = None
    price_change_pct: Optional[float] = None
    price_range_low: Optional[float] = None
    price_range_high: Optional[float] = None
    trend: Optional[str] = None
    confidence: Optional[float] = Field(default=None, description="Confidence percentage (0-100)")
    method: Optional[str] = None
    validation: Optional[PredictionValidation] = Field(default=None, description="Set once validated")
    sub_models: Optional[SubModelPredictions] = None

    model_config = ConfigDict(frozen=True)

    @property
    def validated(self) -> bool:
        return self.validation is not None

    @property
    def validation_result(self) -> Optional[ValidationResult]:
        return self.validation.result if self.validation else None

    @property
    def price_error(self) -> Optional[float]:
        return self.validation.price_error if self.validation else None

    @property
    def price_error_pct(self) -> Optional[float]:
        return self.validation.price_error_pct if self.validation else None

    def prediction_datetime(self, default_tz: tzinfo = timezone.utc) -> Optional[datetime]:
        """Parsed `prediction_time`, or None if missing or malformed."""
        return parse_timestamp(self.prediction_time, default_tz)

    def target_datetime(self, default_tz: tzinfo = timezone.utc) -> Optional[datetime]:
        """Parsed `target_time`, or None if missing or malformed."""
        return parse_timestamp(self.target_time, default_tz)

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "Prediction":
        """
        Build a prediction from a stored (flat) document.

        Numeric fields that cannot be coerced become None instead of rejecting
        the whole record. Validation fields are read only when the document is
        flagged as validated.

        Args:
            doc_id: Document ID
            data: Document body

        Returns:
            Prediction
        """
        validation = None
        if data.get("validated") is True:
            result = _as_result(data.get("validation_result"))
            validation = PredictionValidation(
                result=result,
                validation_time=as_text(data.get("validation_time")),
                actual_price=as_float(data.get("actual_price")),
                price_error=as_float(data.get("price_error")),
                price_error_pct=as_float(data.get("price_error_pct")),
                direction_correct=as_bool(data.get("direction_correct")),
            )
            if result is None or validation.actual_price is None:
                logger.warning(
                    "prediction_validation_incomplete",
                    prediction_id=doc_id,
                    validation_result=data.get("validation_result"),
                    has_actual_price=validation.actual_price is not None,
                )

        sub_model_fields = {
            "model_agreement": as_float(data.get("model_agreement")),
            "lstm_prediction": as_float(data.get("lstm_prediction")),
            "gb_prediction": as_float(data.get("gb_prediction")),
            "rf_direction": as_text(data.get("rf_direction")),
            "rf_confidence": as_float(data.get("rf_confidence")),
        }
        sub_models = None
        if any(value is not None for value in sub_model_fields.values()):
            sub_models = SubModelPredictions(**sub_model_fields)

        return cls(
            id=str(doc_id),
            timestamp=as_text(data.get("timestamp")),
            prediction_time=as_text(data.get("prediction_time")),
            target_time=as_text(data.get("target_time")),
            timeframe_minutes=as_int(data.get("timeframe_minutes")),
            current_price=as_float(data.get("current_price")),
            predicted_price=as_float(data.get("predicted_price")),
            price_change=as_float(data.get("price_change")),
            price_change_pct=as_float(data.get("price_change_pct")),
            price_range_low=as_float(data.get("price_range_low")),
            price_range_high=as_float(data.get("price_range_high")),
            trend=as_text(data.get("trend")),
            confidence=as_float(data.get("confidence")),
            method=as_text(data.get("method")),
            validation=validation,
            sub_models=sub_models,
        )

    def to_document(self) -> Dict[str, Any]:
        """
        Flatten back to the stored document shape for API responses.

        Absent optional fields are omitted.
        """
        document: Dict[str, Any] = {
            "id": self.id,
            "timestamp": self.timestamp,
            "prediction_time": self.prediction_time,
            "target_time": self.target_time,
            "timeframe_minutes": self.timeframe_minutes,
            "current_price": self.current_price,
            "predicted_price": self.predicted_price,
            "price_change": self.price_change,
            "price_change_pct": self.price_change_pct,
            "price_range_low": self.price_range_low,
            "price_range_high": self.price_range_high,
            "trend": self.trend,
            "confidence": self.confidence,
            "method": self.method,
            "validated": self.validated,
        }
        if self.validation:
            document["validation_result"] = self.validation.result.value if self.validation.result else None
            document.update(self.validation.model_dump(exclude={"result"}, exclude_none=True))
        if self.sub_models:
            document.update(self.sub_models.model_dump(exclude_none=True))
        return {key: value for key, value in document.items() if value is not None or key == "validation_result"}


def _as_result(value: Any) -> Optional[ValidationResult]:
    if isinstance(value, str):
        try:
            return ValidationResult(value.upper())
        except ValueError:
            return None
    return None
