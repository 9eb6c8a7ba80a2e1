"""
Model performance model.

Latest evaluation metrics of the ensemble members, as written by the
training process.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..config.logging import get_logger
from ..utils.coercion import as_float, as_text

logger = get_logger(__name__)


class RegressionMetrics(BaseModel):
    mae: Optional[float] = None
    rmse: Optional[float] = None

    model_config = ConfigDict(extra="allow")


class ClassificationMetrics(BaseModel):
    accuracy: Optional[float] = None

    model_config = ConfigDict(extra="allow")


class ModelMetrics(BaseModel):
    lstm: Optional[RegressionMetrics] = None
    rf: Optional[ClassificationMetrics] = None
    gb: Optional[RegressionMetrics] = None

    model_config = ConfigDict(extra="allow")


# Metric fields coerced per ensemble member
_MEMBER_FIELDS = {
    "lstm": (RegressionMetrics, ("mae", "rmse")),
    "rf": (ClassificationMetrics, ("accuracy",)),
    "gb": (RegressionMetrics, ("mae", "rmse")),
}


class ModelPerformance(BaseModel):
    """Model performance document."""

    id: str = Field(description="Document ID")
    timestamp: Optional[str] = Field(default=None, description="Evaluation timestamp")
    metrics: ModelMetrics = Field(default_factory=ModelMetrics)

    @classmethod
    def from_document(cls, doc_id: str, data: Dict[str, Any]) -> "ModelPerformance":
        """
        Build from a stored document.

        A member whose metrics are not an object is dropped, and metric values
        that cannot be coerced become None.
        """
        metrics = data.get("metrics")
        if metrics is not None and not isinstance(metrics, dict):
            logger.warning("model_performance_metrics_malformed", document_id=doc_id)
            metrics = None

        members: Dict[str, Any] = {}
        for name, value in (metrics or {}).items():
            if name not in _MEMBER_FIELDS:
                members[name] = value
                continue
            model, fields = _MEMBER_FIELDS[name]
            if not isinstance(value, dict):
                if value is not None:
                    logger.warning("model_performance_member_malformed", document_id=doc_id, member=name)
                members[name] = None
                continue
            members[name] = model(**{**value, **{field: as_float(value.get(field)) for field in fields}})

        return cls(
            id=str(doc_id),
            timestamp=as_text(data.get("timestamp")),
            metrics=ModelMetrics(**members),
        )
