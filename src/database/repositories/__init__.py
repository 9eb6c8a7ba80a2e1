"""Document repositories package."""

from .model_performance_repo import ModelPerformanceRepository
from .prediction_repo import PredictionRepository
from .system_status_repo import SystemStatusRepository

__all__ = [
    "ModelPerformanceRepository",
    "PredictionRepository",
    "SystemStatusRepository",
]
