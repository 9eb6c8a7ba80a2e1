"""
Dashboard document model.

The single JSON document the dashboard front end consumes.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .model_performance import ModelPerformance
from .prediction import Prediction
from .statistics import CategoryStatistics, Statistics
from .system_status import SystemStatus


class DashboardData(BaseModel):
    """Dashboard document, serialised with camelCase top-level keys."""

    current_price: float = Field(alias="currentPrice")
    overall_stats: Optional[Statistics] = Field(alias="overallStats")
    timeframe_stats: List[Statistics] = Field(alias="timeframeStats")
    category_stats: List[CategoryStatistics] = Field(alias="categoryStats")
    recent_predictions: List[Prediction] = Field(alias="recentPredictions")
    pending_predictions: List[Prediction] = Field(alias="pendingPredictions")
    model_performance: Optional[ModelPerformance] = Field(alias="modelPerformance")
    system_status: SystemStatus = Field(alias="systemStatus")
    last_update: str = Field(alias="lastUpdate")

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_response(self) -> Dict[str, Any]:
        """JSON-ready dict in the wire shape (flat prediction documents, absent fields omitted)."""
        return {
            "currentPrice": self.current_price,
            "overallStats": self.overall_stats.model_dump(mode="json", exclude_none=True) if self.overall_stats else None,
            "timeframeStats": [s.model_dump(mode="json", exclude_none=True) for s in self.timeframe_stats],
            "categoryStats": [s.model_dump(mode="json") for s in self.category_stats],
            "recentPredictions": [p.to_document() for p in self.recent_predictions],
            "pendingPredictions": [p.to_document() for p in self.pending_predictions],
            "modelPerformance": (
                self.model_performance.model_dump(mode="json", exclude_none=True) if self.model_performance else None
            ),
            "systemStatus": self.system_status.model_dump(mode="json", exclude_none=True),
            "lastUpdate": self.last_update,
        }
