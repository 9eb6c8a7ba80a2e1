"""
Dashboard service.

Reads predictions, heartbeat, model metrics and the spot price, then runs the
status resolver, pending filter and statistics aggregator to assemble the
dashboard document. The reads are independent and run concurrently; the
aggregation after them is synchronous and side-effect free.
"""

import asyncio
from datetime import datetime, timezone, tzinfo
from typing import List, Optional

from ..config.logging import get_logger
from ..config.settings import Settings
from ..database.document_store import DocumentStore
from ..database.repositories import (
    ModelPerformanceRepository,
    PredictionRepository,
    SystemStatusRepository,
)
from ..exceptions import DashboardError
from ..models.dashboard import DashboardData
from ..models.prediction import Prediction
from ..utils.timestamps import ensure_aware, isoformat_utc, utc_now
from ..utils.tracing import get_or_create_trace_id
from .pending_filter import filter_due_for_validation
from .price_feed_client import PriceFeedClient
from .statistics_aggregator import StatisticsAggregator
from .status_resolver import HeartbeatThresholds, StatusResolver

logger = get_logger(__name__)


class DashboardService:
    """Assembles the dashboard document from the store and the price feed."""

    def __init__(
        self,
        predictions: PredictionRepository,
        system_status: SystemStatusRepository,
        model_performance: ModelPerformanceRepository,
        price_feed: PriceFeedClient,
        aggregator: StatisticsAggregator,
        resolver: StatusResolver,
        recent_limit: int = 30,
        pending_limit: int = 100,
        history_limit: int = 500,
        default_tz: tzinfo = timezone.utc,
    ):
        self.predictions = predictions
        self.system_status = system_status
        self.model_performance = model_performance
        self.price_feed = price_feed
        self.aggregator = aggregator
        self.resolver = resolver
        self.recent_limit = recent_limit
        self.pending_limit = pending_limit
        self.history_limit = history_limit
        self.default_tz = default_tz

    @classmethod
    def from_settings(cls, store: DocumentStore, price_feed: PriceFeedClient, settings: Settings) -> "DashboardService":
        """Wire repositories, aggregator and resolver from settings."""
        default_tz = settings.store_tzinfo
        return cls(
            predictions=PredictionRepository(store, settings.predictions_collection),
            system_status=SystemStatusRepository(
                store, settings.system_status_collection, settings.heartbeat_document_id
            ),
            model_performance=ModelPerformanceRepository(store, settings.model_performance_collection),
            price_feed=price_feed,
            aggregator=StatisticsAggregator(window_days=settings.stats_window_days, default_tz=default_tz),
            resolver=StatusResolver(
                HeartbeatThresholds(
                    delayed_minutes=settings.heartbeat_delayed_minutes,
                    offline_minutes=settings.heartbeat_offline_minutes,
                ),
                default_tz=default_tz,
            ),
            recent_limit=settings.recent_predictions_limit,
            pending_limit=settings.pending_predictions_limit,
            history_limit=settings.history_predictions_limit,
            default_tz=default_tz,
        )

    async def build_dashboard(self, now: Optional[datetime] = None) -> DashboardData:
        """
        Build the dashboard document.

        Args:
            now: Reference time (defaults to the current UTC time)

        Returns:
            DashboardData

        Raises:
            DashboardError: If any read fails; nothing is aggregated in that case
        """
        trace_id = get_or_create_trace_id()
        now = ensure_aware(now) if now else utc_now()
        logger.info("dashboard_build_started", trace_id=trace_id)

        try:
            heartbeat, current_price, recent, unvalidated, validated, performance = await asyncio.gather(
                self.system_status.get_heartbeat(),
                self.price_feed.get_current_price(),
                self.predictions.get_recent(self.recent_limit),
                self.predictions.get_unvalidated(self.pending_limit),
                self.predictions.get_validated(),
                self.model_performance.get_latest(),
            )
        except DashboardError as e:
            e.trace_id = e.trace_id or trace_id
            logger.error("dashboard_build_failed", error_type=type(e).__name__, error=e.message, trace_id=trace_id)
            raise
        except Exception as e:
            logger.error("dashboard_build_failed", error=str(e), trace_id=trace_id, exc_info=True)
            raise DashboardError(f"Failed to fetch data: {e}", trace_id=trace_id) from e

        system_status = self.resolver.resolve(heartbeat, now)
        pending = filter_due_for_validation(unvalidated, now, self.default_tz)
        statistics = self.aggregator.aggregate(validated, now)

        dashboard = DashboardData(
            current_price=current_price,
            overall_stats=statistics.overall,
            timeframe_stats=statistics.timeframes,
            category_stats=statistics.categories,
            recent_predictions=recent,
            pending_predictions=pending,
            model_performance=performance,
            system_status=system_status,
            last_update=isoformat_utc(now),
        )

        logger.info(
            "dashboard_build_completed",
            system_status=system_status.status.value,
            current_price=current_price,
            recent_count=len(recent),
            pending_count=len(pending),
            validated_in_window=statistics.overall.total_predictions,
            has_model_performance=performance is not None,
            trace_id=trace_id,
        )
        return dashboard

    async def load_history(self) -> List[Prediction]:
        """Most recent predictions (validated or not) for the history views."""
        try:
            return await self.predictions.get_recent(self.history_limit)
        except DashboardError:
            raise
        except Exception as e:
            raise DashboardError(f"Failed to fetch prediction history: {e}") from e
