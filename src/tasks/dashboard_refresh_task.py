"""
Periodic dashboard refresh task.

Rebuilds the dashboard document on a fixed interval and on demand, and keeps
the last successful snapshot so a failed refresh never blanks the dashboard.
"""

import asyncio
from datetime import datetime
from typing import Optional

from ..config.logging import get_logger
from ..exceptions import DashboardError
from ..models.dashboard import DashboardData
from ..services.dashboard_service import DashboardService
from ..utils.timestamps import utc_now
from ..utils.tracing import clear_trace_id, generate_trace_id, set_trace_id

logger = get_logger(__name__)


class DashboardRefreshTask:
    """Background task that periodically rebuilds the dashboard snapshot."""

    def __init__(self, service: DashboardService, interval_seconds: float = 30.0) -> None:
        self.service = service
        self.interval_seconds = interval_seconds
        self._task: Optional[asyncio.Task] = None
        self._stopped = asyncio.Event()
        # Serialises the timer and manual refreshes
        self._refresh_lock = asyncio.Lock()

        self.snapshot: Optional[DashboardData] = None
        self.last_success_at: Optional[datetime] = None
        self.last_error: Optional[str] = None
        self.last_error_at: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start background refresh loop."""
        if self.is_running:
            return

        self._stopped.clear()
        self._task = asyncio.create_task(self._refresh_loop(), name="dashboard_refresh_task")
        logger.info("dashboard_refresh_task_started", interval_seconds=self.interval_seconds)

    async def stop(self) -> None:
        """Stop background refresh loop."""
        if not self._task:
            return

        self._stopped.set()
        try:
            await asyncio.wait_for(self._task, timeout=self.interval_seconds)
        except asyncio.TimeoutError:
            logger.warning("dashboard_refresh_task_stop_timed_out")
        finally:
            self._task = None
            logger.info("dashboard_refresh_task_stopped")

    async def refresh(self) -> bool:
        """
        Rebuild the snapshot once.

        Returns:
            True if the snapshot was replaced, False if the build failed and the
            previous snapshot was kept
        """
        async with self._refresh_lock:
            try:
                snapshot = await self.service.build_dashboard()
            except DashboardError as e:
                self.last_error = e.message
                self.last_error_at = utc_now()
                logger.warning(
                    "dashboard_refresh_failed",
                    error=e.message,
                    keeping_previous_snapshot=self.snapshot is not None,
                )
                return False

            self.snapshot = snapshot
            self.last_success_at = utc_now()
            self.last_error = None
            self.last_error_at = None
            return True

    async def _refresh_loop(self) -> None:
        """Main refresh loop."""
        while not self._stopped.is_set():
            set_trace_id(generate_trace_id())
            try:
                await self.refresh()
            except Exception as e:
                logger.error("dashboard_refresh_loop_error", error=str(e), exc_info=True)
            finally:
                clear_trace_id()

            try:
                await asyncio.wait_for(self._stopped.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                continue
