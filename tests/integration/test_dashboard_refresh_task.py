"""
Integration tests for the periodic dashboard refresh task.
"""

import asyncio
import pytest
from unittest.mock import AsyncMock, MagicMock
from src.exceptions import PriceFeedError
from src.tasks.dashboard_refresh_task import DashboardRefreshTask


def _service(result):
    service = MagicMock()
    service.build_dashboard = AsyncMock(return_value=result)
    return service


@pytest.mark.asyncio
async def test_refresh_replaces_snapshot(dashboard_snapshot):
    """Test a successful refresh."""
    task = DashboardRefreshTask(_service(dashboard_snapshot), interval_seconds=30)

    assert await task.refresh() is True
    assert task.snapshot is dashboard_snapshot
    assert task.last_success_at is not None
    assert task.last_error is None


@pytest.mark.asyncio
async def test_failed_refresh_keeps_previous_snapshot(dashboard_snapshot):
    """Test that a failed rebuild never blanks the dashboard."""
    service = _service(dashboard_snapshot)
    task = DashboardRefreshTask(service, interval_seconds=30)
    await task.refresh()

    service.build_dashboard.side_effect = PriceFeedError("Price feed timed out after 10.0s")
    assert await task.refresh() is False

    assert task.snapshot is dashboard_snapshot
    assert task.last_error == "Price feed timed out after 10.0s"
    assert task.last_error_at is not None

    service.build_dashboard.side_effect = None
    assert await task.refresh() is True
    assert task.last_error is None


@pytest.mark.asyncio
async def test_concurrent_refreshes_are_serialised(dashboard_snapshot):
    """Test that overlapping refreshes never run builds at the same time."""
    running = 0
    peak = 0

    async def build_dashboard():
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await asyncio.sleep(0.01)
        running -= 1
        return dashboard_snapshot

    service = MagicMock()
    service.build_dashboard = build_dashboard
    task = DashboardRefreshTask(service, interval_seconds=30)

    results = await asyncio.gather(task.refresh(), task.refresh(), task.refresh())

    assert results == [True, True, True]
    assert peak == 1


@pytest.mark.asyncio
async def test_start_and_stop(dashboard_snapshot):
    """Test the background loop lifecycle."""
    service = _service(dashboard_snapshot)
    task = DashboardRefreshTask(service, interval_seconds=0.01)

    await task.start()
    assert task.is_running is True
    await asyncio.sleep(0.05)
    await task.stop()

    assert task.is_running is False
    assert service.build_dashboard.await_count >= 1
    assert task.snapshot is dashboard_snapshot


@pytest.mark.asyncio
async def test_loop_survives_failures(dashboard_snapshot):
    """Test that failures inside the loop do not stop it."""
    service = _service(dashboard_snapshot)
    service.build_dashboard.side_effect = RuntimeError("unexpected")
    task = DashboardRefreshTask(service, interval_seconds=0.01)

    await task.start()
    await asyncio.sleep(0.05)
    assert task.is_running is True
    await task.stop()

    assert service.build_dashboard.await_count >= 2
    assert task.snapshot is None
