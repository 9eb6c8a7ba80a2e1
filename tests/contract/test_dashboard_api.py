"""
Contract tests for the cached dashboard and history endpoints.
"""
import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
from src.api.dependencies import get_dashboard_service, get_refresh_task
from src.api.main import create_app
from src.exceptions import StoreQueryError
from src.tasks.dashboard_refresh_task import DashboardRefreshTask


@pytest.fixture
def refresh_task(dashboard_service_mock):
    return DashboardRefreshTask(dashboard_service_mock, interval_seconds=30)


@pytest.fixture
def app(dashboard_service_mock, refresh_task):
    app = create_app()
    app.dependency_overrides[get_dashboard_service] = lambda: dashboard_service_mock
    app.dependency_overrides[get_refresh_task] = lambda: refresh_task
    return app


class TestDashboardEndpoint:
    """Contract tests for GET /api/v1/dashboard and POST /api/v1/dashboard/refresh."""

    def test_before_first_refresh(self, app):
        """Test the payload while no snapshot exists."""
        response = TestClient(app).get("/api/v1/dashboard")

        assert response.status_code == 200
        data = response.json()
        assert data["data"] is None
        assert data["view"]["status"]["state"] == "unknown"
        assert data["view"]["empty_message"] == "No validated predictions yet"
        assert data["refresh"]["interval_seconds"] == 30
        assert data["refresh"]["running"] is False

    def test_manual_refresh(self, app):
        """Test that a manual refresh publishes a snapshot."""
        client = TestClient(app)

        response = client.post("/api/v1/dashboard/refresh")

        assert response.status_code == 200
        data = response.json()
        assert data["refreshed"] is True
        assert data["data"]["overallStats"]["total_predictions"] == 10
        assert data["view"]["has_data"] is True
        assert data["refresh"]["last_success_at"] is not None

        cached = client.get("/api/v1/dashboard").json()
        assert cached["data"]["lastUpdate"] == data["data"]["lastUpdate"]

    def test_failed_manual_refresh_keeps_snapshot(self, app, dashboard_service_mock):
        """Test that a failed refresh reports 503 and keeps the old data."""
        client = TestClient(app)
        client.post("/api/v1/dashboard/refresh")
        dashboard_service_mock.build_dashboard.side_effect = StoreQueryError("Failed to query bitcoin_predictions")

        response = client.post("/api/v1/dashboard/refresh")

        assert response.status_code == 503
        data = response.json()
        assert data["refreshed"] is False
        assert data["data"] is not None
        assert data["refresh"]["last_error"] == "Failed to query bitcoin_predictions"


class TestHistoryEndpoints:
    """Contract tests for the history endpoints."""

    def test_timeline(self, app):
        """Test the timeline response shape."""
        response = TestClient(app).get("/api/v1/history/timeline", params={"window": "30d", "outcome": "all"})

        assert response.status_code == 200
        data = response.json()
        assert data["window"] == "30d"
        assert data["outcome"] == "all"
        assert data["count"] == len(data["groups"])

    def test_timeline_rejects_unknown_window(self, app):
        """Test query validation."""
        response = TestClient(app).get("/api/v1/history/timeline", params={"window": "1y"})

        assert response.status_code == 422

    def test_heatmap_for_month(self, app):
        """Test the heatmap for an explicit month."""
        response = TestClient(app).get("/api/v1/history/heatmap", params={"year": 2025, "month": 1})

        assert response.status_code == 200
        data = response.json()
        assert data["year"] == 2025
        assert len(data["days"]) == 31
        assert data["days"][14]["total"] == 11

    def test_heatmap_requires_year_and_month_together(self, app):
        """Test that a lone year is rejected."""
        response = TestClient(app).get("/api/v1/history/heatmap", params={"year": 2025})

        assert response.status_code == 422

    def test_history_store_failure_returns_503(self, app, dashboard_service_mock):
        """Test the error body when history cannot be read."""
        dashboard_service_mock.load_history = AsyncMock(side_effect=StoreQueryError("Failed to query bitcoin_predictions"))

        response = TestClient(app).get("/api/v1/history/timeline")

        assert response.status_code == 503
        assert response.json()["error"]["type"] == "StoreQueryError"
