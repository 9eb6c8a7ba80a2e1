"""
Shared test fixtures for prediction dashboard tests.
"""
import pytest

# Import all fixtures from fixtures modules so pytest can discover them
from tests.fixtures.predictions import (
    now,
    prediction_factory,
    heartbeat_factory,
)
from tests.fixtures.dashboard import (
    dashboard_snapshot,
    dashboard_service_mock,
)
