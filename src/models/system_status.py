"""
System status model.

Snapshot derived from the prediction process heartbeat document.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SystemState(str, Enum):
    """State reported for the prediction process."""

    ONLINE = "online"
    OFFLINE = "offline"
    STARTING = "starting"
    RUNNING = "running"
    STOPPING = "stopping"
    ERROR = "error"


class SystemStatus(BaseModel):
    """System status derived from one heartbeat record."""

    status: SystemState
    timestamp: str = Field(description="Last-seen timestamp")
    minutes_since_heartbeat: Optional[float] = Field(default=None, description="Elapsed minutes at resolve time")
    message: Optional[str] = None

    # Resource metrics
    uptime_hours: Optional[float] = None
    uptime_seconds: Optional[float] = None
    memory_mb: Optional[float] = None
    cpu_percent: Optional[float] = None

    # Counters
    heartbeat_count: Optional[int] = None
    predictions_count: Optional[int] = None
    total_predictions: Optional[int] = None
    successful_predictions: Optional[int] = None
    failed_predictions: Optional[int] = None

    last_heartbeat: Optional[str] = None
    last_activity: Optional[str] = None
    health_status: Optional[str] = None
    process_id: Optional[int] = None
    active_timeframes: Optional[int] = None

    model_config = ConfigDict(frozen=True)
