"""
Status resolver.

Derives the prediction process status from its heartbeat document and the
current time. The same heartbeat thresholds drive the display state shown on
the dashboard, so the server and the view can never disagree about where the
"delayed" band starts and ends.
"""

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum
from typing import Any, Dict, Optional

from ..config.logging import get_logger
from ..models.system_status import SystemState, SystemStatus
from ..utils.coercion import as_float, as_int, as_text
from ..utils.timestamps import ensure_aware, isoformat_utc, minutes_between, parse_timestamp

logger = get_logger(__name__)

NO_HEARTBEAT_MESSAGE = "no heartbeat data found"

# Explicit states reported by the process that override elapsed-time checks
_PROPAGATED_STATES = {SystemState.OFFLINE, SystemState.ERROR}
_PASSTHROUGH_STATES = {SystemState.STARTING, SystemState.RUNNING}

_INT_FIELDS = (
    "heartbeat_count",
    "predictions_count",
    "total_predictions",
    "successful_predictions",
    "failed_predictions",
    "process_id",
    "active_timeframes",
)
_FLOAT_FIELDS = ("uptime_hours", "uptime_seconds", "memory_mb", "cpu_percent")
_TEXT_FIELDS = ("message", "last_heartbeat", "last_activity", "health_status")


@dataclass(frozen=True)
class HeartbeatThresholds:
    """Minute thresholds on heartbeat age."""

    delayed_minutes: float = 2.0
    offline_minutes: float = 10.0

    def __post_init__(self):
        if self.delayed_minutes > self.offline_minutes:
            raise ValueError("delayed_minutes must not exceed offline_minutes")


class DisplayState(str, Enum):
    """Status badge shown on the dashboard."""

    ONLINE = "online"
    WARNING = "warning"
    OFFLINE = "offline"
    UNKNOWN = "unknown"


DISPLAY_LABELS: Dict[DisplayState, str] = {
    DisplayState.ONLINE: "ONLINE",
    DisplayState.WARNING: "DELAYED",
    DisplayState.OFFLINE: "OFFLINE",
    DisplayState.UNKNOWN: "CHECKING",
}


class StatusResolver:
    """Resolves heartbeat documents into system status."""

    def __init__(self, thresholds: HeartbeatThresholds = HeartbeatThresholds(), default_tz: tzinfo = timezone.utc):
        self.thresholds = thresholds
        self.default_tz = default_tz

    def resolve(self, record: Optional[Dict[str, Any]], now: datetime) -> SystemStatus:
        """
        Resolve a heartbeat document into a SystemStatus.

        Rules, in order:
        - no document: offline
        - explicit "offline"/"error": propagated
        - explicit "starting"/"running": passed through whatever its age
        - otherwise by heartbeat age: offline at or beyond the offline threshold,
          online below it (the delayed band is online here; the dashboard
          badge shows it as DELAYED)

        An unparseable heartbeat timestamp is treated as "seen now".

        Args:
            record: Heartbeat document body, or None if it does not exist
            now: Current time

        Returns:
            SystemStatus
        """
        now = ensure_aware(now)
        if record is None:
            logger.info("heartbeat_missing")
            return SystemStatus(
                status=SystemState.OFFLINE,
                timestamp=isoformat_utc(now),
                message=NO_HEARTBEAT_MESSAGE,
            )

        raw_timestamp = record.get("timestamp")
        last_seen = parse_timestamp(raw_timestamp, self.default_tz)
        if last_seen is None:
            logger.warning("heartbeat_timestamp_unparseable", timestamp=raw_timestamp)
            last_seen = now
            timestamp = isoformat_utc(now)
        else:
            timestamp = str(raw_timestamp) if isinstance(raw_timestamp, str) else isoformat_utc(last_seen)

        elapsed = minutes_between(last_seen, now)
        status = self._resolve_state(_parse_state(record.get("status")), elapsed)

        passthrough: Dict[str, Any] = {}
        for field in _INT_FIELDS:
            passthrough[field] = as_int(record.get(field))
        for field in _FLOAT_FIELDS:
            passthrough[field] = as_float(record.get(field))
        for field in _TEXT_FIELDS:
            passthrough[field] = as_text(record.get(field))

        return SystemStatus(
            status=status,
            timestamp=timestamp,
            minutes_since_heartbeat=round(elapsed, 2),
            **passthrough,
        )

    def _resolve_state(self, explicit: Optional[SystemState], elapsed_minutes: float) -> SystemState:
        if explicit in _PROPAGATED_STATES or explicit in _PASSTHROUGH_STATES:
            return explicit
        if elapsed_minutes < self.thresholds.offline_minutes:
            return SystemState.ONLINE
        return SystemState.OFFLINE

    def display_state(self, status: Optional[SystemStatus], now: datetime) -> DisplayState:
        """
        Badge state for the dashboard.

        Explicit offline/error shows OFFLINE. Otherwise the heartbeat age decides:
        below the delayed threshold ONLINE, below the offline threshold WARNING
        (DELAYED), else OFFLINE. Without a status or a readable timestamp the
        badge is UNKNOWN.
        """
        if status is None:
            return DisplayState.UNKNOWN
        last_seen = parse_timestamp(status.timestamp, self.default_tz)
        if last_seen is None:
            return DisplayState.UNKNOWN
        if status.status in _PROPAGATED_STATES:
            return DisplayState.OFFLINE

        elapsed = minutes_between(last_seen, ensure_aware(now))
        if elapsed < self.thresholds.delayed_minutes:
            return DisplayState.ONLINE
        if elapsed < self.thresholds.offline_minutes:
            return DisplayState.WARNING
        return DisplayState.OFFLINE

    def display_message(self, state: DisplayState, status: Optional[SystemStatus], now: datetime) -> str:
        """Short status line shown next to the badge."""
        if state == DisplayState.UNKNOWN or status is None:
            return "Checking system status..."
        last_seen = parse_timestamp(status.timestamp, self.default_tz)
        minutes = max(0, int(minutes_between(last_seen, ensure_aware(now)))) if last_seen else 0
        if state == DisplayState.ONLINE:
            return "Active now" if minutes == 0 else f"Active {minutes}m ago"
        if state == DisplayState.WARNING:
            return f"Last seen {minutes}m ago"
        return f"Inactive for {minutes}m"


def _parse_state(value: Any) -> Optional[SystemState]:
    if not isinstance(value, str):
        return None
    try:
        return SystemState(value)
    except ValueError:
        return None
