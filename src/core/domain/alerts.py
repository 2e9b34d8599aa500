from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class AlertLevel(str, Enum):
    """Severity of a threshold breach."""
    WARNING = "warning"
    DANGER = "danger"


# Notification slots; a newer alert replaces the one in the same slot
NOTIFICATION_ID_CO2 = 1001
NOTIFICATION_ID_TVOC = 1002


@dataclass(frozen=True)
class Alert:
    """Value object describing a user-facing air quality alert."""
    notification_id: int
    metric: str
    level: AlertLevel
    value: int
    unit: str
    title: str
    message: str
    device_name: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
