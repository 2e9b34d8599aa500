"""
Logging notifier.
Stands in for a push channel: alerts are logged and kept in memory for the API.
"""

import logging
from collections import deque
from typing import Deque, Dict, List

from ...core.domain.alerts import Alert, AlertLevel
from ...core.ports.notifier import Notifier


class LogNotifier(Notifier):
    """Notifier that logs alerts and tracks the active alert per notification slot."""

    def __init__(self, recent_limit: int = 50):
        self.logger = logging.getLogger(__name__)
        self._active: Dict[int, Alert] = {}
        self._recent: Deque[Alert] = deque(maxlen=recent_limit)

    def notify(self, alert: Alert) -> None:
        # Same notification_id replaces the previous alert, like a phone notification
        self._active[alert.notification_id] = alert
        self._recent.append(alert)

        log = self.logger.error if alert.level == AlertLevel.DANGER else self.logger.warning
        log(f"Notification shown: {alert.title} - {alert.message}")

    def active_alerts(self) -> List[Alert]:
        """Currently displayed alerts ordered by notification slot."""
        return [self._active[key] for key in sorted(self._active)]

    def recent_alerts(self) -> List[Alert]:
        """Recently raised alerts, newest first."""
        return list(reversed(self._recent))

    def clear(self) -> None:
        self._active.clear()
        self._recent.clear()
