"""
Threshold alerting for CO2 and TVOC readings.
Runs independently of the trend analyzer on every raw measurement.
"""

from typing import List, Optional

from ..domain.alerts import (
    Alert,
    AlertLevel,
    NOTIFICATION_ID_CO2,
    NOTIFICATION_ID_TVOC
)
from ..domain.measurement import Measurement
from ..ports.exceptions import ConfigurationError, NotificationError
from ..ports.logger import Logger
from ..ports.notifier import Notifier
from ...adapters.logger.standard_logger import StandardLogger


DEFAULT_CO2_WARNING = 1000   # ppm
DEFAULT_CO2_DANGER = 2000    # ppm
DEFAULT_TVOC_WARNING = 1000  # ppb
DEFAULT_TVOC_DANGER = 2000   # ppb


def classify(value: float, warning: float, danger: float) -> Optional[AlertLevel]:
    """Return the alert level reached by value, or None when below both thresholds."""
    if value >= danger:
        return AlertLevel.DANGER
    if value >= warning:
        return AlertLevel.WARNING
    return None


class AlertService:
    """
    Checks measurements against fixed thresholds and hands alerts to a Notifier.
    """

    def __init__(
        self,
        notifier: Notifier,
        co2_warning: int = DEFAULT_CO2_WARNING,
        co2_danger: int = DEFAULT_CO2_DANGER,
        tvoc_warning: int = DEFAULT_TVOC_WARNING,
        tvoc_danger: int = DEFAULT_TVOC_DANGER,
        logger: Optional[Logger] = None
    ):
        if co2_warning >= co2_danger:
            raise ConfigurationError("CO2 warning threshold must be below the danger threshold")
        if tvoc_warning >= tvoc_danger:
            raise ConfigurationError("TVOC warning threshold must be below the danger threshold")

        self.notifier = notifier
        self.co2_warning = co2_warning
        self.co2_danger = co2_danger
        self.tvoc_warning = tvoc_warning
        self.tvoc_danger = tvoc_danger
        self.logger = logger or StandardLogger("airquality.alerts")

    def check_and_notify(self, measurement: Measurement) -> List[Alert]:
        """
        Check a measurement and notify for every breached threshold.

        Args:
            measurement: Raw measurement to inspect

        Returns:
            Alerts raised for this measurement (at most one per metric)
        """
        alerts = []

        co2_alert = self._check_co2(measurement)
        if co2_alert:
            alerts.append(co2_alert)

        tvoc_alert = self._check_tvoc(measurement)
        if tvoc_alert:
            alerts.append(tvoc_alert)

        for alert in alerts:
            self._dispatch(alert)

        return alerts

    def _check_co2(self, measurement: Measurement) -> Optional[Alert]:
        value = measurement.co2
        level = classify(value, self.co2_warning, self.co2_danger)
        if level is None:
            return None

        if level == AlertLevel.DANGER:
            title = "CO2 Level Dangerous"
            message = f"CO2 level is dangerous at {value} ppm. Please ventilate the room."
        else:
            title = "CO2 Level High"
            message = f"CO2 level is high at {value} ppm. Ventilating the room is recommended."

        return Alert(
            notification_id=NOTIFICATION_ID_CO2,
            metric="co2",
            level=level,
            value=value,
            unit="ppm",
            title=title,
            message=message,
            device_name=measurement.device_name
        )

    def _check_tvoc(self, measurement: Measurement) -> Optional[Alert]:
        value = measurement.tvoc
        level = classify(value, self.tvoc_warning, self.tvoc_danger)
        if level is None:
            return None

        if level == AlertLevel.DANGER:
            title = "TVOC Level Dangerous"
            message = f"TVOC level is dangerous at {value} ppb. Please ventilate the room."
        else:
            title = "TVOC Level High"
            message = f"TVOC level is high at {value} ppb. Ventilating the room is recommended."

        return Alert(
            notification_id=NOTIFICATION_ID_TVOC,
            metric="tvoc",
            level=level,
            value=value,
            unit="ppb",
            title=title,
            message=message,
            device_name=measurement.device_name
        )

    def _dispatch(self, alert: Alert) -> None:
        self.logger.warn(
            f"{alert.level.value.capitalize()} {alert.metric.upper()} level detected",
            value=alert.value,
            unit=alert.unit,
            device=alert.device_name or "unknown"
        )
        try:
            self.notifier.notify(alert)
        except NotificationError as e:
            self.logger.error(f"Error showing notification: {e.message}", notification_id=alert.notification_id)
