from abc import ABC, abstractmethod

from ..domain.alerts import Alert


class Notifier(ABC):
    """Port (interface) for delivering alerts to users."""

    @abstractmethod
    def notify(self, alert: Alert) -> None:
        """
        Deliver an alert. An alert replaces any earlier alert with the same notification_id.

        Raises:
            NotificationError: If the alert could not be delivered
        """
        pass
