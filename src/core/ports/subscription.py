from abc import ABC, abstractmethod


class Subscription(ABC):
    """
    Handle for a continuous stream of measurement results.
    Delivery starts on start() and is guaranteed to have ended once stop() returns.
    """

    @abstractmethod
    def start(self) -> None:
        """
        Begin delivering results to the subscriber callback.

        Raises:
            SubscriptionError: If the subscription was already stopped
        """
        pass

    @abstractmethod
    async def stop(self) -> None:
        """Stop delivery and release the underlying resources. Idempotent."""
        pass

    @property
    @abstractmethod
    def is_active(self) -> bool:
        """True while results may still be delivered."""
        pass
