from abc import ABC, abstractmethod
from typing import Awaitable, Callable, List

from ..domain.results import FetchResult
from .subscription import Subscription


ResultCallback = Callable[[FetchResult], Awaitable[None]]


class MeasurementRepository(ABC):
    """
    Port (interface) for measurement data access.
    This defines the contract for reading air quality data from the external data source.
    """

    @abstractmethod
    async def fetch_latest(self) -> FetchResult:
        """
        Fetch the most recent measurement once.

        Returns:
            FetchResult.success with the measurement, FetchResult.empty when the
            data path holds no data, or FetchResult.failure with the reason.
            Data access problems are reported through the result, not raised.
        """
        pass

    @abstractmethod
    def subscribe(self, callback: ResultCallback) -> Subscription:
        """
        Create a subscription delivering results as the data source changes.

        Args:
            callback: Coroutine function invoked with each new FetchResult

        Returns:
            A Subscription that has not been started yet
        """
        pass

    @abstractmethod
    async def list_paths(self) -> List[str]:
        """
        List the data paths available in the data source.

        Returns:
            Path names, parents before children

        Raises:
            RepositoryError: If data access fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the data source is available and healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass
