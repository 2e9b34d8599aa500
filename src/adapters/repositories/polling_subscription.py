"""
Polling-based subscription.
Turns a one-shot fetch into a continuous stream of changed results.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from ...core.domain.results import FetchResult
from ...core.ports.exceptions import SubscriptionError
from ...core.ports.measurement_repository import ResultCallback
from ...core.ports.subscription import Subscription


class PollingSubscription(Subscription):
    """
    Subscription that polls a fetch coroutine on a fixed interval.

    Only results that differ from the previously delivered one reach the
    callback; the first result is always delivered. Failures are delivered
    and polling continues.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[FetchResult]],
        callback: ResultCallback,
        interval: float = 5.0,
        name: str = "measurements"
    ):
        """
        Args:
            fetch: Coroutine function returning the current FetchResult
            callback: Coroutine function receiving changed results
            interval: Seconds between polls
            name: Label used in log messages
        """
        if interval <= 0:
            raise ValueError("interval must be positive")

        self.fetch = fetch
        self.callback = callback
        self.interval = interval
        self.name = name
        self.logger = logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None
        self._last_result: Optional[FetchResult] = None
        self._stopped = False

    @property
    def is_active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._stopped:
            raise SubscriptionError(f"Subscription '{self.name}' was stopped and cannot be restarted")
        if self.is_active:
            return

        self.logger.info(f"Starting to listen for changes on '{self.name}' every {self.interval}s")
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def stop(self) -> None:
        self._stopped = True
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        self.logger.info(f"Removed listener for '{self.name}'")

    async def _run(self) -> None:
        while True:
            await self._poll_once()
            await asyncio.sleep(self.interval)

    async def _poll_once(self) -> None:
        try:
            result = await self.fetch()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(f"Polling '{self.name}' failed: {e}")
            result = FetchResult.failure(str(e))

        if result == self._last_result:
            return

        self._last_result = result
        try:
            await self.callback(result)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(f"Subscriber callback failed for '{self.name}': {e}")
