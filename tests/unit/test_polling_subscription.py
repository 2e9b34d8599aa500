"""
Unit tests for PollingSubscription.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock

from src.adapters.repositories.polling_subscription import PollingSubscription
from src.core.domain.results import FetchResult
from src.core.ports.exceptions import SubscriptionError
from tests.unit.conftest import make_measurement


INTERVAL = 0.01


async def _wait_for(condition, timeout=1.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not condition():
        if asyncio.get_running_loop().time() > deadline:
            raise AssertionError("condition not reached in time")
        await asyncio.sleep(INTERVAL)


class TestPollingSubscription:
    """Test cases for PollingSubscription."""

    @pytest.mark.parametrize("interval", [0, -1])
    def test_invalid_interval(self, interval):
        with pytest.raises(ValueError, match="interval must be positive"):
            PollingSubscription(fetch=AsyncMock(), callback=AsyncMock(), interval=interval)

    @pytest.mark.asyncio
    async def test_first_result_is_delivered(self, sample_measurement):
        fetch = AsyncMock(return_value=FetchResult.success(sample_measurement))
        callback = AsyncMock()
        subscription = PollingSubscription(fetch, callback, interval=INTERVAL)

        subscription.start()
        await _wait_for(lambda: callback.await_count >= 1)
        await subscription.stop()

        callback.assert_awaited_with(FetchResult.success(sample_measurement))

    @pytest.mark.asyncio
    async def test_unchanged_results_are_not_redelivered(self, sample_measurement):
        """Test change-only delivery."""
        fetch = AsyncMock(return_value=FetchResult.success(sample_measurement))
        callback = AsyncMock()
        subscription = PollingSubscription(fetch, callback, interval=INTERVAL)

        subscription.start()
        await _wait_for(lambda: fetch.await_count >= 5)
        await subscription.stop()

        assert callback.await_count == 1

    @pytest.mark.asyncio
    async def test_changed_results_are_delivered_in_order(self):
        first = FetchResult.success(make_measurement(co2=500))
        second = FetchResult.success(make_measurement(co2=700))
        fetch = AsyncMock(side_effect=[first, first, second] + [second] * 100)
        callback = AsyncMock()
        subscription = PollingSubscription(fetch, callback, interval=INTERVAL)

        subscription.start()
        await _wait_for(lambda: callback.await_count >= 2)
        await subscription.stop()

        delivered = [c.args[0] for c in callback.await_args_list]
        assert delivered == [first, second]

    @pytest.mark.asyncio
    async def test_fetch_exception_becomes_failure(self):
        """Test that an unexpected fetch error is delivered as a failure and polling continues."""
        fetch = AsyncMock(side_effect=RuntimeError("socket closed"))
        callback = AsyncMock()
        subscription = PollingSubscription(fetch, callback, interval=INTERVAL)

        subscription.start()
        await _wait_for(lambda: fetch.await_count >= 3)
        assert subscription.is_active
        await subscription.stop()

        callback.assert_awaited_once_with(FetchResult.failure("socket closed"))

    @pytest.mark.asyncio
    async def test_callback_error_does_not_stop_polling(self):
        results = [FetchResult.success(make_measurement(co2=400 + i)) for i in range(100)]
        fetch = AsyncMock(side_effect=results)
        callback = AsyncMock(side_effect=ValueError("boom"))
        subscription = PollingSubscription(fetch, callback, interval=INTERVAL)

        subscription.start()
        await _wait_for(lambda: callback.await_count >= 2)
        await subscription.stop()

        assert callback.await_count >= 2

    @pytest.mark.asyncio
    async def test_no_delivery_after_stop(self, sample_measurement):
        """Test that stop() is final: nothing reaches the callback afterwards."""
        fetch = AsyncMock(side_effect=[FetchResult.success(make_measurement(co2=i)) for i in range(1000)])
        callback = AsyncMock()
        subscription = PollingSubscription(fetch, callback, interval=INTERVAL)

        subscription.start()
        await _wait_for(lambda: callback.await_count >= 1)
        await subscription.stop()
        delivered = callback.await_count

        await asyncio.sleep(INTERVAL * 5)

        assert callback.await_count == delivered
        assert not subscription.is_active

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, sample_measurement):
        fetch = AsyncMock(return_value=FetchResult.success(sample_measurement))
        subscription = PollingSubscription(fetch, AsyncMock(), interval=INTERVAL)

        subscription.start()
        task = subscription._task
        subscription.start()

        assert subscription._task is task
        await subscription.stop()

    @pytest.mark.asyncio
    async def test_cannot_restart_after_stop(self):
        subscription = PollingSubscription(AsyncMock(return_value=FetchResult.empty()), AsyncMock(), interval=INTERVAL)
        subscription.start()
        await subscription.stop()

        with pytest.raises(SubscriptionError):
            subscription.start()

    @pytest.mark.asyncio
    async def test_stop_without_start(self):
        subscription = PollingSubscription(AsyncMock(), AsyncMock(), interval=INTERVAL)

        await subscription.stop()

        assert not subscription.is_active
