"""
Air quality monitor.
Owns the trend analyzer and wires the data source, alerting and cache together.
"""

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from ..domain.alerts import Alert
from ..domain.measurement import Measurement
from ..domain.prediction import Prediction
from ..domain.results import FetchResult
from ..domain.statistics import MetricStatistics
from ..ports.cache_service import CacheService, CacheKeyPatterns, CacheTTL
from ..ports.exceptions import RepositoryError
from ..ports.logger import Logger
from ..ports.measurement_repository import MeasurementRepository
from ..ports.subscription import Subscription
from .alert_service import AlertService
from .trend_analyzer import TrendAnalyzer
from .window_statistics import WindowStatistics
from ...adapters.logger.standard_logger import StandardLogger


NO_DATA_MESSAGE = "No data found at the configured data path."
FETCH_ERROR_PREFIX = "Error fetching data"
LISTEN_ERROR_PREFIX = "Error listening for data"


@dataclass
class MonitorSnapshot:
    """Point-in-time view of the monitor state for the presentation layer."""
    latest_measurement: Optional[Measurement]
    prediction: Prediction
    error_message: Optional[str]
    is_loading: bool
    is_listening: bool
    history_size: int
    history_capacity: int
    last_alerts: List[Alert] = field(default_factory=list)
    updated_at: Optional[datetime] = None


class AirQualityMonitor:
    """
    Processes incoming measurements: keeps the latest reading, updates the
    prediction and raises alerts. One instance is created at startup and
    passed to whichever component needs it.
    """

    def __init__(
        self,
        repository: MeasurementRepository,
        analyzer: TrendAnalyzer,
        alert_service: AlertService,
        cache_service: Optional[CacheService] = None,
        logger: Optional[Logger] = None
    ):
        """
        Initialize the monitor with its dependencies.

        Args:
            repository: Data source for measurements
            analyzer: Trend analyzer owned by this monitor
            alert_service: Threshold alerting
            cache_service: Cache used to publish snapshots and statistics (optional)
            logger: Logger instance
        """
        self.repository = repository
        self.analyzer = analyzer
        self.alert_service = alert_service
        self.cache = cache_service
        self.logger = logger or StandardLogger("airquality.monitor")

        self.latest_measurement: Optional[Measurement] = None
        self.prediction: Prediction = analyzer.get_prediction()
        self.error_message: Optional[str] = None
        self.is_loading: bool = False
        self.available_paths: List[str] = []
        self.last_alerts: List[Alert] = []
        self.updated_at: Optional[datetime] = None
        self._subscription: Optional[Subscription] = None

    @property
    def is_listening(self) -> bool:
        return self._subscription is not None and self._subscription.is_active

    async def fetch_latest_once(self) -> FetchResult:
        """Fetch the latest measurement once and process it."""
        self.logger.info("Fetching data once")
        self.is_loading = True
        self.error_message = None
        try:
            result = await self.repository.fetch_latest()
            await self.handle_result(result)
            return result
        finally:
            self.is_loading = False

    async def start_listening(self) -> None:
        """Subscribe to data changes. Does nothing when already listening."""
        if self.is_listening:
            self.logger.debug("Already listening for data changes")
            return

        self.logger.info("Starting to listen for data changes")
        self.is_loading = True
        self.error_message = None
        self._subscription = self.repository.subscribe(self._on_result)
        self._subscription.start()

    async def stop_listening(self) -> None:
        """Stop the subscription; no result is processed after this returns."""
        if self._subscription is None:
            return

        await self._subscription.stop()
        self._subscription = None
        self.is_loading = False
        self.logger.info("Stopped listening for data changes")

    async def _on_result(self, result: FetchResult) -> None:
        self.is_loading = False
        await self.handle_result(result, listening=True)

    async def handle_result(self, result: FetchResult, listening: bool = False) -> None:
        """
        Route a FetchResult into the monitor state.

        Args:
            result: Outcome of a fetch
            listening: True when the result came from the subscription
        """
        if result.is_failure:
            if listening:
                self.logger.error("Error while listening for data", reason=result.reason)
                self.error_message = f"{LISTEN_ERROR_PREFIX}: {result.reason}"
            else:
                self.logger.error("Error fetching data", reason=result.reason)
                self.error_message = f"{FETCH_ERROR_PREFIX}: {result.reason}"
            return

        await self.process_new_data(result.measurement)

    async def process_new_data(self, measurement: Optional[Measurement]) -> List[Alert]:
        """
        Store the measurement, refresh the prediction and check alert thresholds.

        Args:
            measurement: New reading, or None when the data path is empty

        Returns:
            Alerts raised for this measurement
        """
        self.latest_measurement = measurement
        self.updated_at = datetime.now(timezone.utc)

        if measurement is None:
            self.error_message = NO_DATA_MESSAGE
            return []

        self.error_message = None
        self.analyzer.add_measurement(measurement)
        self.prediction = self.analyzer.get_prediction()
        self.last_alerts = self.alert_service.check_and_notify(measurement)

        self.logger.debug(
            "Processed measurement",
            device=measurement.device_name if measurement.has_device else "unknown",
            history_size=self.analyzer.size
        )

        await self._publish_snapshot()
        return self.last_alerts

    async def ingest(self, measurement: Measurement) -> List[Alert]:
        """Process a measurement pushed directly by a device or client."""
        return await self.process_new_data(measurement)

    async def clear_history(self) -> None:
        """Discard the trend history, e.g. after a long disconnection."""
        self.analyzer.clear_history()
        self.prediction = self.analyzer.get_prediction()
        self.logger.info("Measurement history cleared")
        await self._publish_snapshot()

    async def check_available_paths(self) -> List[str]:
        """List the data paths of the data source; errors yield an empty list."""
        try:
            paths = await self.repository.list_paths()
        except RepositoryError as e:
            self.logger.error("Error checking paths", error=e.message, details=e.details)
            return []

        self.available_paths = paths
        self.logger.info(f"Available paths: {', '.join(paths)}")
        return paths

    def history(self) -> Tuple[Measurement, ...]:
        return self.analyzer.history

    async def window_statistics(self) -> Dict[str, MetricStatistics]:
        """Statistics over the current history window, cached by window contents."""
        history = self.analyzer.history
        cache_key = None
        if self.cache:
            # Equal window contents map to the same key in every process
            window = json.dumps([m.to_record() for m in history], sort_keys=True)
            cache_key = self.cache.generate_cache_key(CacheKeyPatterns.WINDOW_STATISTICS, window=window)
            cached = await self.cache.get_json(cache_key)
            if cached:
                return {name: MetricStatistics(**values) for name, values in cached.items()}

        statistics = WindowStatistics.summarize(history)

        if self.cache and statistics:
            payload = {name: vars(stat) for name, stat in statistics.items()}
            await self.cache.set_json(cache_key, payload, CacheTTL.SHORT)

        return statistics

    def snapshot(self) -> MonitorSnapshot:
        return MonitorSnapshot(
            latest_measurement=self.latest_measurement,
            prediction=self.prediction,
            error_message=self.error_message,
            is_loading=self.is_loading,
            is_listening=self.is_listening,
            history_size=self.analyzer.size,
            history_capacity=self.analyzer.capacity,
            last_alerts=list(self.last_alerts),
            updated_at=self.updated_at
        )

    async def _publish_snapshot(self) -> None:
        if not self.cache:
            return

        payload = {
            "latest_measurement": self.latest_measurement.to_record() if self.latest_measurement else None,
            "prediction": {"summary": self.prediction.summary, "details": self.prediction.details},
            "history_size": self.analyzer.size,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None
        }
        stored = await self.cache.set_json(CacheKeyPatterns.MONITOR_SNAPSHOT, payload, CacheTTL.REAL_TIME)
        if not stored:
            self.logger.warn("Failed to publish monitor snapshot to cache")
