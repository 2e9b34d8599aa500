"""
GraphQL resolvers for the Air Quality Service.
The monitor and notifier are taken from the request context set up in schema.py.
"""

import strawberry
from strawberry.types import Info
from typing import List
import logging
from datetime import datetime, timezone

from ...core.services.monitor_service import AirQualityMonitor
from .types import (
    Alert,
    HealthStatus,
    IngestResult,
    LatestMeasurement,
    Measurement,
    MeasurementInput,
    MetricStatistics,
    Prediction
)


_logger = logging.getLogger(__name__)


def _monitor(info: Info) -> AirQualityMonitor:
    return info.context["monitor"]


def _prediction(monitor: AirQualityMonitor) -> Prediction:
    return Prediction.from_domain(monitor.prediction, monitor.analyzer.size)


@strawberry.type
class Query:
    """GraphQL Query resolvers for the Air Quality Service."""

    @strawberry.field
    def latest_measurement(self, info: Info) -> LatestMeasurement:
        """Most recent reading together with the current error state."""
        _logger.info("GraphQL query: latestMeasurement")
        monitor = _monitor(info)
        latest = monitor.latest_measurement
        return LatestMeasurement(
            measurement=Measurement.from_domain(latest) if latest else None,
            error_message=monitor.error_message,
            is_listening=monitor.is_listening
        )

    @strawberry.field
    def prediction(self, info: Info) -> Prediction:
        """Current trend commentary."""
        _logger.info("GraphQL query: prediction")
        return _prediction(_monitor(info))

    @strawberry.field
    def history(self, info: Info) -> List[Measurement]:
        """History window, oldest first."""
        return [Measurement.from_domain(m) for m in _monitor(info).history()]

    @strawberry.field
    async def window_statistics(self, info: Info) -> List[MetricStatistics]:
        """Per-metric statistics over the history window."""
        stats = await _monitor(info).window_statistics()
        return [MetricStatistics.from_domain(s) for s in stats.values()]

    @strawberry.field
    def alerts(self, info: Info) -> List[Alert]:
        """Active alerts per notification slot."""
        notifier = info.context.get("notifier")
        if notifier is None:
            return [Alert.from_domain(a) for a in _monitor(info).last_alerts]
        return [Alert.from_domain(a) for a in notifier.active_alerts()]

    @strawberry.field
    async def health(self, info: Info) -> HealthStatus:
        """Health of the service and its data source."""
        _logger.info("GraphQL query: health")
        repository = _monitor(info).repository
        url = getattr(repository, "url", "unknown")
        try:
            healthy = await repository.health_check()
        except Exception as e:
            _logger.error(f"Health check failed: {e}")
            healthy = False

        return HealthStatus(
            status="healthy" if healthy else "degraded",
            service="airquality",
            influxdb="healthy" if healthy else "unhealthy",
            influxdb_url=url,
            timestamp=datetime.now(timezone.utc).isoformat()
        )


@strawberry.type
class Mutation:
    """GraphQL Mutation resolvers for the Air Quality Service."""

    @strawberry.mutation
    async def clear_history(self, info: Info) -> Prediction:
        """Discard the trend history and return the reset prediction."""
        _logger.info("GraphQL mutation: clearHistory")
        monitor = _monitor(info)
        await monitor.clear_history()
        return _prediction(monitor)

    @strawberry.mutation
    async def refresh(self, info: Info) -> LatestMeasurement:
        """Fetch the latest reading from the data source once."""
        _logger.info("GraphQL mutation: refresh")
        monitor = _monitor(info)
        await monitor.fetch_latest_once()
        latest = monitor.latest_measurement
        return LatestMeasurement(
            measurement=Measurement.from_domain(latest) if latest else None,
            error_message=monitor.error_message,
            is_listening=monitor.is_listening
        )

    @strawberry.mutation
    async def ingest_measurement(self, info: Info, measurement: MeasurementInput) -> IngestResult:
        """Push a reading through the monitor."""
        _logger.info("GraphQL mutation: ingestMeasurement")
        monitor = _monitor(info)
        # Invalid values raise ValueError, reported by strawberry as a GraphQL error
        alerts = await monitor.ingest(measurement.to_domain())
        return IngestResult(
            prediction=_prediction(monitor),
            alerts=[Alert.from_domain(a) for a in alerts]
        )
