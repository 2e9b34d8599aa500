"""
GraphQL types for the Air Quality Service.
Strawberry GraphQL type definitions based on domain entities.
"""

import strawberry
from typing import List, Optional
from datetime import datetime

from ...core.domain.alerts import Alert as DomainAlert
from ...core.domain.measurement import Measurement as DomainMeasurement
from ...core.domain.prediction import Prediction as DomainPrediction
from ...core.domain.statistics import MetricStatistics as DomainMetricStatistics


@strawberry.type
class Measurement:
    """GraphQL type for an air quality reading."""
    device_name: str
    timestamp: str
    temperature: float
    humidity: float
    co2: int
    tvoc: int
    pressure: float
    altitude: float

    @classmethod
    def from_domain(cls, m: DomainMeasurement) -> "Measurement":
        """Convert domain Measurement to GraphQL type."""
        return cls(
            device_name=m.device_name,
            timestamp=m.timestamp,
            temperature=m.temperature,
            humidity=m.humidity,
            co2=m.co2,
            tvoc=m.tvoc,
            pressure=m.pressure,
            altitude=m.altitude
        )


@strawberry.type
class Prediction:
    """GraphQL type for the trend commentary."""
    summary: str
    details: str
    history_size: int

    @classmethod
    def from_domain(cls, prediction: DomainPrediction, history_size: int) -> "Prediction":
        return cls(
            summary=prediction.summary,
            details=prediction.details,
            history_size=history_size
        )


@strawberry.type
class Alert:
    """GraphQL type for threshold alerts."""
    notification_id: int
    metric: str
    level: str
    value: int
    unit: str
    title: str
    message: str
    device_name: str
    created_at: datetime

    @classmethod
    def from_domain(cls, alert: DomainAlert) -> "Alert":
        return cls(
            notification_id=alert.notification_id,
            metric=alert.metric,
            level=alert.level.value,
            value=alert.value,
            unit=alert.unit,
            title=alert.title,
            message=alert.message,
            device_name=alert.device_name,
            created_at=alert.created_at
        )


@strawberry.type
class MetricStatistics:
    """GraphQL type for statistics of one metric over the history window."""
    metric_name: str
    unit: str
    mean: float
    min: float
    max: float
    std_dev: float
    count: int

    @classmethod
    def from_domain(cls, stats: DomainMetricStatistics) -> "MetricStatistics":
        return cls(
            metric_name=stats.metric_name,
            unit=stats.unit,
            mean=stats.mean,
            min=stats.min,
            max=stats.max,
            std_dev=stats.std_dev,
            count=stats.count
        )


@strawberry.type
class LatestMeasurement:
    """GraphQL type for the latest reading and the monitor error state."""
    measurement: Optional[Measurement]
    error_message: Optional[str]
    is_listening: bool


@strawberry.type
class HealthStatus:
    """GraphQL type for service health status."""
    status: str
    service: str
    influxdb: str
    influxdb_url: str
    timestamp: str


@strawberry.input
class MeasurementInput:
    """GraphQL input type for pushing a reading."""
    device_name: str = ""
    timestamp: str = ""
    temperature: float = 0.0
    humidity: float = 0.0
    co2: int = 0
    tvoc: int = 0
    pressure: float = 0.0
    altitude: float = 0.0

    def to_domain(self) -> DomainMeasurement:
        """Convert GraphQL input to domain Measurement."""
        return DomainMeasurement(
            device_name=self.device_name,
            timestamp=self.timestamp,
            temperature=self.temperature,
            humidity=self.humidity,
            co2=self.co2,
            tvoc=self.tvoc,
            pressure=self.pressure,
            altitude=self.altitude
        )


@strawberry.type
class IngestResult:
    """GraphQL type returned after pushing a reading."""
    prediction: Prediction
    alerts: List[Alert]
