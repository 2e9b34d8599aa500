"""
Pydantic models for FastAPI request/response serialization.
These models handle the conversion between HTTP and domain objects.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime

from ...core.domain.alerts import Alert
from ...core.domain.measurement import Measurement
from ...core.domain.prediction import Prediction
from ...core.domain.statistics import MetricStatistics
from ...core.services.monitor_service import MonitorSnapshot, NO_DATA_MESSAGE


class MeasurementModel(BaseModel):
    """Model for a single air quality reading."""
    device_name: str = Field(..., description="Device that produced the reading")
    timestamp: str = Field(..., description="Reading time as reported by the device")
    temperature: float = Field(..., description="Temperature in °C")
    humidity: float = Field(..., description="Relative humidity in %")
    co2: int = Field(..., description="CO2 concentration in ppm")
    tvoc: int = Field(..., description="TVOC concentration in ppb")
    pressure: float = Field(..., description="Air pressure in hPa")
    altitude: float = Field(..., description="Altitude in m")

    @classmethod
    def from_domain(cls, measurement: Measurement) -> "MeasurementModel":
        """Convert from domain object to model."""
        return cls(
            device_name=measurement.device_name,
            timestamp=measurement.timestamp,
            temperature=measurement.temperature,
            humidity=measurement.humidity,
            co2=measurement.co2,
            tvoc=measurement.tvoc,
            pressure=measurement.pressure,
            altitude=measurement.altitude
        )


class IngestMeasurementRequest(BaseModel):
    """
    Request model for pushing a reading.
    Accepts the device wire keys (co2Value, tempValue, ...) as well as field names.
    """
    model_config = ConfigDict(populate_by_name=True)

    device_name: str = Field("", alias="deviceName")
    timestamp: str = Field("", alias="time")
    temperature: float = Field(0.0, alias="tempValue")
    humidity: float = Field(0.0, ge=0, le=100, alias="humValue")
    co2: int = Field(0, ge=0, alias="co2Value")
    tvoc: int = Field(0, ge=0, alias="tvocValue")
    pressure: float = Field(0.0, alias="pressureValue")
    altitude: float = Field(0.0, alias="altitudeValue")

    @field_validator('device_name', 'timestamp', mode='before')
    @classmethod
    def strip_text(cls, v):
        """Trim surrounding whitespace from text fields."""
        if isinstance(v, str):
            return v.strip()
        return v

    def to_domain(self) -> Measurement:
        """Convert to domain object."""
        return Measurement(
            device_name=self.device_name,
            timestamp=self.timestamp,
            temperature=self.temperature,
            humidity=self.humidity,
            co2=self.co2,
            tvoc=self.tvoc,
            pressure=self.pressure,
            altitude=self.altitude
        )


class PredictionModel(BaseModel):
    """Model for the trend commentary."""
    summary: str = Field(..., description="Top-line trend statement")
    details: str = Field("", description="Elaboration with numeric deltas")

    @classmethod
    def from_domain(cls, prediction: Prediction) -> "PredictionModel":
        return cls(summary=prediction.summary, details=prediction.details)


class PredictionResponse(BaseModel):
    """Response model for the current prediction."""
    prediction: PredictionModel
    history_size: int = Field(..., description="Measurements in the history window")
    history_capacity: int = Field(..., description="Maximum size of the history window")
    generated_at: datetime


class AlertModel(BaseModel):
    """Model for a threshold alert."""
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
    def from_domain(cls, alert: Alert) -> "AlertModel":
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


class AlertsResponse(BaseModel):
    """Response model for active and recent alerts."""
    active: List[AlertModel]
    recent: List[AlertModel]


class IngestResponse(BaseModel):
    """Response model for a pushed reading."""
    measurement: MeasurementModel
    prediction: PredictionModel
    alerts: List[AlertModel]


class LatestMeasurementResponse(BaseModel):
    """Response model for the latest reading."""
    status: str = Field(..., description="'ok', 'no_data' or 'error'")
    measurement: Optional[MeasurementModel] = None
    error_message: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_snapshot(cls, snapshot: MonitorSnapshot) -> "LatestMeasurementResponse":
        # A fetch or stream failure wins over whatever reading came before it
        if snapshot.error_message and snapshot.error_message != NO_DATA_MESSAGE:
            status = "error"
        elif snapshot.latest_measurement is not None:
            status = "ok"
        else:
            status = "no_data"

        return cls(
            status=status,
            measurement=MeasurementModel.from_domain(snapshot.latest_measurement) if snapshot.latest_measurement else None,
            error_message=snapshot.error_message,
            updated_at=snapshot.updated_at
        )


class HistoryResponse(BaseModel):
    """Response model for the history window, oldest first."""
    measurements: List[MeasurementModel]
    size: int
    capacity: int


class MetricStatisticsModel(BaseModel):
    """Model for statistics of one metric."""
    metric_name: str
    unit: str
    mean: float
    min: float
    max: float
    std_dev: float
    count: int

    @classmethod
    def from_domain(cls, stats: MetricStatistics) -> "MetricStatisticsModel":
        return cls(
            metric_name=stats.metric_name,
            unit=stats.unit,
            mean=stats.mean,
            min=stats.min,
            max=stats.max,
            std_dev=stats.std_dev,
            count=stats.count
        )


class WindowStatisticsResponse(BaseModel):
    """Response model for history window statistics."""
    metrics: Dict[str, MetricStatisticsModel]
    window_size: int


class MonitorStatusResponse(BaseModel):
    """Response model for the monitor status."""
    is_listening: bool
    is_loading: bool
    error_message: Optional[str] = None
    history_size: int
    history_capacity: int
    available_paths: List[str]
    updated_at: Optional[datetime] = None


class PathsResponse(BaseModel):
    """Response model for the available data paths."""
    paths: List[str]
    count: int


class ErrorResponse(BaseModel):
    """Model for error responses."""
    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    details: Optional[str] = Field(None, description="Additional error details")


class HealthResponse(BaseModel):
    """Model for health check responses."""
    status: str
    service: str
    influxdb: str
    influxdb_url: str
    is_listening: bool
    timestamp: str
