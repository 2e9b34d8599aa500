"""
Models package for infrastructure layer.
Contains Pydantic models for request/response serialization.
"""

from .models import (
    MeasurementModel,
    IngestMeasurementRequest,
    IngestResponse,
    PredictionModel,
    PredictionResponse,
    AlertModel,
    AlertsResponse,
    LatestMeasurementResponse,
    HistoryResponse,
    MetricStatisticsModel,
    WindowStatisticsResponse,
    MonitorStatusResponse,
    PathsResponse,
    ErrorResponse,
    HealthResponse
)

__all__ = [
    "MeasurementModel",
    "IngestMeasurementRequest",
    "IngestResponse",
    "PredictionModel",
    "PredictionResponse",
    "AlertModel",
    "AlertsResponse",
    "LatestMeasurementResponse",
    "HistoryResponse",
    "MetricStatisticsModel",
    "WindowStatisticsResponse",
    "MonitorStatusResponse",
    "PathsResponse",
    "ErrorResponse",
    "HealthResponse"
]
