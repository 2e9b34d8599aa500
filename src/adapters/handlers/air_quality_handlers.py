"""
FastAPI handlers for air quality endpoints.
These handlers implement the REST API interface for the air quality service.
"""

from fastapi import APIRouter, HTTPException
from typing import Optional
from datetime import datetime, timezone
import logging

from ...core.services.monitor_service import AirQualityMonitor
from ...core.ports.cache_service import CacheService, CacheKeyPatterns
from ...core.ports.exceptions import AirQualityServiceError
from ..notifiers.log_notifier import LogNotifier
from ..models import (
    AlertModel,
    AlertsResponse,
    ErrorResponse,
    HealthResponse,
    HistoryResponse,
    IngestMeasurementRequest,
    IngestResponse,
    LatestMeasurementResponse,
    MeasurementModel,
    MetricStatisticsModel,
    MonitorStatusResponse,
    PathsResponse,
    PredictionModel,
    PredictionResponse,
    WindowStatisticsResponse
)


class AirQualityHandlers:
    """
    FastAPI handlers for air quality endpoints.
    Exposes the monitor state, the prediction and alert history.
    """

    def __init__(
        self,
        monitor: AirQualityMonitor,
        notifier: Optional[LogNotifier] = None,
        cache_service: Optional[CacheService] = None
    ):
        """
        Initialize handlers with their dependencies.

        Args:
            monitor: The air quality monitor owned by the application
            notifier: Notifier holding active and recent alerts (optional)
            cache_service: Cache service for cache management operations (optional)
        """
        self.monitor = monitor
        self.notifier = notifier
        self.cache_service = cache_service
        self.logger = logging.getLogger(__name__)

        self.router = APIRouter(prefix="/api/v1/air-quality", tags=["air-quality"])
        self._setup_routes()

        route_count = len(self.router.routes)
        self.logger.info(f"Air quality router initialized with {route_count} routes")

    def _setup_routes(self):
        """Setup FastAPI routes."""

        @self.router.get(
            "/latest",
            response_model=LatestMeasurementResponse,
            summary="Latest Measurement",
            description="Most recent reading received from the data source"
        )
        async def latest_measurement():
            return LatestMeasurementResponse.from_snapshot(self.monitor.snapshot())

        @self.router.get(
            "/prediction",
            response_model=PredictionResponse,
            summary="Trend Prediction",
            description="Current trend commentary derived from the history window"
        )
        async def prediction():
            snapshot = self.monitor.snapshot()
            return PredictionResponse(
                prediction=PredictionModel.from_domain(snapshot.prediction),
                history_size=snapshot.history_size,
                history_capacity=snapshot.history_capacity,
                generated_at=datetime.now(timezone.utc)
            )

        @self.router.get(
            "/history",
            response_model=HistoryResponse,
            summary="History Window",
            description="Measurements currently held for trend analysis, oldest first"
        )
        async def history():
            measurements = self.monitor.history()
            return HistoryResponse(
                measurements=[MeasurementModel.from_domain(m) for m in measurements],
                size=len(measurements),
                capacity=self.monitor.analyzer.capacity
            )

        @self.router.post(
            "/history/clear",
            response_model=PredictionResponse,
            summary="Clear History",
            description="Discard the accumulated trend context"
        )
        async def clear_history():
            self.logger.info("POST /history/clear called")
            await self.monitor.clear_history()
            snapshot = self.monitor.snapshot()
            return PredictionResponse(
                prediction=PredictionModel.from_domain(snapshot.prediction),
                history_size=snapshot.history_size,
                history_capacity=snapshot.history_capacity,
                generated_at=datetime.now(timezone.utc)
            )

        @self.router.get(
            "/statistics",
            response_model=WindowStatisticsResponse,
            summary="Window Statistics",
            description="Mean, min, max and standard deviation per metric over the history window"
        )
        async def statistics():
            stats = await self.monitor.window_statistics()
            return WindowStatisticsResponse(
                metrics={name: MetricStatisticsModel.from_domain(s) for name, s in stats.items()},
                window_size=self.monitor.analyzer.size
            )

        @self.router.get(
            "/alerts",
            response_model=AlertsResponse,
            summary="Alerts",
            description="Active alerts per notification slot and recently raised alerts"
        )
        async def alerts():
            if self.notifier is None:
                last = [AlertModel.from_domain(a) for a in self.monitor.last_alerts]
                return AlertsResponse(active=last, recent=last)

            return AlertsResponse(
                active=[AlertModel.from_domain(a) for a in self.notifier.active_alerts()],
                recent=[AlertModel.from_domain(a) for a in self.notifier.recent_alerts()]
            )

        @self.router.post(
            "/measurements",
            response_model=IngestResponse,
            status_code=201,
            responses={422: {"model": ErrorResponse}},
            summary="Ingest Measurement",
            description="Push a reading; accepts the device wire keys (co2Value, tempValue, ...)"
        )
        async def ingest_measurement(request: IngestMeasurementRequest):
            return await self._handle_ingest(request)

        @self.router.post(
            "/refresh",
            response_model=LatestMeasurementResponse,
            responses={502: {"model": ErrorResponse}},
            summary="Refresh",
            description="Fetch the latest reading from the data source once"
        )
        async def refresh():
            return await self._handle_refresh()

        @self.router.get(
            "/paths",
            response_model=PathsResponse,
            summary="Available Paths",
            description="Data paths (measurements and devices) available in the data source"
        )
        async def paths():
            found = await self.monitor.check_available_paths()
            return PathsResponse(paths=found, count=len(found))

        @self.router.post(
            "/listening/start",
            response_model=MonitorStatusResponse,
            summary="Start Listening",
            description="Subscribe to changes of the data source"
        )
        async def start_listening():
            await self.monitor.start_listening()
            return self._status()

        @self.router.post(
            "/listening/stop",
            response_model=MonitorStatusResponse,
            summary="Stop Listening",
            description="Cancel the data source subscription"
        )
        async def stop_listening():
            await self.monitor.stop_listening()
            return self._status()

        @self.router.get(
            "/status",
            response_model=MonitorStatusResponse,
            summary="Monitor Status"
        )
        async def status():
            return self._status()

        @self.router.get(
            "/health",
            response_model=HealthResponse,
            summary="Air Quality Service Health Check",
            description="Check the health status of the service and its data source"
        )
        async def health_check():
            self.logger.info("GET /health called")
            repository = self.monitor.repository
            try:
                healthy = await repository.health_check()
            except Exception as e:
                self.logger.error(f"Health check failed: {e}")
                raise HTTPException(
                    status_code=503,
                    detail={
                        "status": "unhealthy",
                        "service": "airquality",
                        "error": str(e),
                        "timestamp": datetime.now(timezone.utc).isoformat()
                    }
                )

            return HealthResponse(
                status="healthy" if healthy else "degraded",
                service="airquality",
                influxdb="healthy" if healthy else "unhealthy",
                influxdb_url=getattr(repository, "url", "unknown"),
                is_listening=self.monitor.is_listening,
                timestamp=datetime.now(timezone.utc).isoformat()
            )

        @self.router.post(
            "/cache/clear",
            summary="Clear Cache",
            description="Remove cached snapshots and statistics from Redis"
        )
        async def clear_cache_endpoint():
            return await self.clear_cache()

    async def _handle_ingest(self, request: IngestMeasurementRequest) -> IngestResponse:
        """Handle a pushed measurement."""
        try:
            measurement = request.to_domain()
        except ValueError as e:
            self.logger.warning(f"Rejected measurement: {e}")
            raise HTTPException(
                status_code=422,
                detail={
                    "error": "Invalid measurement",
                    "message": str(e)
                }
            )

        try:
            alerts = await self.monitor.ingest(measurement)
        except AirQualityServiceError as e:
            self.logger.error(f"Error processing measurement: {e.message}")
            raise HTTPException(
                status_code=500,
                detail={
                    "error": "Processing error",
                    "message": e.message
                }
            )

        self.logger.info(
            f"Measurement ingested for device '{measurement.device_name if measurement.has_device else 'unknown'}' "
            f"({len(alerts)} alerts)"
        )
        return IngestResponse(
            measurement=MeasurementModel.from_domain(measurement),
            prediction=PredictionModel.from_domain(self.monitor.prediction),
            alerts=[AlertModel.from_domain(a) for a in alerts]
        )

    async def _handle_refresh(self) -> LatestMeasurementResponse:
        """Handle a one-shot fetch request."""
        result = await self.monitor.fetch_latest_once()

        if result.is_failure:
            self.logger.error(f"Refresh failed: {result.reason}")
            raise HTTPException(
                status_code=502,
                detail={
                    "error": "Data source unavailable",
                    "message": self.monitor.error_message or result.reason
                }
            )

        return LatestMeasurementResponse.from_snapshot(self.monitor.snapshot())

    def _status(self) -> MonitorStatusResponse:
        snapshot = self.monitor.snapshot()
        return MonitorStatusResponse(
            is_listening=snapshot.is_listening,
            is_loading=snapshot.is_loading,
            error_message=snapshot.error_message,
            history_size=snapshot.history_size,
            history_capacity=snapshot.history_capacity,
            available_paths=list(self.monitor.available_paths),
            updated_at=snapshot.updated_at
        )

    async def clear_cache(self):
        """
        Clear cached air quality data from Redis.

        Returns:
            dict: Confirmation message with the number of removed keys

        Raises:
            HTTPException: If the cache service is unavailable
        """
        self.logger.info("Cache clear operation requested")

        if self.cache_service is None:
            self.logger.warning("Cache clear requested but cache service not available")
            raise HTTPException(
                status_code=503,
                detail={
                    "error": "Cache service unavailable",
                    "message": "Cache service is not configured or disabled"
                }
            )

        deleted = await self.cache_service.clear_pattern(CacheKeyPatterns.ALL)
        self.logger.info(f"Cache cleared ({deleted} keys)")
        return {
            "status": "success",
            "message": "Cached air quality data has been cleared",
            "deleted_keys": deleted,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "operation": "cache_clear"
        }
