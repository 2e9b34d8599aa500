"""
Main application entry point for the Air Quality Service.
Sets up FastAPI app with dependency injection and error handling.
"""

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from .core.services.alert_service import AlertService
from .core.services.monitor_service import AirQualityMonitor
from .core.services.trend_analyzer import TrendAnalyzer
from .adapters.repositories.influx_repository import InfluxRepository
from .adapters.handlers.air_quality_handlers import AirQualityHandlers
from .adapters.graphql.schema import create_graphql_router
from .adapters.cache.redis_cache import RedisCache
from .adapters.notifiers.log_notifier import LogNotifier
from .core.ports.cache_service import CacheService

# Import configuration
from .core.config.config import config, logger

# Import error handlers
from .core.util.errorhandling import register_error_handlers


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Air Quality Service...")

    # Startup
    logger.info(f"Connecting to InfluxDB at: {config.INFLUXDB_URL}")

    cache_service = await get_cache_service()
    influx_repository = get_influx_repository()
    notifier = LogNotifier(recent_limit=config.RECENT_ALERTS_LIMIT)
    monitor = get_monitor(influx_repository, notifier, cache_service)

    # Store services in app state for access in endpoints
    app.state.cache_service = cache_service
    app.state.influx_repository = influx_repository
    app.state.notifier = notifier
    app.state.monitor = monitor

    # Setup routes during startup
    handlers = AirQualityHandlers(monitor, notifier, cache_service)
    app.include_router(handlers.router)
    logger.info("REST API router configured successfully")

    graphql_router = create_graphql_router(
        monitor=monitor,
        notifier=notifier,
        playground_enabled=config.GRAPHQL_PLAYGROUND_ENABLED
    )
    app.include_router(graphql_router, prefix=config.GRAPHQL_ENDPOINT, tags=["GraphQL"])
    logger.info("GraphQL router configured successfully")

    # Check data paths, fetch once, then keep listening
    await monitor.check_available_paths()
    await monitor.fetch_latest_once()
    if config.MONITOR_AUTOSTART:
        await monitor.start_listening()

    yield

    # Shutdown
    logger.info("Shutting down Air Quality Service...")
    await monitor.stop_listening()
    influx_repository.close()

    if cache_service:
        await cache_service.disconnect()


# Create FastAPI application
app = FastAPI(
    title=config.APP_TITLE,
    description=config.APP_DESCRIPTION,
    version=config.APP_VERSION,
    docs_url=config.DOCS_URL,
    redoc_url=config.REDOC_URL,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Dependency injection setup
def get_influx_repository() -> InfluxRepository:
    """Get InfluxDB repository instance."""
    return InfluxRepository(
        url=config.INFLUXDB_URL,
        token=config.INFLUXDB_TOKEN,
        bucket=config.INFLUXDB_BUCKET,
        org=config.INFLUXDB_ORG,
        measurement_name=config.INFLUXDB_MEASUREMENT,
        device_name=config.DEVICE_NAME,
        lookback=config.INFLUXDB_LOOKBACK,
        poll_interval=config.POLL_INTERVAL_SECONDS
    )


async def get_cache_service() -> Optional[CacheService]:
    """Get cache service instance, or None when Redis is disabled or unreachable."""
    if not config.REDIS_ENABLED:
        logger.info("Redis cache is disabled")
        return None

    redis_cache = RedisCache(
        host=config.REDIS_HOST,
        port=config.REDIS_PORT,
        password=config.REDIS_PASSWORD,
        db=config.REDIS_DB,
        default_ttl=config.CACHE_DEFAULT_TTL
    )

    if await redis_cache.connect():
        logger.info("Redis cache connected successfully")
        return redis_cache

    logger.warn("Failed to connect to Redis cache, running without cache")
    return None


def get_monitor(
    repository: InfluxRepository,
    notifier: LogNotifier,
    cache_service: Optional[CacheService] = None
) -> AirQualityMonitor:
    """Build the air quality monitor with injected dependencies."""
    alert_service = AlertService(
        notifier=notifier,
        co2_warning=config.CO2_WARNING_THRESHOLD,
        co2_danger=config.CO2_DANGER_THRESHOLD,
        tvoc_warning=config.TVOC_WARNING_THRESHOLD,
        tvoc_danger=config.TVOC_DANGER_THRESHOLD,
        logger=logger
    )

    return AirQualityMonitor(
        repository=repository,
        analyzer=TrendAnalyzer(capacity=config.HISTORY_SIZE),
        alert_service=alert_service,
        cache_service=cache_service,
        logger=logger
    )


# Register error handlers
register_error_handlers(app)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint with service information."""
    return {
        "service": config.APP_TITLE,
        "version": config.APP_VERSION,
        "description": config.APP_DESCRIPTION,
        "endpoints": {
            "docs": config.DOCS_URL,
            "redoc": config.REDOC_URL,
            "health": "/api/v1/air-quality/health",
            "prediction": "/api/v1/air-quality/prediction",
            "graphql": config.GRAPHQL_ENDPOINT
        }
    }


# Health check endpoint
@app.get("/health")
async def health_check():
    """Service health check."""
    try:
        influx_repo = app.state.influx_repository
        influxdb_healthy = await influx_repo.health_check()

        return {
            "status": "healthy" if influxdb_healthy else "degraded",
            "service": "airquality",
            "influxdb": "healthy" if influxdb_healthy else "unhealthy",
            "influxdb_url": config.INFLUXDB_URL,
            "listening": app.state.monitor.is_listening,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    except Exception as e:
        logger.error(f"Health check failed: {e}")
        return JSONResponse(
            status_code=503,
            content={
                "status": "unhealthy",
                "service": "airquality",
                "error": str(e),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }
        )


if __name__ == "__main__":
    import uvicorn

    # Run the application
    uvicorn.run(
        "src.main:app",
        host=config.HOST,
        port=config.PORT,
        reload=config.RELOAD,
        log_level=config.LOG_LEVEL
    )
