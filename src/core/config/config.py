"""
Configuration settings for the Air Quality Service.
Loads configuration from environment variables with sensible defaults.
"""

import os
from typing import List, Optional

from ...adapters.logger.standard_logger import StandardLogger
from ..ports.logger import Logger


# Configure logging using our custom logger
logger: Logger = StandardLogger("airquality")


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_optional(name: str) -> Optional[str]:
    value = os.getenv(name, "").strip()
    return value or None


# Configuration from environment variables
class Config:
    """Application configuration loaded from environment variables."""

    # InfluxDB configuration
    INFLUXDB_URL: str = os.getenv("INFLUXDB_URL", "http://localhost:8086")
    INFLUXDB_TOKEN: str = os.getenv("INFLUXDB_TOKEN", "your-influxdb-token-here")
    INFLUXDB_BUCKET: str = os.getenv("INFLUXDB_BUCKET", "airquality-bucket")
    INFLUXDB_ORG: str = os.getenv("INFLUXDB_ORG", "airquality-org")
    INFLUXDB_MEASUREMENT: str = os.getenv("INFLUXDB_MEASUREMENT", "air_quality")
    INFLUXDB_LOOKBACK: str = os.getenv("INFLUXDB_LOOKBACK", "-10m")

    # Device to follow; None follows whichever device reported last
    DEVICE_NAME: Optional[str] = _env_optional("DEVICE_NAME")

    # Monitor configuration
    HISTORY_SIZE: int = int(os.getenv("HISTORY_SIZE", "10"))
    POLL_INTERVAL_SECONDS: float = float(os.getenv("POLL_INTERVAL_SECONDS", "5"))
    MONITOR_AUTOSTART: bool = _env_bool("MONITOR_AUTOSTART", "true")
    RECENT_ALERTS_LIMIT: int = int(os.getenv("RECENT_ALERTS_LIMIT", "50"))

    # Alert thresholds (ppm for CO2, ppb for TVOC)
    CO2_WARNING_THRESHOLD: int = int(os.getenv("CO2_WARNING_THRESHOLD", "1000"))
    CO2_DANGER_THRESHOLD: int = int(os.getenv("CO2_DANGER_THRESHOLD", "2000"))
    TVOC_WARNING_THRESHOLD: int = int(os.getenv("TVOC_WARNING_THRESHOLD", "1000"))
    TVOC_DANGER_THRESHOLD: int = int(os.getenv("TVOC_DANGER_THRESHOLD", "2000"))

    # Redis configuration
    REDIS_ENABLED: bool = _env_bool("REDIS_ENABLED", "false")
    REDIS_HOST: str = os.getenv("REDIS_HOST", "localhost")
    REDIS_PORT: int = int(os.getenv("REDIS_PORT", "6379"))
    REDIS_PASSWORD: Optional[str] = _env_optional("REDIS_PASSWORD")
    REDIS_DB: int = int(os.getenv("REDIS_DB", "0"))
    CACHE_DEFAULT_TTL: int = int(os.getenv("CACHE_DEFAULT_TTL", "300"))

    # CORS configuration - Allow all origins for maximum compatibility
    CORS_ORIGINS: List[str] = ["*"]

    # Application configuration
    APP_TITLE: str = "Air Quality Monitoring Service"
    APP_DESCRIPTION: str = "Live air quality readings, threshold alerts and trend commentary"
    APP_VERSION: str = "1.0.0"
    DOCS_URL: str = "/docs"
    REDOC_URL: str = "/redoc"

    # GraphQL configuration
    GRAPHQL_PLAYGROUND_ENABLED: bool = _env_bool("GRAPHQL_PLAYGROUND_ENABLED", "true")
    GRAPHQL_ENDPOINT: str = "/api/v1/graphql"

    # Server configuration
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))
    RELOAD: bool = _env_bool("RELOAD", "true")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "info")


# Global configuration instance
config = Config()
