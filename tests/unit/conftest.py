"""
Test configuration and fixtures for unit tests.
"""

import sys
from pathlib import Path

# Add project root directory to Python path so src module can be found
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))

import pytest
from unittest.mock import AsyncMock, MagicMock

from src.core.domain.measurement import Measurement
from src.core.domain.results import FetchResult
from src.core.ports.logger import Logger
from src.core.ports.measurement_repository import MeasurementRepository
from src.core.ports.notifier import Notifier
from src.core.ports.subscription import Subscription
from src.core.services.alert_service import AlertService
from src.core.services.monitor_service import AirQualityMonitor
from src.core.services.trend_analyzer import TrendAnalyzer


def make_measurement(**overrides) -> Measurement:
    """Build a measurement with comfortable indoor defaults."""
    values = {
        "device_name": "sensor-01",
        "timestamp": "2024-05-01 12:00:00",
        "temperature": 21.5,
        "humidity": 45.0,
        "co2": 600,
        "tvoc": 200,
        "pressure": 1013.2,
        "altitude": 120.0,
    }
    values.update(overrides)
    return Measurement(**values)


@pytest.fixture
def measurement_factory():
    """Fixture exposing the measurement builder."""
    return make_measurement


@pytest.fixture
def sample_measurement():
    """Fixture providing a single comfortable reading."""
    return make_measurement()


@pytest.fixture
def sample_measurements():
    """Fixture providing a short series of readings with rising CO2."""
    return [
        make_measurement(timestamp=f"2024-05-01 12:0{i}:00", co2=400 + i * 10)
        for i in range(5)
    ]


@pytest.fixture
def mock_logger():
    """Fixture providing a mock Logger."""
    return MagicMock(spec=Logger)


@pytest.fixture
def mock_notifier():
    """Fixture providing a mock Notifier."""
    return MagicMock(spec=Notifier)


@pytest.fixture
def mock_subscription():
    """Fixture providing a mock Subscription."""
    subscription = MagicMock(spec=Subscription)
    subscription.stop = AsyncMock()
    subscription.is_active = True
    return subscription


@pytest.fixture
def mock_measurement_repository(sample_measurement, mock_subscription):
    """Fixture providing a mock MeasurementRepository."""
    mock_repo = MagicMock(spec=MeasurementRepository)

    mock_repo.fetch_latest = AsyncMock(return_value=FetchResult.success(sample_measurement))
    mock_repo.list_paths = AsyncMock(return_value=["air_quality", "air_quality/sensor-01"])
    mock_repo.health_check = AsyncMock(return_value=True)
    mock_repo.subscribe.return_value = mock_subscription
    mock_repo.url = "http://localhost:8086"

    return mock_repo


@pytest.fixture
def analyzer():
    """Fixture providing an empty analyzer with the default capacity."""
    return TrendAnalyzer()


@pytest.fixture
def alert_service(mock_notifier, mock_logger):
    """Fixture providing an AlertService with default thresholds."""
    return AlertService(notifier=mock_notifier, logger=mock_logger)


@pytest.fixture
def monitor(mock_measurement_repository, analyzer, alert_service, mock_logger):
    """Fixture providing a monitor wired to mocks, without cache."""
    return AirQualityMonitor(
        repository=mock_measurement_repository,
        analyzer=analyzer,
        alert_service=alert_service,
        logger=mock_logger
    )
