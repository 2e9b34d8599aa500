"""
Unit tests for the InfluxRepository implementation.
"""

import pytest
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch
from influxdb_client.client.query_api import QueryApi
from influxdb_client.rest import ApiException

from src.adapters.repositories.influx_repository import InfluxRepository
from src.adapters.repositories.polling_subscription import PollingSubscription
from src.core.ports.exceptions import ExternalServiceError, RepositoryError


def _table(*records):
    table = MagicMock()
    table.records = list(records)
    return table


def _pivoted_record(values, time=None):
    record = MagicMock()
    record.values = values
    record.get_time.return_value = time
    return record


def _value_record(value):
    record = MagicMock()
    record.get_value.return_value = value
    return record


class TestInfluxRepository:
    """Test cases for the InfluxRepository."""

    @pytest.fixture
    def mock_influx_client(self):
        """Mock InfluxDB client."""
        with patch('src.adapters.repositories.influx_repository.InfluxDBClient') as mock_client:
            mock_instance = MagicMock()
            mock_client.return_value = mock_instance

            mock_query_api = MagicMock(spec=QueryApi)
            mock_instance.query_api.return_value = mock_query_api

            yield mock_instance

    @pytest.fixture
    def repository(self, mock_influx_client):
        """Create repository instance with mocked client."""
        return InfluxRepository(
            url="http://localhost:8086",
            token="test-token",
            bucket="test-bucket",
            org="test-org"
        )

    def test_repository_initialization(self, repository):
        """Test repository initialization."""
        assert repository.url == "http://localhost:8086"
        assert repository.token == "test-token"
        assert repository.bucket == "test-bucket"
        assert repository.org == "test-org"
        assert repository.measurement_name == "air_quality"
        assert repository.device_name is None
        assert repository.data_path == "air_quality"
        assert hasattr(repository, 'query_api')

    def test_data_path_with_device(self, mock_influx_client):
        repo = InfluxRepository(
            url="http://localhost:8086",
            token="t",
            bucket="b",
            org="o",
            device_name="sensor-01"
        )

        assert repo.data_path == "air_quality/sensor-01"

    @pytest.mark.asyncio
    async def test_fetch_latest_success(self, repository):
        """Test successful retrieval of the newest reading."""
        record = _pivoted_record(
            {
                "device_name": "sensor-01",
                "co2": 650.0,
                "tvoc": 120.0,
                "temperature": 22.3,
                "humidity": 48.0,
                "pressure": 1012.4,
                "altitude": 80.0
            },
            time=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
        )
        repository.query_api.query.return_value = [_table(record)]

        result = await repository.fetch_latest()

        assert result.is_success
        measurement = result.measurement
        assert measurement.device_name == "sensor-01"
        assert measurement.timestamp == "2024-05-01T12:00:00Z"
        assert measurement.co2 == 650
        assert measurement.tvoc == 120
        assert measurement.temperature == 22.3
        assert measurement.pressure == 1012.4

    @pytest.mark.asyncio
    async def test_fetch_latest_partial_record(self, repository):
        """Test that missing fields fall back to defaults."""
        record = _pivoted_record({"co2": 500}, time=None)
        repository.query_api.query.return_value = [_table(record)]

        result = await repository.fetch_latest()

        assert result.is_success
        assert result.measurement.co2 == 500
        assert result.measurement.tvoc == 0
        assert result.measurement.timestamp == ""

    @pytest.mark.asyncio
    async def test_fetch_latest_empty(self, repository):
        """Test that no rows yield an empty result."""
        repository.query_api.query.return_value = []

        result = await repository.fetch_latest()

        assert result.is_empty
        assert result.measurement is None

    @pytest.mark.asyncio
    async def test_fetch_latest_query_error(self, repository):
        """Test that query errors become failure results."""
        repository.query_api.query.side_effect = Exception("connection refused")

        result = await repository.fetch_latest()

        assert result.is_failure
        assert result.reason == "connection refused"

    @pytest.mark.asyncio
    async def test_fetch_latest_parse_error(self, repository):
        """Test that malformed rows become failure results."""
        record = _pivoted_record({"co2": "not-a-number"})
        repository.query_api.query.return_value = [_table(record)]

        result = await repository.fetch_latest()

        assert result.is_failure
        assert result.reason.startswith("Failed to parse measurement:")

    @pytest.mark.asyncio
    async def test_fetch_latest_infinite_value(self, repository):
        """Test that an infinite reading becomes a failure result instead of raising."""
        record = _pivoted_record({"co2": float("inf")})
        repository.query_api.query.return_value = [_table(record)]

        result = await repository.fetch_latest()

        assert result.is_failure
        assert result.reason.startswith("Failed to parse measurement:")

    def test_build_latest_query(self, repository):
        """Test Flux query building."""
        query = repository._build_latest_query()

        assert 'from(bucket: "test-bucket")' in query
        assert 'range(start: -10m)' in query
        assert 'r["_measurement"] == "air_quality"' in query
        assert 'device_name' not in query
        assert 'pivot(rowKey: ["_time"]' in query
        assert 'sort(columns: ["_time"], desc: true)' in query
        assert query.endswith('|> limit(n: 1)')

    def test_build_latest_query_with_device(self, mock_influx_client):
        repo = InfluxRepository(
            url="http://localhost:8086",
            token="t",
            bucket="b",
            org="o",
            device_name="sensor-01",
            lookback="-1h"
        )

        query = repo._build_latest_query()

        assert 'r["device_name"] == "sensor-01"' in query
        assert 'range(start: -1h)' in query

    def test_subscribe_returns_polling_subscription(self, repository):
        async def callback(result):
            pass

        subscription = repository.subscribe(callback)

        assert isinstance(subscription, PollingSubscription)
        assert subscription.interval == 5.0
        assert subscription.name == "air_quality"
        assert not subscription.is_active

    @pytest.mark.asyncio
    async def test_list_paths(self, repository):
        """Test listing measurements and their devices."""
        repository.query_api.query.side_effect = [
            [_table(_value_record("air_quality"))],
            [_table(_value_record("sensor-01"), _value_record("sensor-02"))]
        ]

        paths = await repository.list_paths()

        assert paths == ["air_quality", "air_quality/sensor-01", "air_quality/sensor-02"]

    @pytest.mark.asyncio
    async def test_list_paths_error(self, repository):
        """Test that listing errors are wrapped in RepositoryError."""
        repository.query_api.query.side_effect = Exception("unauthorized")

        with pytest.raises(RepositoryError) as exc_info:
            await repository.list_paths()

        assert exc_info.value.details == "unauthorized"

    @pytest.mark.asyncio
    async def test_list_paths_http_error(self, repository):
        """Test that HTTP errors from InfluxDB surface as ExternalServiceError."""
        repository.query_api.query.side_effect = ApiException(status=401, reason="Unauthorized")

        with pytest.raises(ExternalServiceError) as exc_info:
            await repository.list_paths()

        assert exc_info.value.service_name == "InfluxDB"
        assert exc_info.value.status_code == 401
        assert isinstance(exc_info.value, RepositoryError)

    @pytest.mark.asyncio
    async def test_health_check_success(self, repository):
        """Test successful health check."""
        repository.query_api.query.return_value = []

        assert await repository.health_check() is True

    @pytest.mark.asyncio
    async def test_health_check_failure(self, repository):
        """Test failed health check."""
        repository.query_api.query.side_effect = Exception("Connection failed")

        assert await repository.health_check() is False

    def test_close(self, repository, mock_influx_client):
        repository.close()

        mock_influx_client.close.assert_called_once()
