"""
InfluxDB adapter for air quality data access.
This implements the MeasurementRepository port using InfluxDB.
"""

from typing import Any, Dict, List, Optional
from datetime import datetime
import logging

from influxdb_client import InfluxDBClient
from influxdb_client.client.query_api import QueryApi
from influxdb_client.rest import ApiException

from ...core.ports.measurement_repository import MeasurementRepository, ResultCallback
from ...core.ports.subscription import Subscription
from ...core.ports.exceptions import ExternalServiceError, MeasurementParseError, RepositoryError
from ...core.domain.measurement import Measurement, RECORD_FIELDS
from ...core.domain.results import FetchResult
from .polling_subscription import PollingSubscription


# InfluxDB field name -> Measurement attribute
INFLUX_FIELDS = {
    "co2": "co2",
    "tvoc": "tvoc",
    "temperature": "temperature",
    "humidity": "humidity",
    "pressure": "pressure",
    "altitude": "altitude"
}

DEVICE_TAG = "device_name"


class InfluxRepository(MeasurementRepository):
    """
    InfluxDB adapter that implements the MeasurementRepository port.
    Reads the most recent air quality reading and polls for changes.
    """

    def __init__(
        self,
        url: str,
        token: str,
        bucket: str,
        org: str,
        measurement_name: str = "air_quality",
        device_name: Optional[str] = None,
        lookback: str = "-10m",
        poll_interval: float = 5.0
    ):
        """
        Initialize the InfluxDB repository.

        Args:
            url: InfluxDB server URL (e.g., 'http://localhost:8086')
            token: InfluxDB authentication token
            bucket: Bucket name for data storage
            org: Organization name
            measurement_name: InfluxDB measurement holding the readings
            device_name: Only follow this device when set
            lookback: Flux duration for the latest-reading range (e.g. '-10m')
            poll_interval: Seconds between polls for subscriptions
        """
        self.url = url
        self.token = token
        self.bucket = bucket
        self.org = org
        self.measurement_name = measurement_name
        self.device_name = device_name
        self.lookback = lookback
        self.poll_interval = poll_interval
        self.logger = logging.getLogger(__name__)

        self.logger.info(f"Repository initialized with URL: {url}")
        self.logger.info(f"Reference path: {self.data_path}")

        # Initialize client and APIs
        self.client = InfluxDBClient(url=url, token=token, org=org)
        self.query_api: QueryApi = self.client.query_api()

    @property
    def data_path(self) -> str:
        """Human-readable path of the followed data, e.g. 'air_quality/sensor-1'."""
        if self.device_name:
            return f"{self.measurement_name}/{self.device_name}"
        return self.measurement_name

    async def fetch_latest(self) -> FetchResult:
        """
        Fetch the most recent reading within the lookback window.

        Returns:
            FetchResult describing the outcome; never raises for data errors
        """
        try:
            flux_query = self._build_latest_query()
            self.logger.debug(f"Executing Flux query: {flux_query}")
            result = self.query_api.query(flux_query)
        except Exception as e:
            self.logger.error(f"Error fetching data from InfluxDB: {e}")
            return FetchResult.failure(str(e))

        records = self._extract_records(result)
        if not records:
            self.logger.info(f"No data at '{self.data_path}' in the last {self.lookback.lstrip('-')}")
            return FetchResult.empty()

        try:
            measurement = Measurement.from_record(records[0])
        except MeasurementParseError as e:
            self.logger.error(f"Error parsing data: {e.message}")
            return FetchResult.failure(e.message)

        self.logger.debug(f"Data fetched successfully: {measurement}")
        return FetchResult.success(measurement)

    def subscribe(self, callback: ResultCallback) -> Subscription:
        """Create a polling subscription over fetch_latest."""
        return PollingSubscription(
            fetch=self.fetch_latest,
            callback=callback,
            interval=self.poll_interval,
            name=self.data_path
        )

    async def list_paths(self) -> List[str]:
        """
        List measurements in the bucket and the devices reporting into each.

        Returns:
            Paths such as ['air_quality', 'air_quality/sensor-1']

        Raises:
            ExternalServiceError: If InfluxDB answers with an HTTP error
            RepositoryError: If data access fails otherwise
        """
        paths = []
        try:
            measurements = self._query_values(
                f'import "influxdata/influxdb/schema"\n'
                f'schema.measurements(bucket: "{self.bucket}")'
            )
            for measurement in measurements:
                paths.append(measurement)
                devices = self._query_values(
                    f'import "influxdata/influxdb/schema"\n'
                    f'schema.measurementTagValues(bucket: "{self.bucket}", '
                    f'measurement: "{measurement}", tag: "{DEVICE_TAG}")'
                )
                paths.extend(f"{measurement}/{device}" for device in devices)

        except ApiException as e:
            self.logger.error(f"InfluxDB rejected schema query: {e.status} {e.reason}")
            raise ExternalServiceError("InfluxDB", e.status, e.body)
        except Exception as e:
            self.logger.error(f"Error checking paths: {e}")
            raise RepositoryError("Failed to list data paths from InfluxDB", e)

        self.logger.info(f"Available paths: {', '.join(paths)}")
        return paths

    async def health_check(self) -> bool:
        """
        Check if the InfluxDB connection is available and healthy.

        Returns:
            True if healthy, False otherwise
        """
        try:
            health_query = f'''
                from(bucket: "{self.bucket}")
                |> range(start: -1m)
                |> limit(n: 1)
            '''

            self.query_api.query(health_query)
            return True

        except Exception as e:
            self.logger.warning(f"InfluxDB health check failed: {e}")
            return False

    def close(self):
        """Close the InfluxDB client connection."""
        if self.client:
            self.client.close()
            self.logger.info("InfluxDB client connection closed")

    def _build_latest_query(self) -> str:
        """Build a Flux query returning the newest pivoted reading."""
        query_parts = []

        query_parts.append(f'from(bucket: "{self.bucket}")')
        query_parts.append(f'|> range(start: {self.lookback})')
        query_parts.append(f'|> filter(fn: (r) => r["_measurement"] == "{self.measurement_name}")')

        if self.device_name:
            query_parts.append(f'|> filter(fn: (r) => r["{DEVICE_TAG}"] == "{self.device_name}")')

        # One row per timestamp with a column per field
        query_parts.append('|> pivot(rowKey: ["_time"], columnKey: ["_field"], valueColumn: "_value")')
        query_parts.append('|> group()')
        query_parts.append('|> sort(columns: ["_time"], desc: true)')
        query_parts.append('|> limit(n: 1)')

        return " ".join(query_parts)

    def _extract_records(self, result) -> List[Dict[str, Any]]:
        """
        Convert pivoted query results into raw records keyed by the wire names.

        Args:
            result: InfluxDB query result (iterable of tables)

        Returns:
            Raw records, newest first
        """
        records = []
        for table in result:
            for record in table.records:
                values = record.values
                raw = {
                    RECORD_FIELDS["device_name"]: values.get(DEVICE_TAG, ""),
                    RECORD_FIELDS["timestamp"]: self._format_time(record.get_time()),
                }
                for field, attribute in INFLUX_FIELDS.items():
                    if values.get(field) is not None:
                        raw[RECORD_FIELDS[attribute]] = values[field]
                records.append(raw)
        return records

    def _query_values(self, flux_query: str) -> List[str]:
        result = self.query_api.query(flux_query)
        values = []
        for table in result:
            for record in table.records:
                value = record.get_value()
                if value is not None:
                    values.append(str(value))
        return values

    def _format_time(self, timestamp: Optional[datetime]) -> str:
        if timestamp is None:
            return ""
        return timestamp.isoformat().replace('+00:00', 'Z')
