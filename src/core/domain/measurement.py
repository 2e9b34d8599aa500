import math
from dataclasses import dataclass
from typing import Any, Dict, Mapping

from ..ports.exceptions import MeasurementParseError


# Wire keys used by the realtime database records
RECORD_FIELDS = {
    "device_name": "deviceName",
    "timestamp": "time",
    "temperature": "tempValue",
    "humidity": "humValue",
    "co2": "co2Value",
    "tvoc": "tvocValue",
    "pressure": "pressureValue",
    "altitude": "altitudeValue",
}


@dataclass(frozen=True)
class Measurement:
    """
    Domain entity representing a single air quality reading.
    This is the core data structure fed to the trend analyzer and alerting.
    """
    device_name: str = ""
    timestamp: str = ""
    temperature: float = 0.0
    humidity: float = 0.0
    co2: int = 0
    tvoc: int = 0
    pressure: float = 0.0
    altitude: float = 0.0

    def __post_init__(self):
        """Validate measurement data after initialization."""
        if self.co2 < 0:
            raise ValueError("co2 must be non-negative")

        if self.tvoc < 0:
            raise ValueError("tvoc must be non-negative")

        if not 0 <= self.humidity <= 100:
            raise ValueError("humidity must be between 0 and 100")

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Measurement":
        """
        Build a Measurement from a raw database record.

        Missing keys fall back to empty/zero defaults and unknown keys are
        ignored, mirroring how the device firmware writes partial records.

        Args:
            record: Mapping keyed by the wire names (co2Value, tempValue, ...)

        Returns:
            Parsed Measurement

        Raises:
            MeasurementParseError: If the record is not a mapping or a value
                cannot be converted to the expected type
        """
        if not isinstance(record, Mapping):
            raise MeasurementParseError(
                f"expected a mapping, got {type(record).__name__}", record
            )

        try:
            return cls(
                device_name=_as_str(record.get(RECORD_FIELDS["device_name"])),
                timestamp=_as_str(record.get(RECORD_FIELDS["timestamp"])),
                temperature=_as_float(record.get(RECORD_FIELDS["temperature"])),
                humidity=_as_float(record.get(RECORD_FIELDS["humidity"])),
                co2=_as_int(record.get(RECORD_FIELDS["co2"])),
                tvoc=_as_int(record.get(RECORD_FIELDS["tvoc"])),
                pressure=_as_float(record.get(RECORD_FIELDS["pressure"])),
                altitude=_as_float(record.get(RECORD_FIELDS["altitude"])),
            )
        except (TypeError, ValueError, OverflowError) as e:
            raise MeasurementParseError(str(e), record) from e

    def to_record(self) -> Dict[str, Any]:
        """Serialize back to the wire shape used by the database."""
        return {wire: getattr(self, attr) for attr, wire in RECORD_FIELDS.items()}

    @property
    def has_device(self) -> bool:
        """Check if the reading carries a device identifier."""
        return bool(self.device_name)


def _as_str(value: Any) -> str:
    return "" if value is None else str(value)


def _as_float(value: Any) -> float:
    if value is None:
        return 0.0
    if isinstance(value, bool):
        raise TypeError(f"invalid numeric value: {value!r}")
    number = float(value)
    if not math.isfinite(number):
        raise ValueError(f"non-finite value: {value!r}")
    return number


def _as_int(value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise TypeError(f"invalid integer value: {value!r}")
    # Devices occasionally report whole numbers as floats (e.g. 412.0)
    return int(_as_float(value))
