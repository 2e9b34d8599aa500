"""
Sliding-window trend analysis over recent air quality measurements.
Produces the short natural-language commentary shown next to the live readings.
"""

import logging
from collections import deque
from typing import Deque, Optional, Tuple

from ..domain.measurement import Measurement
from ..domain.prediction import Prediction, RISING, FALLING, STABLE


INSUFFICIENT_DATA_SUMMARY = "Not enough data yet to make a prediction."

# Changes smaller than these are treated as sensor noise
CO2_NOISE_PPM = 50
TVOC_NOISE_PPB = 50
TEMPERATURE_NOISE_C = 0.5
HUMIDITY_NOISE_PCT = 2.0

LONG_TERM_MIN_SIZE = 5
LONG_TERM_CHANGE_PCT = 5.0


class TrendAnalyzer:
    """
    Keeps a bounded FIFO history of measurements and derives a Prediction from it.

    Not safe for concurrent mutation; callers serialise access.
    """

    def __init__(self, capacity: int = 10):
        """
        Args:
            capacity: Maximum number of measurements kept in the window
        """
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._capacity = capacity
        self._history: Deque[Measurement] = deque(maxlen=capacity)
        self._revision = 0
        self.logger = logging.getLogger(__name__)

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return len(self._history)

    @property
    def history(self) -> Tuple[Measurement, ...]:
        """Snapshot of the window, oldest first."""
        return tuple(self._history)

    @property
    def revision(self) -> int:
        """Counter bumped on every change to the window."""
        return self._revision

    def add_measurement(self, measurement: Measurement) -> None:
        """Append a measurement, evicting the oldest one once the window is full."""
        # deque(maxlen) drops index 0 when the append overflows the capacity
        self._history.append(measurement)
        self._revision += 1
        self.logger.debug(f"Added new measurement. History size: {len(self._history)}")

    def clear_history(self) -> None:
        """Discard all accumulated trend context."""
        self._history.clear()
        self._revision += 1
        self.logger.debug("History cleared")

    def get_prediction(self) -> Prediction:
        """
        Build a prediction from the current window.

        Returns:
            A fixed "insufficient data" prediction for an empty window, a status
            report for a single measurement, otherwise a trend report.
        """
        if not self._history:
            return Prediction(INSUFFICIENT_DATA_SUMMARY)

        if len(self._history) < 2:
            return self._status_report(self._history[-1])

        return self._trend_report()

    def _status_report(self, data: Measurement) -> Prediction:
        co2_status = _tier(data.co2, 800, 1500, ("good", "acceptable", "high"))
        tvoc_status = _tier(data.tvoc, 500, 1500, ("low", "medium", "high"))
        temp_status = _tier(data.temperature, 18, 24, ("cool", "mild", "warm"))
        hum_status = _tier(data.humidity, 30, 60, ("dry", "comfortable", "humid"))

        summary = f"Current air quality: CO2 level {co2_status}, VOC level {tvoc_status}."
        details = (
            f"Temperature is {temp_status} ({data.temperature:.1f}°C)"
            f" and humidity is {hum_status} ({data.humidity:.1f}%)."
            f" CO2: {data.co2:.1f} ppm, TVOC: {data.tvoc:.1f} ppb."
            f" Pressure: {data.pressure:.1f} hPa."
        )
        return Prediction(summary, details)

    def _trend_report(self) -> Prediction:
        latest = self._history[-1]
        previous = self._history[-2]

        co2_change = latest.co2 - previous.co2
        tvoc_change = latest.tvoc - previous.tvoc
        temp_change = latest.temperature - previous.temperature
        hum_change = latest.humidity - previous.humidity

        co2_trend = classify_change(co2_change, CO2_NOISE_PPM)
        tvoc_trend = classify_change(tvoc_change, TVOC_NOISE_PPB)
        temp_trend = classify_change(temp_change, TEMPERATURE_NOISE_C)
        hum_trend = classify_change(hum_change, HUMIDITY_NOISE_PCT)

        summary = f"CO2 level is {co2_trend} and TVOC level is {tvoc_trend}."
        details = (
            f"Current CO2: {latest.co2} ppm ({_signed(co2_change)} ppm), "
            f"TVOC: {latest.tvoc} ppb ({_signed(tvoc_change)} ppb). "
            f"Temperature {temp_trend} ({latest.temperature:.1f}°C), "
            f"humidity {hum_trend} ({latest.humidity:.1f}%)."
        )

        long_term = self._long_term_analysis()
        if long_term:
            details = f"{details} {long_term}"

        return Prediction(summary, details)

    def _long_term_analysis(self) -> Optional[str]:
        """Percentage CO2 drift between the oldest and newest entries of the window."""
        size = len(self._history)
        if size < LONG_TERM_MIN_SIZE:
            return None

        oldest = self._history[0]
        latest = self._history[-1]
        if oldest.co2 == 0:
            self.logger.debug("Skipping long-term analysis: oldest CO2 reading is zero")
            return None

        change_pct = (latest.co2 - oldest.co2) / oldest.co2 * 100
        if change_pct > LONG_TERM_CHANGE_PCT:
            label = "increase"
        elif change_pct < -LONG_TERM_CHANGE_PCT:
            label = "decrease"
        else:
            label = "change"

        return f"Over the last {size} measurements the CO2 level showed a {change_pct:.1f}% {label}."


def classify_change(delta: float, noise_threshold: float) -> str:
    """
    Classify a short-term delta as rising, falling or stable.

    A delta exactly equal to the threshold counts as a directional change.
    """
    if abs(delta) < noise_threshold:
        return STABLE
    return RISING if delta > 0 else FALLING


def _tier(value: float, low: float, high: float, labels: Tuple[str, str, str]) -> str:
    if value < low:
        return labels[0]
    if value < high:
        return labels[1]
    return labels[2]


def _signed(delta: int) -> str:
    return f"+{delta}" if delta > 0 else str(delta)
