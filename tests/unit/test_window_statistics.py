"""
Unit tests for window statistics.
"""

import pytest

from src.core.services.window_statistics import METRIC_UNITS, WindowStatistics
from tests.unit.conftest import make_measurement


class TestWindowStatistics:
    """Test cases for WindowStatistics."""

    def test_measurements_to_dataframe(self, sample_measurements):
        """Test conversion of measurements to a DataFrame."""
        df = WindowStatistics.measurements_to_dataframe(sample_measurements)

        assert len(df) == 5
        assert list(df["co2"]) == [400, 410, 420, 430, 440]
        for metric in METRIC_UNITS:
            assert metric in df.columns

    def test_empty_window(self):
        """Test that an empty window yields no statistics."""
        assert WindowStatistics.summarize([]) == {}

    def test_summarize(self, sample_measurements):
        """Test statistics over a short series."""
        stats = WindowStatistics.summarize(sample_measurements)

        co2 = stats["co2"]
        assert co2.unit == "ppm"
        assert co2.count == 5
        assert co2.mean == pytest.approx(420.0)
        assert co2.min == 400.0
        assert co2.max == 440.0
        # Sample standard deviation of 400..440 step 10
        assert co2.std_dev == pytest.approx(15.8114, rel=1e-4)

        temperature = stats["temperature"]
        assert temperature.unit == "°C"
        assert temperature.std_dev == pytest.approx(0.0)

    def test_single_reading_has_zero_spread(self):
        """Test that one reading gives a zero standard deviation instead of NaN."""
        stats = WindowStatistics.summarize([make_measurement(co2=800)])

        assert stats["co2"].std_dev == 0.0
        assert stats["co2"].mean == 800.0
        assert stats["co2"].count == 1

    def test_all_metrics_present(self, sample_measurement):
        stats = WindowStatistics.summarize([sample_measurement])

        assert set(stats) == set(METRIC_UNITS)
        assert all(stats[m].metric_name == m for m in stats)
