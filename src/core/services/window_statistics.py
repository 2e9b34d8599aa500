"""
Descriptive statistics over the trend analyzer's history window.
"""

import math
from typing import Dict, Iterable

import pandas as pd

from ..domain.measurement import Measurement
from ..domain.statistics import MetricStatistics


# Metric column -> unit
METRIC_UNITS = {
    "co2": "ppm",
    "tvoc": "ppb",
    "temperature": "°C",
    "humidity": "%",
    "pressure": "hPa",
    "altitude": "m"
}


class WindowStatistics:
    """Static helpers computing per-metric statistics with pandas."""

    @staticmethod
    def measurements_to_dataframe(measurements: Iterable[Measurement]) -> pd.DataFrame:
        """Convert measurements to a pandas DataFrame, one row per reading."""
        data = []
        for m in measurements:
            data.append({
                'device_name': m.device_name,
                'timestamp': m.timestamp,
                'co2': m.co2,
                'tvoc': m.tvoc,
                'temperature': m.temperature,
                'humidity': m.humidity,
                'pressure': m.pressure,
                'altitude': m.altitude
            })

        return pd.DataFrame(data, columns=['device_name', 'timestamp', *METRIC_UNITS.keys()])

    @staticmethod
    def summarize(measurements: Iterable[Measurement]) -> Dict[str, MetricStatistics]:
        """
        Calculate mean, min, max, sample standard deviation and count per metric.

        Args:
            measurements: Window contents, oldest first

        Returns:
            Mapping of metric name to statistics; empty when there is no data
        """
        df = WindowStatistics.measurements_to_dataframe(measurements)
        if df.empty:
            return {}

        results = {}
        for metric, unit in METRIC_UNITS.items():
            column = df[metric].astype(float)
            std_dev = column.std(ddof=1)

            results[metric] = MetricStatistics(
                metric_name=metric,
                unit=unit,
                mean=float(column.mean()),
                min=float(column.min()),
                max=float(column.max()),
                # A single reading has no spread
                std_dev=0.0 if math.isnan(std_dev) else float(std_dev),
                count=int(column.count())
            )

        return results
