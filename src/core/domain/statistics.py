from dataclasses import dataclass


@dataclass(frozen=True)
class MetricStatistics:
    """Value object with descriptive statistics of one metric over the history window."""
    metric_name: str
    unit: str
    mean: float
    min: float
    max: float
    std_dev: float
    count: int
