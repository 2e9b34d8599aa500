from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .measurement import Measurement


class FetchStatus(str, Enum):
    SUCCESS = "success"
    EMPTY = "empty"
    FAILURE = "failure"


@dataclass(frozen=True)
class FetchResult:
    """
    Tagged result returned by the data-acquisition layer.
    Lets callers tell "no data yet" apart from "fetch failed" without exceptions.
    """
    status: FetchStatus
    measurement: Optional[Measurement] = None
    reason: Optional[str] = None

    @classmethod
    def success(cls, measurement: Measurement) -> "FetchResult":
        return cls(status=FetchStatus.SUCCESS, measurement=measurement)

    @classmethod
    def empty(cls) -> "FetchResult":
        return cls(status=FetchStatus.EMPTY)

    @classmethod
    def failure(cls, reason: str) -> "FetchResult":
        return cls(status=FetchStatus.FAILURE, reason=reason)

    @property
    def is_success(self) -> bool:
        return self.status == FetchStatus.SUCCESS

    @property
    def is_empty(self) -> bool:
        return self.status == FetchStatus.EMPTY

    @property
    def is_failure(self) -> bool:
        return self.status == FetchStatus.FAILURE
