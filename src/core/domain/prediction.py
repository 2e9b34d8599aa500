from dataclasses import dataclass


RISING = "rising"
FALLING = "falling"
STABLE = "stable"


@dataclass(frozen=True)
class Prediction:
    """Value object holding the trend commentary shown to users."""
    summary: str
    details: str = ""
