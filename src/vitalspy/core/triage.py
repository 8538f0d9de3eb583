"""Long task triage."""

import math
from dataclasses import dataclass
from enum import Enum

from vitalspy.core.errors import ConfigurationError


class Severity(str, Enum):
    """Triage bucket of a long task."""

    MINOR = "Minor"
    MODERATE = "Moderate"
    SEVERE = "Severe"


@dataclass(frozen=True)
class LongTaskTriage:
    """Bounds used to decide whether, and how loudly, to report a long task.

    Tasks at or below ``triage_ms`` are stored but not reported. Reported
    tasks are Minor up to ``minor_ms``, Moderate up to ``moderate_ms`` and
    Severe above it.

    Raises:
        ConfigurationError: If the bounds are not finite, non-negative and
            strictly ascending.
    """

    triage_ms: float = 125
    minor_ms: float = 200
    moderate_ms: float = 300

    def __post_init__(self) -> None:
        bounds = (self.triage_ms, self.minor_ms, self.moderate_ms)
        if not all(math.isfinite(bound) and bound >= 0 for bound in bounds):
            raise ConfigurationError("long task bounds must be finite and >= 0")
        if not self.triage_ms < self.minor_ms < self.moderate_ms:
            raise ConfigurationError(
                "long task bounds must be ascending: "
                f"{self.triage_ms} < {self.minor_ms} < {self.moderate_ms}"
            )

    def classify(self, duration: float | None) -> Severity | None:
        """Severity of a task, or None when it is not worth reporting."""
        if duration is None or duration <= self.triage_ms:
            return None
        if duration <= self.minor_ms:
            return Severity.MINOR
        if duration <= self.moderate_ms:
            return Severity.MODERATE
        return Severity.SEVERE
