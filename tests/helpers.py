"""Shared helpers for the test suite."""

from dataclasses import dataclass

FIXED_WALL_CLOCK = "2024-05-01T12:00:00.000+00:00"


@dataclass
class FakeClock:
    """Manually advanced monotonic clock (milliseconds)."""

    now: float = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> float:
        self.now += ms
        return self.now


def fixed_wall_clock() -> str:
    return FIXED_WALL_CLOCK
