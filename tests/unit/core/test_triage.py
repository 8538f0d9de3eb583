"""Tests for long task triage."""

import math

import pytest

from vitalspy.core.errors import ConfigurationError
from vitalspy.core.triage import LongTaskTriage, Severity


class TestLongTaskTriage:
    """Tests for LongTaskTriage."""

    @pytest.mark.core
    @pytest.mark.parametrize(
        ("duration", "expected"),
        [
            (None, None),
            (60, None),
            (125, None),
            (126, Severity.MINOR),
            (200, Severity.MINOR),
            (201, Severity.MODERATE),
            (300, Severity.MODERATE),
            (350, Severity.SEVERE),
        ],
    )
    def test_default_bounds(self, duration: float | None, expected: Severity | None) -> None:
        """Tasks above 125ms are reported; 200 and 300 split the severities."""
        assert LongTaskTriage().classify(duration) is expected

    @pytest.mark.core
    def test_custom_bounds(self) -> None:
        """Bounds can be tightened."""
        triage = LongTaskTriage(triage_ms=50, minor_ms=100, moderate_ms=150)
        assert triage.classify(60) is Severity.MINOR
        assert triage.classify(151) is Severity.SEVERE

    @pytest.mark.core
    @pytest.mark.parametrize(
        "bounds",
        [
            (200, 125, 300),
            (125, 125, 300),
            (-1, 200, 300),
            (125, 200, math.inf),
        ],
    )
    def test_invalid_bounds(self, bounds: tuple[float, float, float]) -> None:
        """Bounds must be finite, non-negative and strictly ascending."""
        with pytest.raises(ConfigurationError):
            LongTaskTriage(*bounds)
