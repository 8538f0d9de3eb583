"""Threshold classification and composite scoring."""

import math
from collections.abc import Iterable, Mapping
from typing import Any

from vitalspy.core.errors import ConfigurationError
from vitalspy.core.models import SignalKind, ThresholdSpec, Verdict, Weight

VERDICT_POINTS = {
    Verdict.GOOD: 100,
    Verdict.NEEDS_IMPROVEMENT: 60,
    Verdict.POOR: 20,
}

# Points used for a weighted signal with no (or an unknown) verdict.
DEFAULT_POINTS = 50

DEFAULT_THRESHOLDS = (
    ThresholdSpec(SignalKind.LCP, good=2500, needs_improvement=4000),
    ThresholdSpec(SignalKind.CLS, good=0.1, needs_improvement=0.25),
    ThresholdSpec(SignalKind.TTFB, good=800, needs_improvement=1800),
    ThresholdSpec(SignalKind.INP, good=200, needs_improvement=500),
    ThresholdSpec(SignalKind.FCP, good=1800, needs_improvement=3000),
    ThresholdSpec(SignalKind.LONG_TASK, good=150, needs_improvement=300),
)

DEFAULT_WEIGHTS = (
    Weight(SignalKind.LCP, 0.25),
    Weight(SignalKind.CLS, 0.2),
    Weight(SignalKind.TTFB, 0.2),
    Weight(SignalKind.INP, 0.2),
    Weight(SignalKind.FCP, 0.15),
)

_ALIASES = {
    "longtask": SignalKind.LONG_TASK,
    "longtasks": SignalKind.LONG_TASK,
    "long_task": SignalKind.LONG_TASK,
    "long_tasks": SignalKind.LONG_TASK,
    "loaf": SignalKind.LOAF,
}


def parse_signal(name: Any) -> SignalKind:
    """Resolve a configured signal name ("LCP", "LongTasks", ...).

    Raises:
        ConfigurationError: If the name is not a known signal.
    """
    if isinstance(name, SignalKind):
        return name
    text = str(name)
    for kind in SignalKind:
        if text == kind.value or text.upper() == kind.name:
            return kind
    try:
        return _ALIASES[text.lower()]
    except KeyError:
        raise ConfigurationError(f"unknown signal: {text!r}") from None


def classify(spec: ThresholdSpec, value: float) -> Verdict:
    """Classify ``value`` against a single threshold spec.

    ``value <= good`` is Good, ``value <= needs_improvement`` is
    NeedsImprovement, anything above (and NaN) is Poor.
    """
    if value <= spec.good:
        return Verdict.GOOD
    if value <= spec.needs_improvement:
        return Verdict.NEEDS_IMPROVEMENT
    return Verdict.POOR


def composite(
    verdicts: Mapping[SignalKind, Verdict],
    weights: Mapping[SignalKind, float],
) -> int:
    """Fold verdicts into a weighted score between 0 and 100.

    Only weighted signals contribute and weights are not renormalized. A
    weighted signal with a missing or unrecognized verdict scores 50.
    """
    total = 0.0
    for signal, weight in weights.items():
        verdict = verdicts.get(signal)
        points = VERDICT_POINTS.get(verdict, DEFAULT_POINTS)  # type: ignore[arg-type]
        total += points * weight
    if not math.isfinite(total):
        return 0
    # Round half up, like Math.round, rather than banker's rounding.
    return max(0, min(100, math.floor(total + 0.5)))


class ScoringTable:
    """Static threshold and weight configuration.

    Immutable after construction and safe to share between sessions and
    report builds.

    Raises:
        ConfigurationError: On invalid thresholds or weights, or when a
            signal is configured twice.
    """

    def __init__(
        self,
        thresholds: Iterable[ThresholdSpec] = DEFAULT_THRESHOLDS,
        weights: Iterable[Weight] = DEFAULT_WEIGHTS,
    ) -> None:
        self._thresholds: dict[SignalKind, ThresholdSpec] = {}
        for spec in thresholds:
            if spec.signal in self._thresholds:
                raise ConfigurationError(
                    f"{spec.signal.value}: threshold configured more than once"
                )
            self._thresholds[spec.signal] = spec
        self._weights: dict[SignalKind, float] = {}
        for weight in weights:
            if weight.signal in self._weights:
                raise ConfigurationError(
                    f"{weight.signal.value}: weight configured more than once"
                )
            self._weights[weight.signal] = weight.weight

    @classmethod
    def default(cls) -> "ScoringTable":
        """Table with the standard web-vitals thresholds and weights."""
        return cls()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "ScoringTable":
        """Build a table from ``{"thresholds": {...}, "weights": {...}}``.

        Missing sections fall back to the defaults. Threshold entries accept
        ``needsImprovement`` or ``needs_improvement``.

        Raises:
            ConfigurationError: On malformed sections or invalid values.
        """
        thresholds: Iterable[ThresholdSpec] = DEFAULT_THRESHOLDS
        weights: Iterable[Weight] = DEFAULT_WEIGHTS

        raw_thresholds = payload.get("thresholds")
        if raw_thresholds is not None:
            if not isinstance(raw_thresholds, Mapping):
                raise ConfigurationError("thresholds must be a table")
            thresholds = [
                _threshold_from_mapping(name, bounds)
                for name, bounds in raw_thresholds.items()
            ]

        raw_weights = payload.get("weights")
        if raw_weights is not None:
            if not isinstance(raw_weights, Mapping):
                raise ConfigurationError("weights must be a table")
            weights = [
                Weight(parse_signal(name), _as_float(name, value))
                for name, value in raw_weights.items()
            ]

        return cls(thresholds, weights)

    @property
    def weights(self) -> dict[SignalKind, float]:
        """Configured weight per signal (copy)."""
        return dict(self._weights)

    @property
    def thresholds(self) -> dict[SignalKind, ThresholdSpec]:
        """Configured threshold per signal (copy)."""
        return dict(self._thresholds)

    def has_threshold(self, signal: SignalKind) -> bool:
        """Whether ``signal`` can be classified."""
        return signal in self._thresholds

    def classify(self, signal: SignalKind, value: float) -> Verdict:
        """Classify ``value`` for ``signal``.

        Raises:
            KeyError: If ``signal`` has no configured threshold.
        """
        return classify(self._thresholds[signal], value)

    def composite(
        self,
        verdicts: Mapping[SignalKind, Verdict],
        weights: Mapping[SignalKind, float] | None = None,
    ) -> int:
        """Composite score of ``verdicts`` using this table's weights."""
        return composite(verdicts, self._weights if weights is None else weights)


def _as_float(name: Any, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(f"{name}: expected a number, got {value!r}")
    return float(value)


def _threshold_from_mapping(name: Any, bounds: Any) -> ThresholdSpec:
    if not isinstance(bounds, Mapping):
        raise ConfigurationError(f"{name}: threshold must be a table")
    good = bounds.get("good")
    needs_improvement = bounds.get("needsImprovement", bounds.get("needs_improvement"))
    if good is None or needs_improvement is None:
        raise ConfigurationError(f"{name}: both good and needsImprovement are required")
    return ThresholdSpec(
        parse_signal(name),
        good=_as_float(name, good),
        needs_improvement=_as_float(name, needs_improvement),
    )
