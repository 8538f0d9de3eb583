"""Core domain models for page performance telemetry."""

import math
from dataclasses import dataclass, field
from enum import Enum
from collections.abc import Mapping
from typing import Any

from vitalspy.core.errors import ConfigurationError

# Placeholder rendered for a missing element or number.
MISSING_PLACEHOLDER = "N/A"
# Placeholder rendered when an element exists but its markup can't be read.
UNREADABLE_PLACEHOLDER = "[unreadable]"

DEFAULT_ATTRIBUTION_LIMIT = 100


class SignalKind(str, Enum):
    """Tracked performance signals."""

    LCP = "LCP"
    CLS = "CLS"
    INP = "INP"
    FCP = "FCP"
    TTFB = "TTFB"
    LONG_TASK = "LongTask"
    LOAF = "LoAF"

    @property
    def is_collection(self) -> bool:
        """True for signals that accumulate a sequence of samples."""
        return self in (SignalKind.LONG_TASK, SignalKind.LOAF)


class SignalChannel(str, Enum):
    """Observation channels an observation source can be subscribed to."""

    LONG_TASK = "longtask"
    LONG_ANIMATION_FRAME = "long-animation-frame"
    LAYOUT_SHIFT = "layout-shift"
    PAINT = "paint"
    FIRST_INPUT = "first-input"
    EVENT = "event"
    LARGEST_CONTENTFUL_PAINT = "largest-contentful-paint"
    NAVIGATION = "navigation"


class Verdict(str, Enum):
    """Categorical classification of a metric value."""

    GOOD = "Good"
    NEEDS_IMPROVEMENT = "NeedsImprovement"
    POOR = "Poor"


@dataclass(frozen=True)
class ElementRef:
    """Reference to the page element a sample is attributed to.

    Attributes:
        tag_name: Element tag name, if known.
        outer_html: Element markup. ``None`` when the host could not read it.
    """

    tag_name: str | None = None
    outer_html: str | None = None

    def describe(self, limit: int = DEFAULT_ATTRIBUTION_LIMIT) -> str:
        """Render the element for an emitted message, truncated to ``limit``."""
        if not isinstance(self.outer_html, str):
            return UNREADABLE_PLACEHOLDER
        return self.outer_html[:limit]


def describe_element(
    element: ElementRef | None, limit: int = DEFAULT_ATTRIBUTION_LIMIT
) -> str:
    """Render an optional element reference, using ``N/A`` when absent."""
    if element is None:
        return MISSING_PLACEHOLDER
    return element.describe(limit)


@dataclass(frozen=True)
class Attribution:
    """What a sample is attributed to.

    Attributes:
        element: Element the sample points at (LCP element, event target).
        had_recent_input: Layout shift happened right after user input.
        sources: Elements that moved during a layout shift.
    """

    element: ElementRef | None = None
    had_recent_input: bool = False
    sources: tuple[ElementRef, ...] = ()


@dataclass(frozen=True)
class MetricSample:
    """A single observation of one signal.

    Attributes:
        signal: Which signal the sample belongs to.
        value: Raw value (milliseconds, or unitless for CLS).
        captured_at: Monotonic capture time in milliseconds.
        attribution: Optional attribution details.
    """

    signal: SignalKind
    value: float
    captured_at: float
    attribution: Attribution | None = None


@dataclass(frozen=True)
class AccumulatorState:
    """Read-only snapshot of one accumulator.

    Attributes:
        kind: Signal the accumulator tracks.
        current_value: Running value, or the finalized value once frozen.
        finalized: Whether the value has been frozen.
        raw_entries: Every sample accepted before finalization, in order.
    """

    kind: SignalKind
    current_value: float | tuple[float, ...]
    finalized: bool
    raw_entries: tuple[MetricSample, ...] = ()


@dataclass(frozen=True)
class ThresholdSpec:
    """Verdict boundaries for one signal.

    Raises:
        ConfigurationError: If a bound is not finite or ``good`` is not
            strictly below ``needs_improvement``.
    """

    signal: SignalKind
    good: float
    needs_improvement: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.good) and math.isfinite(self.needs_improvement)):
            raise ConfigurationError(
                f"{self.signal.value}: thresholds must be finite numbers"
            )
        if self.good >= self.needs_improvement:
            raise ConfigurationError(
                f"{self.signal.value}: good ({self.good}) must be less than "
                f"needs_improvement ({self.needs_improvement})"
            )


@dataclass(frozen=True)
class Weight:
    """Contribution of one signal to the composite score.

    Raises:
        ConfigurationError: If ``weight`` is outside ``(0, 1]``.
    """

    signal: SignalKind
    weight: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.weight) and 0 < self.weight <= 1):
            raise ConfigurationError(
                f"{self.signal.value}: weight must be in (0, 1], got {self.weight}"
            )


@dataclass(frozen=True)
class TimelineEvent:
    """A logged diagnostic event.

    Attributes:
        category: Event category (e.g., "Long Task", "CLS").
        messages: Message lines, in emission order.
        captured_at: Monotonic capture time in milliseconds. Ordering key.
        logged_at: ISO-8601 wall clock timestamp, for display only.
    """

    category: str
    messages: tuple[str, ...]
    captured_at: float
    logged_at: str


@dataclass(frozen=True)
class Report:
    """Point-in-time snapshot of a monitoring session.

    Attributes:
        metrics: Read-only value per signal (scalar, or tuple for collection
            signals).
        verdicts: Read-only verdict per signal that has a threshold configured.
        composite_score: Weighted health score between 0 and 100.
        issues: Every logged message as "<category>: <message>".
        timeline: Logged events in append order.
        environment: Opaque descriptor supplied by the caller.
    """

    metrics: Mapping[SignalKind, float | tuple[float, ...]]
    verdicts: Mapping[SignalKind, Verdict]
    composite_score: int
    issues: tuple[str, ...] = ()
    timeline: tuple[TimelineEvent, ...] = ()
    environment: Any = field(default=None)
