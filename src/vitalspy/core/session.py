"""Monitoring session: the single owner of per-session state."""

import logging
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from vitalspy.core.accumulators import (
    Accumulator,
    CollectionAccumulator,
    LayoutShiftAccumulator,
    ScalarAccumulator,
    create_accumulators,
)
from vitalspy.core.errors import ConfigurationError
from vitalspy.core.models import (
    DEFAULT_ATTRIBUTION_LIMIT,
    SignalKind,
    TimelineEvent,
)
from vitalspy.core.ports import LogSinkPort
from vitalspy.core.scoring import ScoringTable
from vitalspy.core.timeline import TimelineLog
from vitalspy.core.triage import LongTaskTriage

logger = logging.getLogger(__name__)

DEFAULT_LABEL = "vitalspy"


def monotonic_ms() -> float:
    """Monotonic clock in milliseconds."""
    return time.perf_counter() * 1000


def wall_clock_iso() -> str:
    """Current UTC wall clock time as ISO-8601 with milliseconds."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds")


@dataclass(frozen=True)
class SessionOptions:
    """Tunables of a monitoring session.

    Attributes:
        label: Label shown in sink output, e.g. "[vitalspy] CLS at ...".
        long_tasks: Long task triage bounds.
        inp_alert_ms: Interactions slower than this are reported.
        fid_alert_ms: First input delays above this are reported.
        attribution_limit: Maximum characters of element markup per message.
        cls_source_limit: Layout shift sources kept per shift entry.
    """

    label: str = DEFAULT_LABEL
    long_tasks: LongTaskTriage = field(default_factory=LongTaskTriage)
    inp_alert_ms: float = 300
    fid_alert_ms: float = 1
    attribution_limit: int = DEFAULT_ATTRIBUTION_LIMIT
    cls_source_limit: int = 3

    def __post_init__(self) -> None:
        if self.attribution_limit < 0 or self.cls_source_limit < 0:
            raise ConfigurationError("attribution limits must be >= 0")
        if self.inp_alert_ms < 0 or self.fid_alert_ms < 0:
            raise ConfigurationError("alert thresholds must be >= 0")


class Session:
    """State of one monitoring session.

    A session owns its accumulators and timeline exclusively; every other
    component receives the session by reference. The scoring table is
    shared, read-only configuration.

    Args:
        scoring: Threshold and weight table.
        options: Session tunables.
        sink: Optional sink receiving every logged event.
        clock: Monotonic clock in milliseconds.
        wall_clock: Wall clock used for display timestamps.
    """

    def __init__(
        self,
        scoring: ScoringTable | None = None,
        options: SessionOptions | None = None,
        sink: LogSinkPort | None = None,
        clock: Callable[[], float] = monotonic_ms,
        wall_clock: Callable[[], str] = wall_clock_iso,
    ) -> None:
        self.scoring = scoring or ScoringTable.default()
        self.options = options or SessionOptions()
        self.sink = sink
        self.clock = clock
        self.wall_clock = wall_clock
        self.timeline = TimelineLog()
        self.accumulators: dict[SignalKind, Accumulator] = create_accumulators()

    def scalar(self, kind: SignalKind) -> ScalarAccumulator:
        """Scalar accumulator for ``kind``."""
        accumulator = self.accumulators[kind]
        if not isinstance(accumulator, ScalarAccumulator):
            raise TypeError(f"{kind.value} is not a scalar signal")
        return accumulator

    def collection(self, kind: SignalKind) -> CollectionAccumulator:
        """Collection accumulator for ``kind``."""
        accumulator = self.accumulators[kind]
        if not isinstance(accumulator, CollectionAccumulator):
            raise TypeError(f"{kind.value} is not a collection signal")
        return accumulator

    @property
    def layout_shift(self) -> LayoutShiftAccumulator:
        """The CLS accumulator."""
        accumulator = self.accumulators[SignalKind.CLS]
        if not isinstance(accumulator, LayoutShiftAccumulator):
            raise TypeError(f"{SignalKind.CLS.value} is not a layout shift signal")
        return accumulator

    def log(self, category: str, messages: Iterable[str]) -> TimelineEvent:
        """Record an event on the timeline and hand it to the sink.

        This is also the entry point for one-shot structural checks that
        report their findings into the session.

        Args:
            category: Event category (e.g., "DOM Issues").
            messages: Message lines.

        Returns:
            The recorded TimelineEvent.
        """
        event = TimelineEvent(
            category=category,
            messages=tuple(str(message) for message in messages),
            captured_at=self.clock(),
            logged_at=self.wall_clock(),
        )
        self.record(event)
        return event

    def record(self, event: TimelineEvent) -> None:
        """Append an already built event and hand it to the sink."""
        self.timeline.append(event)
        if self.sink is None:
            return
        try:
            self.sink.emit(self.options.label, event)
        except Exception:
            # The sink is fire-and-forget; collection must keep going.
            logger.warning(
                "Log sink failed to emit %r event", event.category, exc_info=True
            )
