"""High level entry point wiring a session to its host."""

import logging
from collections.abc import Callable, Iterable
from typing import Any

from vitalspy.config import MonitorConfig
from vitalspy.core.collector import Collector
from vitalspy.core.lifecycle import SessionLifecycleController
from vitalspy.core.models import Report, SignalChannel, TimelineEvent
from vitalspy.core.ports import LogSinkPort, ObservationSourcePort, SessionBoundaryPort
from vitalspy.core.report import ReportBuilder
from vitalspy.core.session import Session, monotonic_ms, wall_clock_iso

logger = logging.getLogger(__name__)


class PerformanceMonitor:
    """One monitoring session of one page.

    Configuration is validated when the monitor (or its MonitorConfig) is
    constructed, before anything is subscribed. A monitor covers a single
    session; create a new one to start over.

    Example:
        ```python
        source = InMemoryObservationSource()
        boundary = InMemorySessionBoundary()
        monitor = PerformanceMonitor(sink=LoggingSink())
        monitor.start(source, boundary)

        source.push("largest-contentful-paint", [{"renderTime": 1800}])
        boundary.hide()
        report = monitor.get_report({"url": "https://example.com"})
        ```
    """

    def __init__(
        self,
        config: MonitorConfig | None = None,
        sink: LogSinkPort | None = None,
        clock: Callable[[], float] = monotonic_ms,
        wall_clock: Callable[[], str] = wall_clock_iso,
    ) -> None:
        """Initialize the monitor.

        Args:
            config: Thresholds, weights and session tunables.
            sink: Optional sink receiving every logged event.
            clock: Monotonic clock in milliseconds.
            wall_clock: Wall clock used for display timestamps.
        """
        self.config = config or MonitorConfig()
        self.session = Session(
            scoring=self.config.scoring,
            options=self.config.options,
            sink=sink,
            clock=clock,
            wall_clock=wall_clock,
        )
        self.collector = Collector(self.session)
        self.lifecycle = SessionLifecycleController(self.session)
        self.reports = ReportBuilder(self.session)

    def start(
        self,
        source: ObservationSourcePort,
        boundary: SessionBoundaryPort | None = None,
    ) -> dict[SignalChannel, bool]:
        """Subscribe to ``source`` and finalize on ``boundary``'s hidden signal.

        Returns:
            Whether each channel is supported by the source.
        """
        supported = self.collector.attach(source)
        if boundary is not None:
            self.lifecycle.attach(boundary)
        logger.debug(
            "Monitoring started on %d/%d channels",
            sum(supported.values()),
            len(supported),
        )
        return supported

    def finalize(self) -> bool:
        """Finalize the session now. Returns False if it already was."""
        return self.lifecycle.finalize()

    def log(self, category: str, messages: Iterable[str]) -> TimelineEvent:
        """Record findings of an external check on the timeline."""
        return self.session.log(category, messages)

    def get_report(self, environment: Any = None) -> Report:
        """Snapshot the session. Safe to call at any time."""
        return self.reports.snapshot(environment)
