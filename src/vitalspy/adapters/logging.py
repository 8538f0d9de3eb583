"""Python logging adapters for vitalspy.

``LoggingSink`` writes emitted events to a standard library logger as a
console group. ``TimelineHandler`` goes the other way: it bridges records
from the ``logging`` module onto a session's timeline, so structural checks
running outside the core can report their findings with plain logging calls.
"""

import logging

from vitalspy.core.encoding.console import format_group
from vitalspy.core.models import TimelineEvent
from vitalspy.core.session import Session

DEFAULT_SINK_LOGGER = "vitalspy.timeline"


class LoggingSink:
    """Log sink that writes console groups to a ``logging.Logger``.

    Example:
        ```python
        from vitalspy import PerformanceMonitor
        from vitalspy.adapters.logging import LoggingSink

        monitor = PerformanceMonitor(sink=LoggingSink())
        ```
    """

    def __init__(
        self,
        logger: logging.Logger | None = None,
        level: int = logging.WARNING,
    ) -> None:
        """Initialize the sink.

        Args:
            logger: Target logger. Defaults to ``vitalspy.timeline``.
            level: Level of the emitted records. Defaults to WARNING, matching
                the warning-style console groups of the page monitor.
        """
        self._logger = logger or logging.getLogger(DEFAULT_SINK_LOGGER)
        self._level = level

    def emit(self, label: str, event: TimelineEvent) -> None:
        """Write one event as a single multi-line record."""
        if not self._logger.isEnabledFor(self._level):
            return
        self._logger.log(
            self._level,
            "\n".join(format_group(label, event)),
            extra={"category": event.category, "captured_at": event.captured_at},
        )


class TimelineHandler(logging.Handler):
    """Logging handler that records log records as timeline events.

    The category is taken from ``extra={"category": ...}`` and defaults to
    the logger name. Additional message lines can be passed with
    ``extra={"issues": [...]}``.

    Example:
        ```python
        handler = TimelineHandler(monitor.session)
        log = logging.getLogger("checks.dom")
        log.addHandler(handler)
        log.warning(
            "2 images missing dimensions (causes CLS)",
            extra={"category": "DOM Issues"},
        )
        ```
    """

    def __init__(self, session: Session, level: int = logging.NOTSET) -> None:
        """Initialize the handler with the session to record into.

        Args:
            session: Session whose timeline receives the events.
            level: Minimum level of records to record.
        """
        super().__init__(level)
        self._session = session

    def emit(self, record: logging.LogRecord) -> None:
        """Record a log record on the session timeline.

        Args:
            record: The log record to emit.
        """
        category = getattr(record, "category", None) or record.name
        lines = [record.getMessage()]

        issues = getattr(record, "issues", None)
        if isinstance(issues, (list, tuple)):
            lines.extend(str(issue) for issue in issues)

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            if exc_type is not None:
                lines.append(f"{exc_type.__name__}: {exc_value}")

        self._session.log(str(category), lines)
