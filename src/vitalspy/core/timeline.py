"""Append-only timeline of emitted events."""

from collections.abc import Iterator

from vitalspy.core.models import TimelineEvent

TIMELINE_PLACEHOLDER = "Not enough events to build a timeline (need at least 2)"


class TimelineLog:
    """Ordered record of every event logged during a session.

    Events are kept in append order. Chronological analysis sorts by the
    monotonic capture time instead, since events from independent observers
    can be appended out of order.
    """

    def __init__(self) -> None:
        self._events: list[TimelineEvent] = []

    def append(self, event: TimelineEvent) -> None:
        """Append an event. Never reorders existing events."""
        self._events.append(event)

    @property
    def events(self) -> tuple[TimelineEvent, ...]:
        """Events in append order."""
        return tuple(self._events)

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[TimelineEvent]:
        return iter(self.events)

    def analyze(self) -> Iterator[str]:
        """Yield the chronological report, one line per event.

        Lines read ``"<index>. <category> ➜ <delta>ms"`` with a 1-based index
        and the delta relative to the earliest event. With fewer than two
        events a single placeholder line is yielded instead.

        Each call returns a fresh iterator over the events present when it
        starts iterating.
        """
        events = sorted(self._events, key=lambda e: e.captured_at)
        if len(events) < 2:
            yield TIMELINE_PLACEHOLDER
            return
        origin = events[0].captured_at
        for index, event in enumerate(events, start=1):
            delta = round(event.captured_at - origin)
            yield f"{index}. {event.category} ➜ {delta}ms"
