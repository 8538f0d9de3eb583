"""In-memory log sink."""

from vitalspy.core.encoding.console import format_group
from vitalspy.core.models import TimelineEvent


class InMemorySink:
    """In-memory implementation of LogSinkPort.

    Keeps every emitted event and its console-group rendering. Suitable for
    testing and for hosts that display the log themselves.
    """

    def __init__(self) -> None:
        self.events: list[TimelineEvent] = []
        self.lines: list[str] = []

    def emit(self, label: str, event: TimelineEvent) -> None:
        """Store the event and its formatted lines."""
        self.events.append(event)
        self.lines.extend(format_group(label, event))

    def categories(self) -> list[str]:
        """Categories of the stored events, in emission order."""
        return [event.category for event in self.events]
